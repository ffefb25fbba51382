from pydantic_settings import BaseSettings


class ClientConfig(BaseSettings):
    """Client configuration loaded from environment variables."""

    base_url: str  # Public viewer URL used in share links, e.g. https://notes.example.com
    api_url: str | None = None  # Alias store URL; defaults to base_url
    data_dir: str = "~/.local/share/sharenote"
    timeout: float = 10.0
    master_key: str | None = None  # Only needed to list or delete aliases
    compress: bool = True
    preview_delay: float = 0.3
    autosave_delay: float = 0.5
    max_versions: int = 10

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SHARENOTE_CLIENT_",
        "extra": "ignore",
    }
