from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Alias store server configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 3100
    debug: bool = False
    master_key: str  # Shared secret for delete/list, sent in the X-Master-Key header
    cors_origins: list[str] = ["*"]
    base_url: str = ""  # Public URL of the viewer, e.g. https://notes.example.com (informational)

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SHARENOTE_",
        "extra": "ignore",
    }
