"""Client-side data models.

Persisted models use camelCase keys so that stored blobs and JSON backups stay
compatible with the browser editor's format.
"""

import random
import string
import time
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator
from pydantic.alias_generators import to_camel

from sharenote.utils import now

DEFAULT_NOTE_TITLE = "Untitled Note"
DEFAULT_SHARED_TITLE = "Shared Note"


def generate_note_id() -> str:
    """Generate an opaque note id like ``note_1718000000000_k3j9x0a1b``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"note_{int(time.time() * 1000)}_{suffix}"


class ClientModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Note(ClientModel):
    """Editable markdown note."""

    id: str = Field(default_factory=generate_note_id)
    title: str = DEFAULT_NOTE_TITLE
    alias: str = ""  # Normalized, unique across the note store when non-empty
    content: str = ""
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class NoteVersion(ClientModel):
    """Snapshot of a note's content."""

    timestamp: datetime = Field(default_factory=now)
    content: str
    preview: str = ""  # First 100 characters of content


class Settings(ClientModel):
    """Editor preferences."""

    auto_save: bool = True
    spell_check: bool = True
    line_numbers: bool = False
    theme: str = "dark"
    font_size: int = Field(default=14, ge=8, le=40)
    font: str = "monospace"


class SharedLinkEntry(ClientModel):
    """Locally cached record of a share action."""

    id: str
    title: str
    alias: str = ""
    share_url: str
    token: str = Field(alias="data")  # Stored as "data" in the manifest
    shared_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None


class MirrorManifest(ClientModel):
    """Serialized form of the local mirror, also the format of exported manifests."""

    version: str = "1.0"
    last_updated: datetime = Field(default_factory=now)
    base_url: str = ""
    notes: dict[str, SharedLinkEntry] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)  # alias -> token


class SharePayload(BaseModel):
    """Compact note payload carried inside a share token."""

    title: str = Field(default=DEFAULT_SHARED_TITLE, alias="t")
    content: str = Field(default="", alias="c")
    shared_at: datetime = Field(default_factory=now, alias="d")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title", mode="before")
    @classmethod
    def _default_empty_title(cls, value: Any) -> Any:
        return value or DEFAULT_SHARED_TITLE

    @field_validator("content", mode="before")
    @classmethod
    def _default_empty_content(cls, value: Any) -> Any:
        return value or ""

    @field_validator("shared_at", mode="wrap")
    @classmethod
    def _lenient_timestamp(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> datetime:
        # The timestamp is informational; a bad one must not make the link unreadable
        try:
            return handler(value)
        except ValidationError:
            return now()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class SharedNote(BaseModel):
    """Read-only note resolved from an incoming link."""

    title: str
    content: str
    shared_at: datetime
    alias: str | None = None
    views: int | None = None  # Only known for alias links
    embed: bool = False


class ShareLink(BaseModel):
    """Result of a share action."""

    url: str  # Canonical link: short alias URL when the alias write succeeded
    token: str  # Token the canonical link resolves to
    fallback_url: str  # Self-contained /view?d=<token> link, always computed
    shared_at: datetime
    truncated: bool = False  # True when fallback_url carries shortened content
    alias: str | None = None
    alias_saved: bool = False
    alias_error: str | None = None


class AliasNoteData(BaseModel):
    """Alias store response for a single alias."""

    data: str
    title: str
    created_at: datetime = Field(alias="createdAt")
    views: int

    model_config = ConfigDict(populate_by_name=True)


class AliasListItem(BaseModel):
    alias: str
    title: str
    created_at: datetime = Field(alias="createdAt")
    views: int = 0

    model_config = ConfigDict(populate_by_name=True)
