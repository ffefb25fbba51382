"""Per-note version history, newest first, capped."""

import structlog
from pydantic import ValidationError

from sharenote.client.models import NoteVersion
from sharenote.client.storage import LocalStorage

logger = structlog.get_logger(__name__)

VERSIONS_KEY = "markdown_notes_versions"
DEFAULT_MAX_VERSIONS = 10
PREVIEW_LENGTH = 100


class VersionHistory:
    def __init__(self, storage: LocalStorage, max_versions: int = DEFAULT_MAX_VERSIONS) -> None:
        self._storage = storage
        self.max_versions = max_versions
        self._versions: dict[str, list[NoteVersion]] = {}
        self.load()

    def load(self) -> None:
        raw = self._storage.get(VERSIONS_KEY, {})
        if not isinstance(raw, dict):
            logger.error("versions_blob_invalid", type=type(raw).__name__)
            raw = {}
        try:
            self._versions = {
                note_id: [NoteVersion.model_validate(v) for v in versions] for note_id, versions in raw.items()
            }
        except (TypeError, ValidationError) as e:
            logger.error("versions_blob_invalid", error=str(e))
            self._versions = {}

    def _save(self) -> None:
        self._storage.set(
            VERSIONS_KEY,
            {note_id: [v.to_json_dict() for v in versions] for note_id, versions in self._versions.items()},
        )

    def save_version(self, note_id: str, content: str) -> NoteVersion | None:
        """Record a snapshot; skipped when identical to the newest one."""
        versions = self._versions.setdefault(note_id, [])
        if versions and versions[0].content == content:
            return None

        version = NoteVersion(content=content, preview=content[:PREVIEW_LENGTH])
        versions.insert(0, version)
        del versions[self.max_versions :]  # Oldest entries go first
        self._save()
        return version

    def get_versions(self, note_id: str) -> list[NoteVersion]:
        return list(self._versions.get(note_id, []))

    def get_version(self, note_id: str, index: int) -> NoteVersion | None:
        versions = self._versions.get(note_id, [])
        if 0 <= index < len(versions):
            return versions[index]
        return None

    def remove(self, note_id: str) -> None:
        if self._versions.pop(note_id, None) is not None:
            self._save()

    def clear(self) -> None:
        self._versions = {}
        self._save()
