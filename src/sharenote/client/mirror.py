"""Local cache of everything this client has shared.

The mirror is never authoritative: the alias store owns alias-backed links, and
an entry without an alias can only be opened through its embedded token.
"""

from typing import Any

import structlog
from pydantic import ValidationError

from sharenote import utils
from sharenote.client.models import MirrorManifest, Note, SharedLinkEntry
from sharenote.client.storage import LocalStorage

logger = structlog.get_logger(__name__)

MIRROR_KEY = "shared_notes_data"


class LocalMirror:
    def __init__(self, storage: LocalStorage, base_url: str = "") -> None:
        self._storage = storage
        self.base_url = base_url.rstrip("/")
        self.data = self.load()

    def load(self) -> MirrorManifest:
        raw = self._storage.get(MIRROR_KEY)
        if raw is None:
            return MirrorManifest(base_url=self.base_url)
        try:
            return MirrorManifest.model_validate(raw)
        except ValidationError as e:
            logger.error("mirror_blob_invalid", error=str(e))
            return MirrorManifest(base_url=self.base_url)

    def _save(self) -> None:
        self.data.last_updated = utils.now()
        self._storage.set(MIRROR_KEY, self.data.to_json_dict())

    def record_share(self, note: Note, share_url: str, token: str) -> SharedLinkEntry:
        """Insert or replace the entry for a note."""
        alias = utils.normalize_alias(note.alias)
        entry = SharedLinkEntry(
            id=note.id,
            title=note.title,
            alias=alias,
            share_url=share_url,
            token=token,
            updated_at=note.updated_at,
        )
        self.data.notes[note.id] = entry
        if alias:
            self.data.aliases[alias] = token
        self._save()
        return entry

    def remove_share(self, note_id: str) -> None:
        """Forget a share locally. Does not touch the alias store."""
        if self.data.notes.pop(note_id, None) is not None:
            self._save()

    def get(self, note_id: str) -> SharedLinkEntry | None:
        return self.data.notes.get(note_id)

    def is_shared(self, note_id: str, alias: str | None = None) -> bool:
        return note_id in self.data.notes or bool(alias and alias in self.data.aliases)

    def list_entries(self, manifest: MirrorManifest | dict[str, Any] | None = None) -> list[SharedLinkEntry]:
        """Local entries merged over an optional external manifest; local wins on collisions."""
        merged: dict[str, SharedLinkEntry] = {}
        if manifest is not None:
            merged.update(self._coerce_manifest(manifest).notes)
        merged.update(self.data.notes)
        return list(merged.values())

    def merge_manifest(self, manifest: MirrorManifest | dict[str, Any]) -> int:
        """Persist entries from an external manifest that are not known locally.

        Returns the number of entries added.
        """
        external = self._coerce_manifest(manifest)
        added = [key for key in external.notes if key not in self.data.notes]
        self.data.notes = external.notes | self.data.notes
        self.data.aliases = external.aliases | self.data.aliases
        self._save()
        logger.debug("mirror_manifest_merged", added=len(added))
        return len(added)

    def export_manifest(self) -> dict[str, Any]:
        return self.data.to_json_dict()

    @staticmethod
    def _coerce_manifest(manifest: MirrorManifest | dict[str, Any]) -> MirrorManifest:
        if isinstance(manifest, MirrorManifest):
            return manifest
        try:
            return MirrorManifest.model_validate(manifest)
        except ValidationError as e:
            logger.warning("mirror_manifest_invalid", error=str(e))
            return MirrorManifest()
