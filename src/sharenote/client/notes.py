import json
import re
from pathlib import PurePath

import structlog
from pydantic import ValidationError as PydanticValidationError

from sharenote import utils
from sharenote.client.models import DEFAULT_NOTE_TITLE, Note
from sharenote.client.storage import LocalStorage
from sharenote.client.versions import VersionHistory
from sharenote.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

NOTES_KEY = "markdown_notes"
VERSION_DELTA_THRESHOLD = 50  # Content length change that triggers a version snapshot
MARKDOWN_SUFFIX_RE = re.compile(r"\.(md|txt|markdown)$", re.IGNORECASE)


class NoteStore:
    """Editable note collection, most recently touched first.

    Alias uniqueness is checked here at write time; the storage layer knows
    nothing about it.
    """

    def __init__(self, storage: LocalStorage, versions: VersionHistory | None = None) -> None:
        self._storage = storage
        self.versions = versions
        self._notes: list[Note] = []
        self.load()

    def load(self) -> None:
        raw = self._storage.get(NOTES_KEY, [])
        try:
            self._notes = [Note.model_validate(item) for item in raw]
        except (TypeError, PydanticValidationError) as e:
            logger.error("notes_blob_invalid", error=str(e))
            self._notes = []

    def _save(self) -> None:
        self._storage.set(NOTES_KEY, [note.to_json_dict() for note in self._notes])

    def _index(self, note_id: str) -> int:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        raise NotFoundError(f"Note '{note_id}' not found")

    def _ensure_alias_free(self, alias: str, note_id: str | None) -> None:
        if not alias:
            return
        owner = self.find_by_alias(alias)
        if owner is not None and owner.id != note_id:
            raise ValidationError("Alias already in use by another note")

    def get(self, note_id: str) -> Note:
        return self._notes[self._index(note_id)]

    def list_notes(self) -> list[Note]:
        return list(self._notes)

    def find_by_alias(self, alias: str) -> Note | None:
        alias = utils.normalize_alias(alias)
        if not alias:
            return None
        return next((note for note in self._notes if note.alias == alias), None)

    def search(self, query: str) -> list[Note]:
        """Case-insensitive substring search over title and content."""
        needle = query.strip().lower()
        if not needle:
            return self.list_notes()
        return [note for note in self._notes if needle in note.title.lower() or needle in note.content.lower()]

    def create(self, title: str | None = None, content: str = "", alias: str | None = None) -> Note:
        alias = utils.normalize_alias(alias)
        self._ensure_alias_free(alias, None)
        note = Note(title=(title or "").strip() or DEFAULT_NOTE_TITLE, content=content, alias=alias)
        self._notes.insert(0, note)
        self._save()
        logger.debug("note_created", note_id=note.id)
        return note

    def update(
        self, note_id: str, title: str | None = None, alias: str | None = None, content: str | None = None
    ) -> Note:
        """Update the given fields and move the note to the top.

        Raises:
            NotFoundError: If the note does not exist
            ValidationError: If the alias belongs to another note (nothing is changed)
        """
        index = self._index(note_id)
        current = self._notes[index]

        changes: dict[str, object] = {"updated_at": utils.now()}
        if title is not None:
            changes["title"] = title.strip() or DEFAULT_NOTE_TITLE
        if alias is not None:
            normalized = utils.normalize_alias(alias)
            self._ensure_alias_free(normalized, note_id)
            changes["alias"] = normalized
        if content is not None:
            changes["content"] = content
            if (
                self.versions is not None
                and content
                and current.content
                and abs(len(content) - len(current.content)) > VERSION_DELTA_THRESHOLD
            ):
                self.versions.save_version(note_id, current.content)

        updated = current.model_copy(update=changes)
        del self._notes[index]
        self._notes.insert(0, updated)
        self._save()
        return updated

    def delete(self, note_id: str) -> None:
        """Delete a note and its version history. Irreversible."""
        index = self._index(note_id)
        del self._notes[index]
        self._save()
        if self.versions is not None:
            self.versions.remove(note_id)
        logger.info("note_deleted", note_id=note_id)

    def duplicate(self, note_id: str) -> Note:
        source = self.get(note_id)
        return self.create(title=f"{source.title} (Copy)", content=source.content)

    def clear(self) -> None:
        self._notes = []
        self._save()
        if self.versions is not None:
            self.versions.clear()

    def export_backup(self) -> str:
        """Serialize all notes as a JSON array (the backup format)."""
        return json.dumps([note.to_json_dict() for note in self._notes], ensure_ascii=False, indent=2)

    def import_backup(self, text: str) -> list[Note]:
        """Import notes from a JSON backup.

        Each entry gets a fresh id; entries without title or content are skipped.
        Aliases that collide with existing notes are dropped.

        Raises:
            ValidationError: If the text is not a JSON array
        """
        try:
            entries = json.loads(text)
        except ValueError as e:
            raise ValidationError("Invalid JSON backup file") from e
        if not isinstance(entries, list):
            raise ValidationError("Invalid JSON backup file")

        imported: list[Note] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("title") or not entry.get("content"):
                continue
            alias = utils.normalize_alias(entry.get("alias"))
            if alias and self.find_by_alias(alias) is not None:
                alias = ""
            data = {"title": entry["title"], "content": entry["content"], "alias": alias}
            if entry.get("createdAt"):
                data["createdAt"] = entry["createdAt"]
            try:
                note = Note.model_validate(data)
            except PydanticValidationError as e:
                logger.warning("backup_entry_skipped", error=str(e))
                continue
            self._notes.insert(0, note)
            imported.append(note)

        self._save()
        logger.info("backup_imported", count=len(imported))
        return imported

    def import_markdown(self, filename: str, text: str) -> Note:
        """Create a note from a markdown or text file."""
        title = MARKDOWN_SUFFIX_RE.sub("", PurePath(filename).name)
        return self.create(title=title, content=text)
