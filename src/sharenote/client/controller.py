"""Editor controller: explicit editor state plus debounced render and autosave."""

from dataclasses import dataclass
from typing import Protocol

import structlog

from sharenote.client.debounce import Debouncer
from sharenote.client.links import LinkBuilder
from sharenote.client.mirror import LocalMirror
from sharenote.client.models import Note, ShareLink
from sharenote.client.notes import NoteStore
from sharenote.client.settings import SettingsStore
from sharenote.errors import ShareError, ValidationError

logger = structlog.get_logger(__name__)

PREVIEW_DELAY = 0.3
AUTOSAVE_DELAY = 0.5
PREVIEW_TASK = "preview"
AUTOSAVE_TASK = "autosave"


class Renderer(Protocol):
    """Markdown to sanitized HTML."""

    def render(self, markdown_text: str) -> str: ...


@dataclass
class EditorState:
    """Everything the editor shows: the open note id and the unsaved buffers."""

    current_note_id: str | None = None
    title: str = ""
    alias: str = ""
    content: str = ""
    preview_html: str = ""
    last_share: ShareLink | None = None


class EditorController:
    def __init__(
        self,
        notes: NoteStore,
        settings: SettingsStore,
        renderer: Renderer,
        link_builder: LinkBuilder | None = None,
        mirror: LocalMirror | None = None,
        debouncer: Debouncer | None = None,
        preview_delay: float = PREVIEW_DELAY,
        autosave_delay: float = AUTOSAVE_DELAY,
    ) -> None:
        self.notes = notes
        self.settings = settings
        self.renderer = renderer
        self.link_builder = link_builder
        self.mirror = mirror
        self.debouncer = debouncer or Debouncer()
        self.preview_delay = preview_delay
        self.autosave_delay = autosave_delay
        self.state = EditorState()

    def start(self) -> Note:
        """Open the most recent note, creating one if the store is empty."""
        existing = self.notes.list_notes()
        if existing:
            return self.open(existing[0].id)
        return self.new_note()

    def open(self, note_id: str) -> Note:
        self.debouncer.cancel_all()
        note = self.notes.get(note_id)
        self.state.current_note_id = note.id
        self.state.title = note.title
        self.state.alias = note.alias
        self.state.content = note.content
        self.state.last_share = None
        self.render_preview()
        return note

    def new_note(self) -> Note:
        note = self.notes.create()
        return self.open(note.id)

    def current_note(self) -> Note | None:
        if self.state.current_note_id is None:
            return None
        return self.notes.get(self.state.current_note_id)

    def on_edit(self, text: str) -> None:
        """Buffer editor input; preview and autosave run once typing pauses."""
        self.state.content = text
        self.debouncer.schedule(PREVIEW_TASK, self.preview_delay, self._preview_and_autosave)

    def on_metadata_edit(self, title: str | None = None, alias: str | None = None) -> None:
        if title is not None:
            self.state.title = title
        if alias is not None:
            self.state.alias = alias
        self.debouncer.schedule(AUTOSAVE_TASK, self.autosave_delay, self.autosave)

    def _preview_and_autosave(self) -> None:
        self.render_preview()
        self.autosave()

    def render_preview(self) -> str:
        self.state.preview_html = self.renderer.render(self.state.content)
        return self.state.preview_html

    def autosave(self) -> bool:
        """Persist the buffers if auto-save is on. Alias conflicts are skipped silently."""
        if self.state.current_note_id is None or not self.settings.settings.auto_save:
            return False
        try:
            self._write_buffers(self.state.current_note_id)
        except ValidationError:
            # Revert the alias buffer to what the note actually holds
            note = self.notes.get(self.state.current_note_id)
            self.state.alias = note.alias
            logger.debug("autosave_alias_conflict", note_id=note.id)
            return False
        return True

    def save(self) -> Note:
        """Explicit save.

        Raises:
            ValidationError: If the alias is used by another note
        """
        if self.state.current_note_id is None:
            raise ValidationError("No note selected")
        self.debouncer.cancel_all()
        return self._write_buffers(self.state.current_note_id)

    def _write_buffers(self, note_id: str) -> Note:
        note = self.notes.update(
            note_id,
            title=self.state.title,
            alias=self.state.alias,
            content=self.state.content,
        )
        self.state.title = note.title
        self.state.alias = note.alias
        return note

    def delete_current(self) -> Note:
        """Delete the open note and open the next one (or a fresh one)."""
        if self.state.current_note_id is None:
            raise ValidationError("No note selected")
        self.debouncer.cancel_all()
        self.notes.delete(self.state.current_note_id)
        self.state.current_note_id = None
        return self.start()

    def restore_version(self, index: int) -> Note:
        """Restore a version; the current content is kept as a version first."""
        note_id = self.state.current_note_id
        versions = self.notes.versions
        if note_id is None or versions is None:
            raise ValidationError("No version history available")
        version = versions.get_version(note_id, index)
        if version is None:
            raise ValidationError("Version not found")

        versions.save_version(note_id, self.state.content)
        self.state.content = version.content
        self.render_preview()
        return self.save()

    async def share(self) -> ShareLink:
        """Save pending edits, build the share link and record it in the local mirror.

        Raises:
            ShareError: If no link builder is configured or the note cannot be encoded
            ValidationError: If the pending alias conflicts with another note
        """
        if self.link_builder is None:
            raise ShareError("Sharing is not configured")
        note = self.save()
        link = await self.link_builder.build_share_url(note)
        if self.mirror is not None:
            self.mirror.record_share(note, link.url, link.token)
        self.state.last_share = link
        logger.info(
            "note_shared", note_id=note.id, alias=link.alias, alias_saved=link.alias_saved, truncated=link.truncated
        )
        return link
