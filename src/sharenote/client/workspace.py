"""Wiring of the client components from a ClientConfig."""

from pathlib import Path

from sharenote.client.api import AliasClient
from sharenote.client.config import ClientConfig
from sharenote.client.controller import EditorController, Renderer
from sharenote.client.links import LinkBuilder
from sharenote.client.mirror import LocalMirror
from sharenote.client.notes import NoteStore
from sharenote.client.resolver import LinkResolver
from sharenote.client.settings import SettingsStore
from sharenote.client.storage import LocalStorage
from sharenote.client.versions import VersionHistory
from sharenote.codec import Codec


class Workspace:
    """Container providing storage, stores and network clients for one data directory."""

    def __init__(self, config: ClientConfig, renderer: Renderer) -> None:
        self.config = config
        self.storage = LocalStorage(Path(config.data_dir).expanduser())
        self.codec = Codec(compress=config.compress)
        self.alias_client = AliasClient(config.api_url or config.base_url, config.timeout, config.master_key)
        self.versions = VersionHistory(self.storage, config.max_versions)
        self.notes = NoteStore(self.storage, self.versions)
        self.settings = SettingsStore(self.storage)
        self.mirror = LocalMirror(self.storage, config.base_url)
        self.link_builder = LinkBuilder(config.base_url, self.codec, self.alias_client)
        self.resolver = LinkResolver(self.codec, self.alias_client, config.base_url)
        self.controller = EditorController(
            self.notes,
            self.settings,
            renderer,
            link_builder=self.link_builder,
            mirror=self.mirror,
            preview_delay=config.preview_delay,
            autosave_delay=config.autosave_delay,
        )

    async def close(self) -> None:
        self.controller.debouncer.cancel_all()
        await self.alias_client.close()
