from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sharenote.config import Config
from sharenote.core.core import Core
from sharenote.core.modules.alias.models import AliasRecord, AliasSummary


class App:
    """Facade for alias store operations, checks the shared secret before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def share_note(self, alias: str | None, token: str | None, title: str | None) -> AliasRecord:
        """Store a token under an alias, overwriting any previous record."""
        return await self._core.services.alias.put(alias, token, title)

    async def get_shared_note(self, alias: str) -> AliasRecord:
        """Get a shared note by alias and count the view."""
        return await self._core.services.alias.get(alias)

    async def check_alias(self, alias: str) -> bool:
        """Check whether an alias is still free."""
        return await self._core.services.alias.check_available(alias)

    async def delete_shared_note(self, master_key: str | None, alias: str) -> None:
        """Delete a shared note (shared secret required)."""
        self._core.services.access.ensure_master_key(master_key)
        await self._core.services.alias.delete(alias)

    async def list_shared_notes(self, master_key: str | None) -> list[AliasSummary]:
        """List all shared notes (shared secret required)."""
        self._core.services.access.ensure_master_key(master_key)
        return await self._core.services.alias.list_all()
