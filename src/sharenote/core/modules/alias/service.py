import asyncio
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from sharenote import utils
from sharenote.core.core import Service
from sharenote.core.modules.alias.models import DEFAULT_RECORD_TITLE, AliasRecord, AliasSummary
from sharenote.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class AliasService(Service):
    """Key-value store mapping aliases to share tokens.

    Every operation touches a single document. There are no multi-alias
    transactions and concurrent puts on one alias race (last writer wins).
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("aliases")
        self._pending_view_updates: set[asyncio.Task[None]] = set()

    async def on_stop(self) -> None:
        """Let in-flight view counter updates finish before the client closes."""
        await self.drain()

    async def put(self, alias: str | None, token: str | None, title: str | None = None) -> AliasRecord:
        """Create or overwrite the record for an alias."""
        if not alias or not token:
            raise ValidationError("Missing alias or data")
        if not utils.is_valid_alias(alias):
            raise ValidationError("Invalid alias. Use 2-50 lowercase letters, digits, hyphens, or underscores.")

        record = AliasRecord(alias=alias, token=token, title=title or DEFAULT_RECORD_TITLE)
        await self._collection.replace_one({"_id": alias}, record.to_mongo(), upsert=True)
        logger.info("alias_saved", alias=alias, token_length=len(token))
        return record

    async def get(self, alias: str) -> AliasRecord:
        """Return the record with its view counter already incremented.

        The incremented counter is written back in the background. The response
        never waits for that write, and a failed write only gets logged.
        """
        doc = await self._collection.find_one({"_id": alias})
        if doc is None:
            raise NotFoundError
        record = AliasRecord.model_validate(doc)
        record.views += 1

        task = asyncio.create_task(self._store_views(alias, record.views))
        self._pending_view_updates.add(task)
        task.add_done_callback(self._pending_view_updates.discard)
        return record

    async def delete(self, alias: str) -> None:
        """Delete an alias. Deleting an absent alias is not an error."""
        result = await self._collection.delete_one({"_id": alias})
        logger.info("alias_deleted", alias=alias, existed=result.deleted_count > 0)

    async def list_all(self) -> list[AliasSummary]:
        """Return every stored alias. Full scan, no pagination."""
        records = await AliasRecord.list_cursor(self._collection.find())
        return [AliasSummary.from_record(record) for record in records]

    async def check_available(self, alias: str) -> bool:
        """Check whether an alias is free."""
        doc = await self._collection.find_one({"_id": alias}, projection={"_id": 1})
        return doc is None

    async def drain(self) -> None:
        """Wait for pending view counter updates."""
        if self._pending_view_updates:
            await asyncio.gather(*self._pending_view_updates, return_exceptions=True)

    async def _store_views(self, alias: str, views: int) -> None:
        # Read-then-write: concurrent readers may overwrite each other's increment
        try:
            await self._collection.update_one({"_id": alias}, {"$set": {"views": views}})
        except Exception as e:
            logger.warning("view_count_update_failed", alias=alias, views=views, error=str(e))
