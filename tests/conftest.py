"""Shared pytest fixtures.

MongoDB is replaced by an in-memory fake that supports the single-document
operations the alias service uses. Every fake operation yields to the event
loop once, so concurrent requests interleave like they would against a server.
"""

import asyncio
import copy
from collections.abc import AsyncGenerator
from types import SimpleNamespace
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from sharenote.app import App
from sharenote.config import Config
from sharenote.core.core import Core
from sharenote.web.server import create_fastapi_app

MASTER_KEY = "test-master-key"


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def __aiter__(self) -> "FakeCursor":
        return self

    async def __anext__(self) -> dict[str, Any]:
        if not self._docs:
            raise StopAsyncIteration
        await asyncio.sleep(0)
        return self._docs.pop(0)


class FakeCollection:
    """Dict-backed stand-in for AsyncCollection, keyed by _id."""

    def __init__(self) -> None:
        self.docs: dict[Any, dict[str, Any]] = {}
        self.fail_with: Exception | None = None

    async def _tick(self) -> None:
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    async def find_one(self, filter: dict[str, Any], projection: Any = None) -> dict[str, Any] | None:
        await self._tick()
        doc = self.docs.get(filter["_id"])
        return copy.deepcopy(doc) if doc is not None else None

    async def replace_one(self, filter: dict[str, Any], doc: dict[str, Any], upsert: bool = False) -> SimpleNamespace:
        await self._tick()
        key = filter["_id"]
        if key in self.docs or upsert:
            self.docs[key] = copy.deepcopy(doc)
        return SimpleNamespace(matched_count=int(key in self.docs))

    async def update_one(self, filter: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        await self._tick()
        doc = self.docs.get(filter["_id"])
        if doc is None:
            return SimpleNamespace(matched_count=0)
        doc.update(copy.deepcopy(update.get("$set", {})))
        return SimpleNamespace(matched_count=1)

    async def delete_one(self, filter: dict[str, Any]) -> SimpleNamespace:
        await self._tick()
        existed = self.docs.pop(filter["_id"], None) is not None
        return SimpleNamespace(deleted_count=int(existed))

    def find(self) -> FakeCursor:
        if self.fail_with is not None:
            raise self.fail_with
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs.values()])


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeMongoClient:
    def __init__(self, database: FakeDatabase, **options: Any) -> None:
        self.database = database
        self.options = options
        self.closed = False

    def get_database(self, name: str) -> FakeDatabase:
        return self.database

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    """Patch AsyncMongoClient so every Core talks to one in-memory database."""
    database = FakeDatabase()
    monkeypatch.setattr("sharenote.core.core.AsyncMongoClient", lambda *args, **kwargs: FakeMongoClient(database, **kwargs))
    return database


@pytest.fixture
def aliases(fake_db: FakeDatabase) -> FakeCollection:
    """The raw alias collection, for asserting on stored documents."""
    return fake_db.get_collection("aliases")


@pytest.fixture
def config() -> Config:
    return Config(database_url="mongodb://localhost:27017/sharenote_test", master_key=MASTER_KEY)


@pytest.fixture
def core(fake_db: FakeDatabase, config: Config) -> Core:
    return Core(config)


@pytest.fixture
def app_instance(fake_db: FakeDatabase, config: Config) -> App:
    return App(config)


@pytest.fixture
async def fastapi_app(app_instance: App, config: Config) -> AsyncGenerator[Any]:
    """FastAPI app with its lifespan running (ASGITransport does not run it)."""
    app = create_fastapi_app(app_instance, config)
    async with app.router.lifespan_context(app):
        yield app


@pytest.fixture
async def client(fastapi_app: Any) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the alias store API."""
    async with AsyncClient(
        transport=ASGITransport(app=fastapi_app, raise_app_exceptions=False), base_url="http://test"
    ) as test_client:
        yield test_client
