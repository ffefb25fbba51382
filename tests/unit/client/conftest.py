import pytest

from sharenote.client.notes import NoteStore
from sharenote.client.storage import LocalStorage
from sharenote.client.versions import VersionHistory


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "data")


@pytest.fixture
def versions(storage) -> VersionHistory:
    return VersionHistory(storage)


@pytest.fixture
def notes(storage, versions) -> NoteStore:
    return NoteStore(storage, versions)
