import pytest
from fastapi.testclient import TestClient

from notesapp.core.config import Settings
from notesapp.infrastructure.remote.memory import InMemoryRemote
from notesapp.main import create_app
from notesapp.repositories.note_repo import NoteRepository
from notesapp.services.note_service import NoteStore

EMAIL = "ana@example.com"
PASSWORD = "secret-123"


@pytest.fixture()
def remote() -> InMemoryRemote:
    return InMemoryRemote()


@pytest.fixture()
def signed_in_remote(remote: InMemoryRemote) -> InMemoryRemote:
    remote.sign_up(EMAIL, PASSWORD)
    remote.calls.clear()
    return remote


@pytest.fixture()
def store(signed_in_remote: InMemoryRemote) -> NoteStore:
    return NoteStore(NoteRepository(signed_in_remote))


def make_settings(**overrides) -> Settings:
    base = dict(remote_backend="memory", search_mode="remote", delete_cache_policy="local")
    base.update(overrides)
    return Settings(**base)


@pytest.fixture()
def client(signed_in_remote: InMemoryRemote):
    app = create_app(make_settings(), remote=signed_in_remote)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def anonymous_client(remote: InMemoryRemote):
    app = create_app(make_settings(), remote=remote)
    with TestClient(app) as c:
        yield c
