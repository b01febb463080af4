# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from task_tracker.auth import get_token_verifier
from task_tracker.database import get_store
from task_tracker.main import app
from task_tracker.service import TaskService

from .fakes import FakeDocumentStore, FakeTokenVerifier

TOKENS = {"alice-token": "alice", "bob-token": "bob"}


@pytest.fixture()
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture()
def service(store: FakeDocumentStore) -> TaskService:
    return TaskService(store)


@pytest.fixture()
def client(store: FakeDocumentStore):
    """
    TestClient with the Mongo store and session lookup swapped for fakes.

    Not used as a context manager, so the lifespan (index creation) never runs.
    """
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_token_verifier] = lambda: FakeTokenVerifier(TOKENS)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def alice() -> dict[str, str]:
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture()
def bob() -> dict[str, str]:
    return {"Authorization": "Bearer bob-token"}
