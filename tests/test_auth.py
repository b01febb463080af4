# tests/test_auth.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from task_tracker.auth import Identity, SessionTokenVerifier

from .fakes import FakeDocumentStore


@pytest.fixture()
def verifier(store: FakeDocumentStore) -> SessionTokenVerifier:
    sessions = store.docs("session")
    sessions.append({"_id": "s1", "token": "live", "userId": "alice", "name": "Alice"})
    sessions.append(
        {"_id": "s2", "token": "stale", "userId": "bob", "expiresAt": datetime.utcnow() - timedelta(minutes=1)}
    )
    sessions.append(
        {"_id": "s3", "token": "fresh", "userId": "carol", "expiresAt": datetime.utcnow() + timedelta(hours=1)}
    )
    sessions.append({"_id": "s4", "token": "orphan"})
    return SessionTokenVerifier(store)


@pytest.mark.asyncio
async def test_known_token_resolves_identity(verifier: SessionTokenVerifier) -> None:
    assert await verifier.verify("live") == Identity(user_id="alice", name="Alice")
    assert await verifier.verify("fresh") == Identity(user_id="carol")


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["stale", "orphan", "unknown"])
async def test_unusable_tokens_are_rejected(verifier: SessionTokenVerifier, token: str) -> None:
    assert await verifier.verify(token) is None
