# tests/test_service.py

from __future__ import annotations

import pytest

from task_tracker.errors import NotFound, StoreError, ValidationError
from task_tracker.schemas import Priority, TaskStatus
from task_tracker.service import TaskService

from .fakes import FakeDocumentStore


@pytest.mark.asyncio
async def test_create_applies_defaults_and_owner(service: TaskService) -> None:
    task = await service.create("alice", {"title": "Buy milk"})

    assert task.id
    assert task.owner == "alice"
    assert task.priority is Priority.MEDIUM
    assert task.status is TaskStatus.PENDING
    assert task.created_at is not None


@pytest.mark.asyncio
async def test_create_ignores_owner_in_fields(service: TaskService) -> None:
    task = await service.create("alice", {"title": "Mine", "owner": "bob"})

    assert task.owner == "alice"


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "    "])
async def test_create_blank_title_persists_nothing(
    service: TaskService, store: FakeDocumentStore, title: str
) -> None:
    with pytest.raises(ValidationError) as info:
        await service.create("alice", {"title": title})

    assert info.value.errors[0]["field"] == "title"
    assert store.docs("task") == []


@pytest.mark.asyncio
async def test_list_is_scoped_and_newest_first(service: TaskService) -> None:
    first = await service.create("alice", {"title": "one"})
    await service.create("bob", {"title": "not yours"})
    second = await service.create("alice", {"title": "two"})
    third = await service.create("alice", {"title": "three"})

    tasks = await service.list("alice")

    assert [t.id for t in tasks] == [third.id, second.id, first.id]


@pytest.mark.asyncio
async def test_list_filters_by_status(service: TaskService) -> None:
    done = await service.create("alice", {"title": "done", "status": "Completed"})
    await service.create("alice", {"title": "open"})
    await service.create("bob", {"title": "bob done", "status": "Completed"})

    completed = await service.list("alice", TaskStatus.COMPLETED)
    assert [t.id for t in completed] == [done.id]

    pending = await service.list("alice", "Pending")
    assert [t.title for t in pending] == ["open"]


@pytest.mark.asyncio
async def test_list_rejects_unknown_status(service: TaskService) -> None:
    with pytest.raises(ValidationError):
        await service.list("alice", "Archived")


@pytest.mark.asyncio
async def test_update_is_partial(service: TaskService) -> None:
    created = await service.create(
        "alice", {"title": "Buy milk", "description": "2L semi-skimmed", "priority": "High"}
    )

    updated = await service.update("alice", created.id, {"status": "Completed"})
    assert updated.status is TaskStatus.COMPLETED

    fetched = await service.get("alice", created.id)
    assert fetched.title == "Buy milk"
    assert fetched.description == "2L semi-skimmed"
    assert fetched.priority is Priority.HIGH
    assert fetched.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_cannot_change_owner(service: TaskService) -> None:
    created = await service.create("alice", {"title": "Mine"})

    updated = await service.update("alice", created.id, {"owner": "bob", "title": "Still mine"})

    assert updated.owner == "alice"
    assert await service.list("bob") == []


@pytest.mark.asyncio
async def test_update_with_nothing_to_change_returns_task(service: TaskService) -> None:
    created = await service.create("alice", {"title": "Mine"})

    same = await service.update("alice", created.id, {})

    assert same.id == created.id
    assert same.title == "Mine"


@pytest.mark.asyncio
async def test_update_validates_fields(service: TaskService) -> None:
    created = await service.create("alice", {"title": "Mine"})

    with pytest.raises(ValidationError):
        await service.update("alice", created.id, {"title": " "})
    with pytest.raises(ValidationError):
        await service.update("alice", created.id, {"priority": "Urgent"})

    assert (await service.get("alice", created.id)).title == "Mine"


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["get", "update", "delete"])
async def test_foreign_task_looks_missing(service: TaskService, operation: str) -> None:
    created = await service.create("alice", {"title": "Private"})
    missing_id = "65f000000000000000000099"

    async def attempt(task_id: str) -> str:
        with pytest.raises(NotFound) as info:
            if operation == "get":
                await service.get("bob", task_id)
            elif operation == "update":
                await service.update("bob", task_id, {"title": "Hijacked"})
            else:
                await service.delete("bob", task_id)
        return str(info.value)

    assert await attempt(created.id) == await attempt(missing_id)
    assert (await service.get("alice", created.id)).title == "Private"


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["not-an-id", "123", ""])
async def test_malformed_id_is_not_found(service: TaskService, bad_id: str) -> None:
    with pytest.raises(NotFound):
        await service.get("alice", bad_id)


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(service: TaskService) -> None:
    created = await service.create("alice", {"title": "Buy milk"})

    confirmation = await service.delete("alice", created.id)
    assert confirmation.message == "Task deleted"

    with pytest.raises(NotFound):
        await service.get("alice", created.id)
    with pytest.raises(NotFound):
        await service.delete("alice", created.id)


@pytest.mark.asyncio
async def test_store_failure_propagates(service: TaskService, store: FakeDocumentStore) -> None:
    store.fail = True

    with pytest.raises(StoreError):
        await service.list("alice")
