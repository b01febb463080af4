"""Task operations scoped to a single owner.

This is the only module that reads or writes the ``task`` collection. Every
lookup of a single task goes through ``_owned`` so that a task belonging to
someone else and a task that does not exist produce the same NotFound.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from bson import ObjectId
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .database import DocumentStore
from .errors import NotFound, ValidationError, describe_errors, summarize_errors
from .schemas import DeleteConfirmation, Task, TaskCreate, TaskStatus, TaskUpdate

logger = logging.getLogger(__name__)

COLLECTION = "task"

M = TypeVar("M", bound=BaseModel)


def _parse(model: Type[M], fields: Union[M, Mapping[str, Any]]) -> M:
    if isinstance(fields, model):
        return fields
    try:
        return model.model_validate(dict(fields))
    except PydanticValidationError as exc:
        described = describe_errors(exc.errors())
        raise ValidationError(summarize_errors(described), errors=described) from exc


def _owned(owner: str, task_id: str) -> Dict[str, Any]:
    # Malformed ids can't match anything; report them like any other miss
    if not ObjectId.is_valid(task_id):
        raise NotFound()
    return {"_id": ObjectId(task_id), "owner": owner}


class TaskService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def create(self, owner: str, fields: Union[TaskCreate, Mapping[str, Any]]) -> Task:
        payload = _parse(TaskCreate, fields)
        data = {**payload.to_document(), "owner": owner}
        created = await self.store.create_document(COLLECTION, data)
        logger.info("Created task %s for %s", created["_id"], owner)
        return Task.model_validate(created)

    async def list(self, owner: str, status: Optional[Union[TaskStatus, str]] = None) -> List[Task]:
        filter_dict: Dict[str, Any] = {"owner": owner}
        if status:
            try:
                filter_dict["status"] = TaskStatus(status).value
            except ValueError as exc:
                raise ValidationError(
                    f"status: unknown status {status!r}",
                    errors=[{"field": "status", "message": "Input should be 'Pending' or 'Completed'"}],
                ) from exc
        items = await self.store.get_documents(COLLECTION, filter_dict)
        logger.debug("Listed %d task(s) for %s (status=%s)", len(items), owner, status)
        return [Task.model_validate(it) for it in items]

    async def get(self, owner: str, task_id: str) -> Task:
        doc = await self.store.get_document(COLLECTION, _owned(owner, task_id))
        if not doc:
            raise NotFound()
        return Task.model_validate(doc)

    async def update(self, owner: str, task_id: str, fields: Union[TaskUpdate, Mapping[str, Any]]) -> Task:
        payload = _parse(TaskUpdate, fields)
        updates = payload.to_updates()
        if not updates:
            return await self.get(owner, task_id)
        doc = await self.store.update_document(COLLECTION, _owned(owner, task_id), updates)
        if not doc:
            raise NotFound()
        logger.debug("Updated task %s fields %s", task_id, sorted(updates))
        return Task.model_validate(doc)

    async def delete(self, owner: str, task_id: str) -> DeleteConfirmation:
        doc = await self.store.delete_document(COLLECTION, _owned(owner, task_id))
        if not doc:
            raise NotFound()
        logger.info("Deleted task %s for %s", task_id, owner)
        return DeleteConfirmation()
