import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from .config import settings
from .errors import StoreError

logger = logging.getLogger(__name__)

NEWEST_FIRST: Sequence[Tuple[str, int]] = (("createdAt", DESCENDING), ("_id", DESCENDING))

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


async def get_db() -> AsyncIOMotorDatabase:
    global _client, _db
    if _db is None:
        _client = AsyncIOMotorClient(settings.database_url)
        _db = _client[settings.database_name]
    return _db


async def close_db() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def _stringify_id(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc and "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.exception("%s on collection %r failed", operation, collection)
        raise StoreError() from exc


class DocumentStore:
    """Collection-generic document access over MongoDB.

    Every call takes a full filter dict; callers own scoping (e.g. by owner).
    Driver failures surface as StoreError.
    """

    def __init__(self, db: Optional[AsyncIOMotorDatabase] = None):
        self._db = db

    async def _database(self) -> AsyncIOMotorDatabase:
        return self._db if self._db is not None else await get_db()

    async def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        db = await self._database()
        now = datetime.utcnow()
        data = {**data, "createdAt": now, "updatedAt": now}
        with _store_errors("insert", collection):
            result = await db[collection].insert_one(data)
            created = await db[collection].find_one({"_id": result.inserted_id})
        if not created:
            logger.error("inserted document %s vanished from %r", result.inserted_id, collection)
            raise StoreError()
        return _stringify_id(created)

    async def get_documents(
        self,
        collection: str,
        filter_dict: Dict[str, Any] | None = None,
        sort: Sequence[Tuple[str, int]] = NEWEST_FIRST,
    ) -> List[Dict[str, Any]]:
        db = await self._database()
        items: List[Dict[str, Any]] = []
        with _store_errors("find", collection):
            cursor = db[collection].find(filter_dict or {}).sort(list(sort))
            async for doc in cursor:
                items.append(_stringify_id(doc))
        return items

    async def get_document(self, collection: str, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        db = await self._database()
        with _store_errors("find_one", collection):
            doc = await db[collection].find_one(filter_dict)
        return _stringify_id(doc)

    async def update_document(
        self, collection: str, filter_dict: Dict[str, Any], updates: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        db = await self._database()
        updates = {**updates, "updatedAt": datetime.utcnow()}
        with _store_errors("find_one_and_update", collection):
            result = await db[collection].find_one_and_update(
                filter_dict, {"$set": updates}, return_document=ReturnDocument.AFTER
            )
        return _stringify_id(result)

    async def delete_document(self, collection: str, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        db = await self._database()
        with _store_errors("find_one_and_delete", collection):
            result = await db[collection].find_one_and_delete(filter_dict)
        return _stringify_id(result)

    async def ensure_indexes(self) -> None:
        db = await self._database()
        with _store_errors("create_index", "task"):
            await db["task"].create_index(
                [("owner", ASCENDING), ("status", ASCENDING), ("createdAt", DESCENDING)]
            )
        with _store_errors("create_index", "session"):
            await db["session"].create_index("token", unique=True)


_store: Optional[DocumentStore] = None


def get_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide store."""
    global _store
    if _store is None:
        _store = DocumentStore()
    return _store
