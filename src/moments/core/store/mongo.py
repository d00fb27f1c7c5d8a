"""MongoDB document store."""

import re
from typing import Any
from urllib.parse import urlparse
from uuid import uuid4

import structlog
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from moments.core.store.base import (
    Condition,
    ConditionOperator,
    DocumentStore,
    Record,
    RecordPage,
    RecordQuery,
    build_page,
    parse_cursor,
)
from moments.errors import NotFoundError
from moments.utils import now

logger = structlog.get_logger(__name__)

DEFAULT_DATABASE = "moments"


def build_condition_query(condition: Condition) -> dict[str, Any]:
    """Build the MongoDB clause for a single condition."""
    path = f"properties.{condition.property}"
    if condition.operator == ConditionOperator.CONTAINS:
        return {path: {"$regex": re.escape(str(condition.value)), "$options": "i"}}
    # Equality on an array field matches any element, which is exactly INCLUDES
    return {path: condition.value}


def build_mongo_filter(conditions: list[Condition]) -> dict[str, Any]:
    """Build a MongoDB filter document for live records matching all conditions."""
    query: dict[str, Any] = {"archived": False}
    if conditions:
        query["$and"] = [build_condition_query(c) for c in conditions]
    return query


def to_record(doc: dict[str, Any]) -> Record:
    doc = dict(doc)
    doc["id"] = doc.pop("_id")
    return Record.model_validate(doc)


class MongoDocumentStore(DocumentStore):
    """Stores each record as a document in the `moments` collection."""

    def __init__(self, database_url: str) -> None:
        self._client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(database_url, tz_aware=True)
        database = self._client.get_database(urlparse(database_url).path[1:] or DEFAULT_DATABASE)
        self._collection = database.get_collection("moments")

    async def start(self) -> None:
        """Create indexes for newest-first listing."""
        await self._collection.create_index([("archived", 1), ("created_time", -1)])

    async def create(self, properties: dict[str, Any]) -> Record:
        record = Record(id=str(uuid4()), properties=dict(properties))
        doc = record.model_dump()
        doc["_id"] = doc.pop("id")
        await self._collection.insert_one(doc)
        logger.debug("record_created", record_id=record.id)
        return record

    async def get(self, record_id: str) -> Record:
        doc = await self._collection.find_one({"_id": record_id, "archived": False})
        if doc is None:
            raise NotFoundError(f"Record '{record_id}' not found")
        return to_record(doc)

    async def update(self, record_id: str, properties: dict[str, Any]) -> Record:
        changes: dict[str, Any] = {f"properties.{key}": value for key, value in properties.items()}
        changes["last_edited_time"] = now()
        doc = await self._collection.find_one_and_update(
            {"_id": record_id, "archived": False},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFoundError(f"Record '{record_id}' not found")
        return to_record(doc)

    async def archive(self, record_id: str) -> None:
        result = await self._collection.update_one(
            {"_id": record_id, "archived": False},
            {"$set": {"archived": True, "last_edited_time": now()}},
        )
        if result.matched_count == 0:
            raise NotFoundError(f"Record '{record_id}' not found")

    async def query(self, query: RecordQuery) -> RecordPage:
        offset = parse_cursor(query.cursor)
        mongo_filter = build_mongo_filter(query.conditions)

        total = await self._collection.count_documents(mongo_filter)
        cursor = self._collection.find(mongo_filter).sort([("created_time", -1), ("_id", -1)]).skip(offset).limit(query.page_size)
        docs = await cursor.to_list()

        logger.debug("records_queried", total=total, offset=offset, returned=len(docs))
        return build_page([to_record(doc) for doc in docs], total, offset)

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            logger.warning("document_store_unreachable", exc_info=True)
            return False
        return True

    async def close(self) -> None:
        await self._client.aclose()
