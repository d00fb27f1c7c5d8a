"""In-process document store, used when no database URL is configured."""

from typing import Any
from uuid import uuid4

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


def matches(properties: dict[str, Any], condition: Condition) -> bool:
    """Evaluate a single condition against record properties."""
    actual = properties.get(condition.property)
    if condition.operator == ConditionOperator.EQUALS:
        return bool(actual == condition.value)
    if condition.operator == ConditionOperator.CONTAINS:
        return isinstance(actual, str) and str(condition.value).casefold() in actual.casefold()
    if condition.operator == ConditionOperator.INCLUDES:
        return isinstance(actual, list) and condition.value in actual
    raise ValueError(f"Operator {condition.operator} not supported - programming error")


class InMemoryDocumentStore(DocumentStore):
    """Keeps records in a dict; contents are lost on restart."""

    def __init__(self) -> None:
        self._records: dict[str, Record] = {}

    async def create(self, properties: dict[str, Any]) -> Record:
        record = Record(id=str(uuid4()), properties=dict(properties))
        self._records[record.id] = record
        return record.model_copy(deep=True)

    async def get(self, record_id: str) -> Record:
        return self._get_live(record_id).model_copy(deep=True)

    async def update(self, record_id: str, properties: dict[str, Any]) -> Record:
        record = self._get_live(record_id)
        record.properties.update(properties)
        record.last_edited_time = now()
        return record.model_copy(deep=True)

    async def archive(self, record_id: str) -> None:
        record = self._get_live(record_id)
        record.archived = True
        record.last_edited_time = now()

    async def query(self, query: RecordQuery) -> RecordPage:
        offset = parse_cursor(query.cursor)
        # Insertion order is creation order; newest first
        found = [
            record
            for record in reversed(self._records.values())
            if not record.archived and all(matches(record.properties, c) for c in query.conditions)
        ]
        page = [record.model_copy(deep=True) for record in found[offset : offset + query.page_size]]
        return build_page(page, len(found), offset)

    async def ping(self) -> bool:
        return True

    def _get_live(self, record_id: str) -> Record:
        record = self._records.get(record_id)
        if record is None or record.archived:
            raise NotFoundError(f"Record '{record_id}' not found")
        return record
