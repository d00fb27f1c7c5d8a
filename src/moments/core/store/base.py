"""Document store interface used as the persistence collaborator for moments."""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from moments.errors import ValidationError
from moments.utils import now


class ConditionOperator(StrEnum):
    """Filter predicates supported by every document store."""

    EQUALS = "equals"
    CONTAINS = "contains"  # case-insensitive substring of a text property
    INCLUDES = "includes"  # list property has the value as an element


class Condition(BaseModel):
    """Single filter predicate on a record property."""

    property: str = Field(..., description="Property name to filter on")
    operator: ConditionOperator = Field(..., description="Comparison operator")
    value: Any = Field(..., description="Value to compare against")


class RecordQuery(BaseModel):
    """Paginated query; conditions are combined with AND."""

    conditions: list[Condition] = Field(default_factory=list)
    page_size: int = Field(10, ge=1)
    cursor: str | None = None


class Record(BaseModel):
    """A stored document with typed properties."""

    id: str
    properties: dict[str, Any] = Field(default_factory=dict)
    created_time: datetime = Field(default_factory=now)
    last_edited_time: datetime = Field(default_factory=now)
    archived: bool = False


class RecordPage(BaseModel):
    """One page of query results, newest records first."""

    records: list[Record]
    total: int = Field(..., ge=0)
    has_more: bool
    next_cursor: str | None = None


def parse_cursor(cursor: str | None) -> int:
    """Decode an opaque page cursor into a record offset."""
    if cursor is None:
        return 0
    try:
        offset = int(cursor)
    except ValueError as e:
        raise ValidationError("Invalid cursor") from e
    if offset < 0:
        raise ValidationError("Invalid cursor")
    return offset


def build_page(records: list[Record], total: int, offset: int) -> RecordPage:
    end = offset + len(records)
    has_more = end < total
    return RecordPage(records=records, total=total, has_more=has_more, next_cursor=str(end) if has_more else None)


class DocumentStore(ABC):
    """Create, read, update, archive and query records.

    Archived records are invisible to get, update and query.
    """

    async def start(self) -> None:
        """Prepare the store on application startup."""

    @abstractmethod
    async def create(self, properties: dict[str, Any]) -> Record: ...

    @abstractmethod
    async def get(self, record_id: str) -> Record:
        """Return the record or raise NotFoundError."""

    @abstractmethod
    async def update(self, record_id: str, properties: dict[str, Any]) -> Record:
        """Merge properties into the record and bump last_edited_time."""

    @abstractmethod
    async def archive(self, record_id: str) -> None: ...

    @abstractmethod
    async def query(self, query: RecordQuery) -> RecordPage: ...

    @abstractmethod
    async def ping(self) -> bool:
        """Whether the backing storage is reachable."""

    async def close(self) -> None:
        """Release connections on application shutdown."""
