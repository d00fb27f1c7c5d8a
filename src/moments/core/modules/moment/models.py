from datetime import datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field

from moments.core.store import Condition, ConditionOperator, Record

TITLE_LENGTH = 20  # Titles are the leading characters of the content


class MomentStatus(StrEnum):
    FLASH = "flash"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Moment(BaseModel):
    """A single journal entry."""

    id: str = Field(..., description="Record identifier")
    title: str = Field(..., description="First characters of the content")
    content: str
    tags: list[str] = Field(default_factory=list)
    status: MomentStatus = MomentStatus.FLASH
    images: list[str] = Field(default_factory=list, description="Image URLs")
    videos: list[str] = Field(default_factory=list, description="Video URLs")
    favorited: bool = False
    created_time: datetime
    last_edited_time: datetime

    @classmethod
    def from_record(cls, record: Record) -> Self:
        return cls.model_validate(
            {
                **record.properties,
                "id": record.id,
                "created_time": record.created_time,
                "last_edited_time": record.last_edited_time,
            }
        )


class MomentCreate(BaseModel):
    """Request to create a moment."""

    content: str = Field(..., min_length=1, description="Moment text")
    tags: list[str] = Field(default_factory=list)
    status: MomentStatus = MomentStatus.FLASH
    images: list[str] = Field(default_factory=list, description="URLs returned by the upload endpoints")
    videos: list[str] = Field(default_factory=list, description="URLs returned by the upload endpoints")
    favorited: bool = False

    def to_properties(self) -> dict[str, Any]:
        properties = self.model_dump(mode="json")
        properties["title"] = self.content[:TITLE_LENGTH]
        return properties


class MomentUpdate(BaseModel):
    """Partial update; only provided fields change."""

    content: str | None = Field(None, min_length=1)
    tags: list[str] | None = None
    status: MomentStatus | None = None
    images: list[str] | None = None
    videos: list[str] | None = None
    favorited: bool | None = None

    def to_properties(self) -> dict[str, Any]:
        properties = self.model_dump(mode="json", exclude_none=True)
        if "content" in properties:
            properties["title"] = properties["content"][:TITLE_LENGTH]
        return properties


class MomentFilter(BaseModel):
    """Optional list filters, combined with AND."""

    status: MomentStatus | None = None
    tag: str | None = None
    favorited: bool | None = None
    search: str | None = None  # case-insensitive title substring

    def to_conditions(self) -> list[Condition]:
        conditions = []
        if self.status is not None:
            conditions.append(Condition(property="status", operator=ConditionOperator.EQUALS, value=self.status.value))
        if self.tag:
            conditions.append(Condition(property="tags", operator=ConditionOperator.INCLUDES, value=self.tag))
        if self.favorited is not None:
            conditions.append(Condition(property="favorited", operator=ConditionOperator.EQUALS, value=self.favorited))
        if self.search:
            conditions.append(Condition(property="title", operator=ConditionOperator.CONTAINS, value=self.search))
        return conditions


class MomentList(BaseModel):
    """One page of moments."""

    moments: list[Moment]
    total: int = Field(..., description="Number of moments matching the filters", ge=0)
    has_more: bool
    next_cursor: str | None = Field(None, description="Pass as `cursor` to fetch the next page")


class TagCount(BaseModel):
    name: str
    count: int = Field(..., ge=1)
