"""Task data models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Category = Literal["work", "personal", "shopping", "other"]
Priority = Literal["low", "medium", "high"]
SortField = Literal["priority", "deadline", "created_at"]
SortDirection = Literal["asc", "desc"]
FilterType = Literal["all", "pending", "completed", "high-priority"]

CATEGORIES: tuple[Category, ...] = ("work", "personal", "shopping", "other")
PRIORITIES: tuple[Priority, ...] = ("low", "medium", "high")
SORT_FIELDS: tuple[SortField, ...] = ("priority", "deadline", "created_at")
SORT_DIRECTIONS: tuple[SortDirection, ...] = ("asc", "desc")
FILTER_TYPES: tuple[FilterType, ...] = ("all", "pending", "completed", "high-priority")

PRIORITY_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}


def ensure_aware(value: datetime | None) -> datetime | None:
    """Interpret naive datetimes as local time and attach the local offset."""
    if value is None or value.tzinfo is not None:
        return value
    return value.astimezone()


class Task(BaseModel):
    """Task model representing a stored task record.

    Attributes:
        id: Unique identifier assigned by the store
        title: Task title
        description: Free-form description, may be empty
        category: One of work, personal, shopping, other
        priority: One of low, medium, high
        completed: Completion status
        progress: Progress percentage (0-100)
        deadline: Optional deadline
        created_at: Creation timestamp (wire key ``createdAt``)
        owner_id: Owning user (wire key ``userId``)
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str = ""
    category: Category = "personal"
    priority: Priority = "medium"
    completed: bool = False
    progress: int = Field(default=0, ge=0, le=100)
    deadline: datetime | None = None
    created_at: datetime = Field(alias="createdAt")
    owner_id: str = Field(alias="userId")

    @field_validator("deadline", "created_at")
    @classmethod
    def _make_aware(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v)

    @classmethod
    def from_document(cls, task_id: str, document: dict) -> Task:
        """Build a task from a stored document and its id."""
        return cls.model_validate({**document, "id": task_id})

    def to_document(self) -> dict:
        """Serialize to the wire document (camelCase keys, no id)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})


class TaskDraft(BaseModel):
    """User input for a new task.

    ``deadline`` accepts a datetime, an ISO-8601 string (as produced by a
    ``datetime-local`` input) or an empty string for "no deadline". Parsing
    happens when the draft is submitted.
    """

    title: str
    description: str = ""
    category: Category = "personal"
    priority: Priority = "medium"
    deadline: datetime | str | None = None


class TaskCreate(BaseModel):
    """A task record without its id, as handed to the store on creation."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    category: Category = "personal"
    priority: Priority = "medium"
    completed: bool = False
    progress: int = Field(default=0, ge=0, le=100)
    deadline: datetime | None = None
    created_at: datetime = Field(alias="createdAt")
    owner_id: str = Field(alias="userId")

    @field_validator("deadline", "created_at")
    @classmethod
    def _make_aware(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v)

    def to_document(self) -> dict:
        """Serialize to the wire document (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


class TaskUpdate(BaseModel):
    """Partial update. Only fields that are set are sent to the store."""

    completed: bool | None = None
    progress: int | None = Field(default=None, ge=0, le=100)

    def to_fields(self) -> dict:
        return self.model_dump(exclude_none=True)


class TaskStats(BaseModel):
    """Summary counts over a set of tasks."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0
    average_progress: float = 0.0
