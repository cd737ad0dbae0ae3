from typing import Literal
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from barakaflow.utils.sanitization import sanitize_string, sanitize_optional

TaskStatus = Literal["not-started", "pending", "completed"]
RecurrenceFrequency = Literal["none", "daily", "weekly", "monthly", "yearly"]
TaskFilter = Literal["all", "completed", "pending", "not-started", "today"]


def as_utc(v: datetime | None) -> datetime | None:
    """Naive timestamps are taken to be UTC; aware ones are converted to UTC."""
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ── Recurrence ──────────────────────────────────────────

class Recurrence(CamelModel):
    frequency: RecurrenceFrequency = "none"
    # Stored but not consulted when resolving occurrences
    interval: int | None = Field(None, ge=1)
    end_date: str | None = None


# ── Update threads ──────────────────────────────────────

class TaskUpdate(CamelModel):
    id: str
    author: str
    content: str
    timestamp: datetime
    mentions: list[str] | None = None
    replies: list["TaskUpdate"] = Field(default_factory=list)
    likes: int = Field(0, ge=0)
    liked_by: list[str] = Field(default_factory=list)

    @field_validator("timestamp", mode="after")
    @classmethod
    def normalize_timestamp(cls, v):
        return as_utc(v)


class UpdateCreate(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content", mode="before")
    @classmethod
    def sanitize(cls, v):
        v = sanitize_string(v)
        if isinstance(v, str) and not v:
            raise ValueError("Update content is required")
        return v


class LikeRequest(CamelModel):
    reply_id: str | None = None


# ── Tasks ───────────────────────────────────────────────

class TaskBase(CamelModel):
    title: str = Field(..., max_length=255)
    description: str | None = None
    owner: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    recurrence: Recurrence | None = None

    @field_validator("title", mode="before")
    @classmethod
    def sanitize_title(cls, v):
        v = sanitize_string(v)
        if isinstance(v, str) and not v:
            raise ValueError("Task title is required")
        return v

    @field_validator("description", "owner", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_optional(v)

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def normalize_times(cls, v):
        return as_utc(v)


class TaskCreate(TaskBase):
    completed: bool | None = None
    status: TaskStatus | None = None
    updates: list[TaskUpdate] = Field(default_factory=list)


class TaskPatch(CamelModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    owner: str | None = None
    completed: bool | None = None
    status: TaskStatus | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    recurrence: Recurrence | None = None
    updates: list[TaskUpdate] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def sanitize_title(cls, v):
        if v is None:
            return v
        v = sanitize_string(v)
        if isinstance(v, str) and not v:
            raise ValueError("Task title is required")
        return v

    @field_validator("description", "owner", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def normalize_times(cls, v):
        return as_utc(v)


class Task(TaskBase):
    id: int
    user_id: int
    completed: bool = False
    status: TaskStatus = "not-started"
    updates: list[TaskUpdate] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("updates", mode="before")
    @classmethod
    def default_updates(cls, v):
        return v or []

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def normalize_stamps(cls, v):
        return as_utc(v)


class TaskBoard(CamelModel):
    todo: list[Task] = Field(default_factory=list)
    completed: list[Task] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
