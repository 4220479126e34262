"""
Task schemas.

Priority is stored as 1..4; requests may send either the number or its
name ("low", "medium", "high", "urgent").
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from app.models.task import TaskPriority, TaskSource
from app.schemas.common import strip_required

TITLE_MAX_LENGTH = 500


def _coerce_priority(v: Any) -> Any:
    if isinstance(v, str) and v.strip().lower() in TaskPriority.__members__:
        return TaskPriority[v.strip().lower()].value
    return v


class TaskCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(max_length=TITLE_MAX_LENGTH, examples=["Book dentist appointment"])
    description: Optional[str] = None
    due_date: Optional[date] = Field(default=None, examples=["2026-10-19"])
    due_time: Optional[time] = Field(default=None, examples=["09:30"])
    priority: int = Field(default=TaskPriority.medium.value, ge=1, le=4)
    tags: list[str] = Field(default_factory=list)
    recurring_rule: Optional[dict[str, Any]] = Field(
        default=None,
        examples=[{"frequency": "weekly", "interval": 1, "days_of_week": [1, 3]}],
    )
    source: TaskSource = TaskSource.manual
    household_id: Optional[uuid.UUID] = None
    completed: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return strip_required(v, "Title is required")

    @field_validator("priority", mode="before")
    @classmethod
    def priority_by_name(cls, v):
        return _coerce_priority(v)


class TaskUpdate(BaseModel):
    """Partial update: only the fields present in the body are applied."""
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    priority: Optional[int] = Field(default=None, ge=1, le=4)
    tags: Optional[list[str]] = None
    recurring_rule: Optional[dict[str, Any]] = None
    source: Optional[TaskSource] = None
    household_id: Optional[uuid.UUID] = None
    completed: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_not_blank(cls, v):
        return strip_required(v, "Title is required")

    @field_validator("priority", mode="before")
    @classmethod
    def priority_by_name(cls, v):
        return _coerce_priority(v)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    household_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    completed: bool
    completed_at: Optional[datetime] = None
    priority: int
    tags: list[str] = Field(default_factory=list)
    recurring_rule: Optional[dict[str, Any]] = None
    source: str
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def priority_label(self) -> str:
        return TaskPriority(self.priority).name


class TaskListResponse(BaseModel):
    total: int
    items: list[TaskOut]
