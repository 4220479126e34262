from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.reminder import ReminderStrategy, ReminderType


class ReminderCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: ReminderType
    strategy: ReminderStrategy = ReminderStrategy.smart
    scheduled_time: datetime
    task_id: Optional[uuid.UUID] = None
    event_id: Optional[uuid.UUID] = None
    habit_id: Optional[uuid.UUID] = None
    personalization_label: Optional[str] = Field(default=None, max_length=256)
    effectiveness_score: Optional[Decimal] = None


class ReminderUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    strategy: Optional[ReminderStrategy] = None
    scheduled_time: Optional[datetime] = None
    dismissed: Optional[bool] = None
    snoozed_until: Optional[datetime] = None
    personalization_label: Optional[str] = Field(default=None, max_length=256)
    effectiveness_score: Optional[Decimal] = None


class SnoozeRequest(BaseModel):
    until: datetime


class ScoreRequest(BaseModel):
    effectiveness_score: Decimal


class ReminderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    task_id: Optional[uuid.UUID] = None
    event_id: Optional[uuid.UUID] = None
    habit_id: Optional[uuid.UUID] = None
    type: str
    strategy: str
    scheduled_time: datetime
    actual_time: Optional[datetime] = None
    dismissed: bool
    snoozed_until: Optional[datetime] = None
    personalization_label: Optional[str] = None
    effectiveness_score: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReminderListResponse(BaseModel):
    total: int
    items: list[ReminderOut]
