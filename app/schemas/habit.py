from __future__ import annotations

import uuid
from datetime import datetime, time
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.habit import HabitCategory, HabitFrequency


class HabitCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(max_length=256, examples=["Cycle to work"])
    description: Optional[str] = None
    frequency: HabitFrequency
    target_count: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    auto_rules: Optional[dict[str, Any]] = Field(
        default_factory=dict,
        examples=[{"time_of_day": "morning", "trigger": "after coffee"}],
    )
    reminder_time: Optional[time] = None
    category: Optional[HabitCategory] = None
    impact_per_completion: Optional[Decimal] = Field(
        default=None, description="kg CO2 saved per completion."
    )


class HabitUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, max_length=256)
    description: Optional[str] = None
    frequency: Optional[HabitFrequency] = None
    target_count: Optional[int] = None
    current_streak: Optional[int] = None
    longest_streak: Optional[int] = None
    auto_rules: Optional[dict[str, Any]] = None
    reminder_time: Optional[time] = None
    category: Optional[HabitCategory] = None
    impact_per_completion: Optional[Decimal] = None


class HabitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str] = None
    frequency: str
    target_count: int
    current_streak: int
    longest_streak: int
    auto_rules: dict[str, Any] = Field(default_factory=dict)
    reminder_time: Optional[time] = None
    category: Optional[str] = None
    impact_per_completion: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HabitListResponse(BaseModel):
    total: int
    items: list[HabitOut]
