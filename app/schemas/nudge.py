from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.nudge import NudgeActionType, NudgeType


class NudgeCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: NudgeType
    title: str = Field(max_length=256)
    message: str
    action_type: Optional[NudgeActionType] = None
    action_data: Optional[dict[str, Any]] = Field(
        default_factory=dict,
        examples=[{"title": "Take the train to the meeting"}],
    )
    impact_kg: Optional[Decimal] = Field(default=None, description="kg CO2 saved if acted upon.")
    expires_at: Optional[datetime] = None
    shown_at: Optional[datetime] = Field(
        default=None, description="Set when the nudge was already shown elsewhere."
    )


class NudgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    type: str
    title: str
    message: str
    action_type: Optional[str] = None
    action_data: dict[str, Any] = Field(default_factory=dict)
    impact_kg: Optional[float] = None
    shown_at: Optional[datetime] = None
    acted_on: bool
    acted_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NudgeListResponse(BaseModel):
    total: int
    items: list[NudgeOut]


class NudgeActionResponse(BaseModel):
    nudge: NudgeOut
    created_task_id: Optional[uuid.UUID] = None
    created_habit_id: Optional[uuid.UUID] = None


class ImpactSummary(BaseModel):
    nudges_acted_on: int
    nudge_impact_kg: float
    habit_impact_kg: float
    total_impact_kg: float
