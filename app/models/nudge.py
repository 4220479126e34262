from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, ForeignKey, Index, Numeric, String, Text, Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.types import JSONType


class NudgeType(str, enum.Enum):
    eco = "eco"
    health = "health"
    productivity = "productivity"
    social = "social"


class NudgeActionType(str, enum.Enum):
    task_creation = "task_creation"
    habit_start = "habit_start"
    reminder_set = "reminder_set"


class Nudge(Base):
    __tablename__ = "nudges"
    __table_args__ = (
        CheckConstraint(
            "type IN ('eco', 'health', 'productivity', 'social')", name="ck_nudges_type"
        ),
        CheckConstraint(
            "action_type IS NULL OR "
            "action_type IN ('task_creation', 'habit_start', 'reminder_set')",
            name="ck_nudges_action_type",
        ),
        CheckConstraint("impact_kg IS NULL OR impact_kg >= 0", name="ck_nudges_impact_kg"),
        Index("nudges_user_type_idx", "user_id", "type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    action_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    action_data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    # kg CO2 saved if acted upon
    impact_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    shown_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    acted_on: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    acted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
