from __future__ import annotations

import enum
import uuid
from datetime import datetime, time
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Time,
    Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.types import JSONType


class HabitFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class HabitCategory(str, enum.Enum):
    health = "health"
    productivity = "productivity"
    eco = "eco"
    social = "social"
    other = "other"


class Habit(Base):
    __tablename__ = "habits"
    __table_args__ = (
        CheckConstraint("frequency IN ('daily', 'weekly', 'monthly')", name="ck_habits_frequency"),
        CheckConstraint(
            "category IS NULL OR category IN ('health', 'productivity', 'eco', 'social', 'other')",
            name="ck_habits_category",
        ),
        CheckConstraint("target_count > 0", name="ck_habits_target_count"),
        CheckConstraint("current_streak >= 0", name="ck_habits_current_streak"),
        CheckConstraint("longest_streak >= 0", name="ck_habits_longest_streak"),
        CheckConstraint(
            "impact_per_completion IS NULL OR impact_per_completion >= 0",
            name="ck_habits_impact_per_completion",
        ),
        Index("habits_user_frequency_idx", "user_id", "frequency"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    frequency: Mapped[str] = mapped_column(String(16), nullable=False)
    target_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    auto_rules: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    reminder_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    # kg CO2 saved per completion
    impact_per_completion: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
