from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, ForeignKey, Index, Numeric, String, Text, Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class ReminderType(str, enum.Enum):
    task = "task"
    event = "event"
    habit = "habit"


class ReminderStrategy(str, enum.Enum):
    aggressive = "aggressive"
    gentle = "gentle"
    smart = "smart"


class Reminder(Base):
    """
    Scheduled notification linked to a task, event or habit.

    `strategy` and `effectiveness_score` are stored as given; nothing in the
    app schedules differently based on them.
    """
    __tablename__ = "reminders"
    __table_args__ = (
        CheckConstraint("type IN ('task', 'event', 'habit')", name="ck_reminders_type"),
        CheckConstraint(
            "strategy IN ('aggressive', 'gentle', 'smart')", name="ck_reminders_strategy"
        ),
        CheckConstraint(
            "effectiveness_score IS NULL OR "
            "(effectiveness_score >= 0 AND effectiveness_score <= 1)",
            name="ck_reminders_effectiveness_score",
        ),
        Index("reminders_user_scheduled_time_idx", "user_id", "scheduled_time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    task_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True
    )
    event_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=True, index=True
    )
    habit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("habits.id", ondelete="CASCADE"), nullable=True, index=True
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    strategy: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReminderStrategy.smart.value
    )
    scheduled_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    actual_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    dismissed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    snoozed_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    personalization_label: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    effectiveness_score: Mapped[Optional[Decimal]] = mapped_column(Numeric(4, 3), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
