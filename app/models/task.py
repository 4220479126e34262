from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, time
from typing import Any, Optional

from sqlalchemy import (
    Boolean, CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Text, Time,
    Uuid, String, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.types import JSONType


class TaskSource(str, enum.Enum):
    manual = "manual"
    calendar = "calendar"
    habit = "habit"
    ai_suggested = "ai_suggested"


class TaskPriority(int, enum.Enum):
    low = 1
    medium = 2
    high = 3
    urgent = 4


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("LENGTH(title) > 0", name="ck_tasks_title_not_empty"),
        CheckConstraint("priority IN (1,2,3,4)", name="ck_tasks_priority"),
        CheckConstraint(
            "source IN ('manual', 'calendar', 'habit', 'ai_suggested')",
            name="ck_tasks_source",
        ),
        Index("tasks_user_due_date_idx", "user_id", "due_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    household_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    due_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=TaskPriority.medium.value
    )
    tags: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    recurring_rule: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    source: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TaskSource.manual.value
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
