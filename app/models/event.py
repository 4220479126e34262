from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text, Uuid, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.types import JSONType


class AttendeeResponse(str, enum.Enum):
    accepted = "accepted"
    declined = "declined"
    pending = "pending"
    tentative = "tentative"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("LENGTH(title) > 0", name="ck_events_title_not_empty"),
        CheckConstraint("travel_time IS NULL OR travel_time >= 0", name="ck_events_travel_time"),
        CheckConstraint(
            "preparation_time IS NULL OR preparation_time >= 0",
            name="ck_events_preparation_time",
        ),
        Index("events_user_start_time_idx", "user_id", "start_time"),
        Index("events_user_end_time_idx", "user_id", "end_time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    integration_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("integrations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    external_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    all_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # [{"email": ..., "name": ..., "response": "accepted" | ...}]
    attendees: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    travel_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    preparation_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
