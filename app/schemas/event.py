from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.event import AttendeeResponse
from app.models.integration import IntegrationProvider
from app.schemas.common import strip_required


class Attendee(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    email: str = ""
    name: Optional[str] = None
    response: AttendeeResponse = AttendeeResponse.pending


class EventCreate(BaseModel):
    title: str = Field(max_length=500)
    description: Optional[str] = None
    start_time: datetime = Field(examples=["2026-10-19T09:00:00Z"])
    end_time: Optional[datetime] = Field(
        default=None,
        description="Required unless all_day is true (then it is start + 1 day).",
    )
    all_day: bool = False
    location: Optional[str] = None
    attendees: list[Attendee] = Field(default_factory=list)
    travel_time: Optional[int] = Field(default=None, ge=0, description="Minutes.")
    preparation_time: Optional[int] = Field(default=None, ge=0, description="Minutes.")
    integration_id: Optional[uuid.UUID] = None
    external_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return strip_required(v, "Title is required")


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    all_day: Optional[bool] = None
    location: Optional[str] = None
    attendees: Optional[list[Attendee]] = None
    travel_time: Optional[int] = Field(default=None, ge=0)
    preparation_time: Optional[int] = Field(default=None, ge=0)

    @field_validator("title", mode="before")
    @classmethod
    def title_not_blank(cls, v):
        return strip_required(v, "Title is required")


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    integration_id: Optional[uuid.UUID] = None
    external_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    all_day: bool
    location: Optional[str] = None
    attendees: list[dict[str, Any]] = Field(default_factory=list)
    travel_time: Optional[int] = None
    preparation_time: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventListResponse(BaseModel):
    date: Optional[str] = None
    total: int
    items: list[EventOut]


# ---------------------------------------------------------------------------
# Integrations
# ---------------------------------------------------------------------------

class IntegrationCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    provider: IntegrationProvider
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expiry: Optional[datetime] = None
    sync_enabled: bool = True
    settings: dict[str, Any] = Field(default_factory=dict)


class IntegrationUpdate(BaseModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expiry: Optional[datetime] = None
    sync_enabled: Optional[bool] = None
    active: Optional[bool] = None
    settings: Optional[dict[str, Any]] = None


class IntegrationOut(BaseModel):
    """Tokens are deliberately absent."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    provider: str
    token_expiry: Optional[datetime] = None
    last_sync: Optional[datetime] = None
    sync_enabled: bool
    active: bool
    settings: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
