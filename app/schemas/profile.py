from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    household_id: Optional[uuid.UUID] = None
    role: str
    privacy_mode: bool
    local_mode: bool
    timezone: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Any subset of the editable profile fields."""
    full_name: Optional[str] = Field(default=None, max_length=256)
    email: Optional[str] = Field(default=None, max_length=320)
    timezone: Optional[str] = Field(default=None, max_length=64, examples=["Europe/Madrid"])
    local_mode: Optional[bool] = None
    privacy_mode: Optional[bool] = None
    avatar_url: Optional[str] = None


class ProfileResponse(BaseModel):
    success: bool = True
    data: ProfileOut
