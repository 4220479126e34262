"""
Auth request / response schemas.

POST /auth/signup  → SignupRequest → AuthResponse
POST /auth/login   → LoginRequest  → AuthResponse
"""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.auth_errors import VALIDATION_MESSAGES, required_message
from app.schemas.common import strip_required
from app.schemas.profile import ProfileOut


class SignupRequest(BaseModel):
    email: Annotated[str, Field(max_length=320, examples=["ada@example.com"])]
    password: Annotated[str, Field(max_length=256)]
    confirm_password: str
    full_name: Annotated[str, Field(max_length=256, examples=["Ada Lovelace"])]
    terms: bool = False

    @field_validator("full_name", mode="before")
    @classmethod
    def full_name_required(cls, v):
        return strip_required(v, "Full name is required")

    @field_validator("email", mode="before")
    @classmethod
    def email_required(cls, v):
        return strip_required(v, required_message("Email"))

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v:
            raise ValueError(required_message("Password"))
        return v

    @field_validator("confirm_password")
    @classmethod
    def confirm_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Please confirm your password")
        return v

    @field_validator("terms")
    @classmethod
    def terms_accepted(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError(VALIDATION_MESSAGES["terms_required"])
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError(VALIDATION_MESSAGES["password_mismatch"])
        return self


class LoginRequest(BaseModel):
    email: Annotated[str, Field(max_length=320)]
    password: Annotated[str, Field(max_length=256)]

    @field_validator("email", mode="before")
    @classmethod
    def email_required(cls, v):
        return strip_required(v, required_message("Email"))

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v:
            raise ValueError(required_message("Password"))
        return v


class AuthResponse(BaseModel):
    success: bool = True
    user: ProfileOut
    access_token: str
    token_type: str = "bearer"
