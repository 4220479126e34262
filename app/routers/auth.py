"""
Auth router.

POST /auth/signup   — create an account and return a bearer token
POST /auth/login    — exchange credentials for a bearer token
POST /auth/logout   — stateless; the client drops its token
GET  /auth/me       — the authenticated profile
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.auth import AuthResponse, LoginRequest, SignupRequest
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.profile import ProfileOut
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        400: {
            "model": ErrorResponse,
            "description": "Email taken, weak password, invalid email or signup disabled.",
        },
        429: {"model": ErrorResponse, "description": "Too many attempts."},
    },
    dependencies=[Depends(rate_limit("auth"))],
)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    profile = auth_service.sign_up(
        db, email=payload.email, password=payload.password, full_name=payload.full_name
    )
    return AuthResponse(
        user=ProfileOut.model_validate(profile),
        access_token=auth_service.issue_token(profile),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Sign in with email and password",
    responses={
        401: {"model": ErrorResponse, "description": "Invalid login credentials."},
        429: {"model": ErrorResponse, "description": "Too many attempts."},
    },
    dependencies=[Depends(rate_limit("auth"))],
)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    profile = auth_service.sign_in(db, email=payload.email, password=payload.password)
    return AuthResponse(
        user=ProfileOut.model_validate(profile),
        access_token=auth_service.issue_token(profile),
    )


@router.post("/logout", response_model=SuccessResponse, summary="Sign out")
def logout(user: Profile = Depends(get_current_user)):
    """Tokens are not tracked server-side, so this only confirms the caller was signed in."""
    return SuccessResponse()


@router.get(
    "/me",
    response_model=ProfileOut,
    summary="Current user",
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token."}},
)
def me(user: Profile = Depends(get_current_user)):
    return user
