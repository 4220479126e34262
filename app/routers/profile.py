"""
Profile router.

GET   /profile
PATCH /profile
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.profile import ProfileOut, ProfileResponse, ProfileUpdate
from app.services.profile import update_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse, summary="Get your profile")
def read_profile(user: Profile = Depends(get_current_user)):
    return ProfileResponse(data=ProfileOut.model_validate(user))


@router.patch(
    "",
    response_model=ProfileResponse,
    summary="Update your profile",
    responses={422: {"model": ErrorResponse, "description": "Unknown timezone or email in use."}},
    dependencies=[Depends(rate_limit("forms"))],
)
def patch_profile(
    payload: ProfileUpdate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = update_profile(db, user, payload.model_dump(exclude_unset=True))
    return ProfileResponse(data=ProfileOut.model_validate(profile))
