"""
Habits router.

GET    /habits                      — ?category, ?frequency
POST   /habits
GET    /habits/{id}
PATCH  /habits/{id}
DELETE /habits/{id}
POST   /habits/{id}/complete        — current_streak + 1
POST   /habits/{id}/reset-streak    — current_streak = 0
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.habit import HabitCategory, HabitFrequency
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.habit import HabitCreate, HabitListResponse, HabitOut, HabitUpdate
from app.services import habits as habit_service

router = APIRouter(prefix="/habits", tags=["habits"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Habit not found."}}


@router.get("", response_model=HabitListResponse, summary="List habits")
def list_habits(
    category: Optional[HabitCategory] = Query(default=None),
    frequency: Optional[HabitFrequency] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    total, items = habit_service.list_habits(
        db, user,
        category=category.value if category else None,
        frequency=frequency.value if frequency else None,
        limit=limit, offset=offset,
    )
    return HabitListResponse(total=total, items=items)


@router.post(
    "",
    response_model=HabitOut,
    status_code=status.HTTP_201_CREATED,
    summary="Start tracking a habit",
    responses={422: {"model": ErrorResponse, "description": "A habit rule was violated."}},
    dependencies=[Depends(rate_limit("forms"))],
)
def create_habit(
    payload: HabitCreate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return habit_service.create_habit(db, user, payload.model_dump())


@router.get("/{habit_id}", response_model=HabitOut, summary="Get a habit", responses=_NOT_FOUND)
def get_habit(
    habit_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return habit_service.get_habit(db, user, habit_id)


@router.patch(
    "/{habit_id}",
    response_model=HabitOut,
    summary="Update a habit",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def update_habit(
    habit_id: uuid.UUID,
    payload: HabitUpdate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return habit_service.update_habit(db, user, habit_id, payload.model_dump(exclude_unset=True))


@router.post(
    "/{habit_id}/complete",
    response_model=HabitOut,
    summary="Record a completion",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def complete_habit(
    habit_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return habit_service.complete_habit(db, user, habit_id)


@router.post(
    "/{habit_id}/reset-streak",
    response_model=HabitOut,
    summary="Reset the current streak",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def reset_streak(
    habit_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The longest streak is kept."""
    return habit_service.reset_streak(db, user, habit_id)


@router.delete(
    "/{habit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a habit",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def delete_habit(
    habit_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    habit_service.delete_habit(db, user, habit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
