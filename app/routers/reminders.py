"""
Reminders router.

GET    /reminders?pending=true&date=   — ordered by scheduled_time
GET    /reminders/due                  — pending, due now, not snoozed
POST   /reminders
GET    /reminders/{id}
PATCH  /reminders/{id}
DELETE /reminders/{id}
POST   /reminders/{id}/dismiss
POST   /reminders/{id}/snooze          — {until}
POST   /reminders/{id}/score           — {effectiveness_score}
"""
from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.reminder import (
    ReminderCreate,
    ReminderListResponse,
    ReminderOut,
    ReminderUpdate,
    ScoreRequest,
    SnoozeRequest,
)
from app.services import reminders as reminder_service

router = APIRouter(prefix="/reminders", tags=["reminders"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Reminder not found."}}
_INVALID = {422: {"model": ErrorResponse, "description": "A reminder rule was violated."}}


@router.get("", response_model=ReminderListResponse, summary="List reminders")
def list_reminders(
    pending: bool = Query(default=True, description="Only reminders not yet dismissed."),
    day: Optional[date] = Query(default=None, alias="date"),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    total, items = reminder_service.list_reminders(
        db, user, pending_only=pending, day=day, limit=limit, offset=offset
    )
    return ReminderListResponse(total=total, items=items)


@router.get("/due", response_model=list[ReminderOut], summary="Reminders due now")
def list_due(
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.list_due(db, user)


@router.post(
    "",
    response_model=ReminderOut,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a reminder",
    responses={**_INVALID, 404: {"model": ErrorResponse, "description": "Linked item not found."}},
    dependencies=[Depends(rate_limit("forms"))],
)
def create_reminder(
    payload: ReminderCreate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.create_reminder(db, user, payload.model_dump())


@router.get(
    "/{reminder_id}", response_model=ReminderOut, summary="Get a reminder", responses=_NOT_FOUND
)
def get_reminder(
    reminder_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.get_reminder(db, user, reminder_id)


@router.patch(
    "/{reminder_id}",
    response_model=ReminderOut,
    summary="Update a reminder",
    responses={**_NOT_FOUND, **_INVALID},
    dependencies=[Depends(rate_limit("forms"))],
)
def update_reminder(
    reminder_id: uuid.UUID,
    payload: ReminderUpdate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.update_reminder(
        db, user, reminder_id, payload.model_dump(exclude_unset=True)
    )


@router.post(
    "/{reminder_id}/dismiss",
    response_model=ReminderOut,
    summary="Dismiss a reminder",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def dismiss_reminder(
    reminder_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.dismiss_reminder(db, user, reminder_id)


@router.post(
    "/{reminder_id}/snooze",
    response_model=ReminderOut,
    summary="Snooze a reminder",
    responses={**_NOT_FOUND, **_INVALID},
    dependencies=[Depends(rate_limit("forms"))],
)
def snooze_reminder(
    reminder_id: uuid.UUID,
    payload: SnoozeRequest,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.snooze_reminder(db, user, reminder_id, payload.until)


@router.post(
    "/{reminder_id}/score",
    response_model=ReminderOut,
    summary="Record how effective a reminder was",
    responses={**_NOT_FOUND, **_INVALID},
    dependencies=[Depends(rate_limit("forms"))],
)
def score_reminder(
    reminder_id: uuid.UUID,
    payload: ScoreRequest,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return reminder_service.score_reminder(db, user, reminder_id, payload.effectiveness_score)


@router.delete(
    "/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a reminder",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def delete_reminder(
    reminder_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reminder_service.delete_reminder(db, user, reminder_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
