"""
Events router.

GET    /events?date=YYYY-MM-DD   — one calendar day in the profile timezone
GET    /events/range?start&end   — events overlapping a window
POST   /events
GET    /events/{id}
PATCH  /events/{id}
DELETE /events/{id}
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.event import EventCreate, EventListResponse, EventOut, EventUpdate
from app.services import events as event_service

router = APIRouter(prefix="/events", tags=["events"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Event not found."}}


@router.get("", response_model=EventListResponse, summary="Events on a day")
def list_events(
    day: Optional[date] = Query(
        default=None, alias="date",
        description="ISO date in your profile timezone. Defaults to today.",
        examples=["2026-10-19"],
    ),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    target, events = event_service.list_events_for_day(db, user, day)
    return EventListResponse(date=target.isoformat(), total=len(events), items=events)


@router.get("/range", response_model=EventListResponse, summary="Events in a time window")
def list_events_in_range(
    start: datetime = Query(..., examples=["2026-10-19T00:00:00Z"]),
    end: datetime = Query(..., examples=["2026-10-26T00:00:00Z"]),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    events = event_service.list_events_in_range(db, user, start, end)
    return EventListResponse(total=len(events), items=events)


@router.post(
    "",
    response_model=EventOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
    responses={422: {"model": ErrorResponse, "description": "Bad times or attendees."}},
    dependencies=[Depends(rate_limit("forms"))],
)
def create_event(
    payload: EventCreate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    All-day events always end exactly one day after they start; any
    `end_time` sent with them is ignored.
    """
    return event_service.create_event(db, user, payload.model_dump())


@router.get("/{event_id}", response_model=EventOut, summary="Get an event", responses=_NOT_FOUND)
def get_event(
    event_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.get_event(db, user, event_id)


@router.patch(
    "/{event_id}",
    response_model=EventOut,
    summary="Update an event",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def update_event(
    event_id: uuid.UUID,
    payload: EventUpdate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.update_event(db, user, event_id, payload.model_dump(exclude_unset=True))


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an event",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def delete_event(
    event_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    event_service.delete_event(db, user, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
