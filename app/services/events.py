"""
Calendar events and the integrations they may be synced from.

Event rules:
  - all_day events span exactly one day: end_time = start_time + 1 day
  - otherwise end_time must be strictly after start_time
  - every attendee needs a non-empty email
Day queries use the caller's profile timezone to find the day's bounds.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.clock import as_utc, day_bounds, local_today, utcnow
from app.core.errors import DomainValidationError, NotFoundError
from app.models.event import Event
from app.models.integration import Integration
from app.models.profile import Profile
from app.services.common import apply_changes

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row rules
# ---------------------------------------------------------------------------

def resolve_times(
    start_time: datetime, end_time: Optional[datetime], all_day: bool
) -> tuple[datetime, datetime]:
    start = as_utc(start_time)
    if all_day:
        return start, start + timedelta(days=1)
    if end_time is None:
        raise DomainValidationError("end_time is required unless all_day is true", "end_time")
    end = as_utc(end_time)
    if end <= start:
        raise DomainValidationError("End time must be after start time", "end_time")
    return start, end


def check_attendees(attendees: list[dict[str, Any]]) -> list[dict[str, Any]]:
    for attendee in attendees:
        email = attendee.get("email") if isinstance(attendee, dict) else None
        if not isinstance(email, str) or not email.strip():
            raise DomainValidationError(
                "Each attendee must have a valid email address", "attendees"
            )
    return attendees


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

def _owned(db: Session, user: Profile):
    return db.query(Event).filter(Event.user_id == user.id)


def list_events_for_day(db: Session, user: Profile, day: Optional[date] = None) -> tuple[date, list[Event]]:
    target = day or local_today(user.timezone)
    start, end = day_bounds(target, user.timezone)
    events = (
        _owned(db, user)
        .filter(Event.start_time >= start, Event.start_time < end)
        .order_by(Event.start_time.asc())
        .all()
    )
    return target, events


def list_events_in_range(db: Session, user: Profile, start: datetime, end: datetime) -> list[Event]:
    """Events overlapping [start, end)."""
    start, end = as_utc(start), as_utc(end)
    if end <= start:
        raise DomainValidationError("end must be after start", "end")
    return (
        _owned(db, user)
        .filter(Event.start_time < end, Event.end_time > start)
        .order_by(Event.start_time.asc())
        .all()
    )


def get_event(db: Session, user: Profile, event_id: uuid.UUID) -> Event:
    event = _owned(db, user).filter(Event.id == event_id).first()
    if event is None:
        raise NotFoundError("event", event_id)
    return event


def _check_integration(db: Session, user: Profile, integration_id: Optional[uuid.UUID]) -> None:
    if integration_id is not None:
        get_integration(db, user, integration_id)


def create_event(db: Session, user: Profile, data: dict[str, Any]) -> Event:
    data = dict(data)
    start, end = resolve_times(data.pop("start_time"), data.pop("end_time", None), data.get("all_day", False))
    check_attendees(data.get("attendees") or [])
    _check_integration(db, user, data.get("integration_id"))

    event = Event(user_id=user.id, start_time=start, end_time=end, **data)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event %s for user %s", event.id, user.id)
    return event


def update_event(db: Session, user: Profile, event_id: uuid.UUID, changes: dict[str, Any]) -> Event:
    event = get_event(db, user, event_id)
    if not changes:
        return event

    changes = dict(changes)
    if {"start_time", "end_time", "all_day"} & changes.keys():
        all_day = changes.get("all_day")
        if all_day is None:
            all_day = event.all_day
        start = changes.pop("start_time", None) or event.start_time
        end = changes.pop("end_time", None) or event.end_time
        changes["start_time"], changes["end_time"] = resolve_times(start, end, all_day)
        changes["all_day"] = all_day
    if "attendees" in changes:
        changes["attendees"] = check_attendees(changes["attendees"] or [])

    apply_changes(event, changes, required=("title",), messages={"title": "Title is required"})
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, user: Profile, event_id: uuid.UUID) -> None:
    event = get_event(db, user, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)


# ---------------------------------------------------------------------------
# Integrations
# ---------------------------------------------------------------------------

def list_integrations(db: Session, user: Profile) -> list[Integration]:
    return (
        db.query(Integration)
        .filter(Integration.user_id == user.id)
        .order_by(Integration.created_at.asc())
        .all()
    )


def get_integration(db: Session, user: Profile, integration_id: uuid.UUID) -> Integration:
    integration = (
        db.query(Integration)
        .filter(Integration.user_id == user.id, Integration.id == integration_id)
        .first()
    )
    if integration is None:
        raise NotFoundError("integration", integration_id)
    return integration


def create_integration(db: Session, user: Profile, data: dict[str, Any]) -> Integration:
    data = dict(data)
    if data.get("token_expiry") is not None:
        data["token_expiry"] = as_utc(data["token_expiry"])
    integration = Integration(user_id=user.id, **data)
    db.add(integration)
    db.commit()
    db.refresh(integration)
    logger.info("Connected %s integration %s", integration.provider, integration.id)
    return integration


def update_integration(
    db: Session, user: Profile, integration_id: uuid.UUID, changes: dict[str, Any]
) -> Integration:
    integration = get_integration(db, user, integration_id)
    if changes.get("token_expiry") is not None:
        changes["token_expiry"] = as_utc(changes["token_expiry"])
    apply_changes(integration, changes, required=("sync_enabled", "active", "settings"))
    db.commit()
    db.refresh(integration)
    return integration


def delete_integration(db: Session, user: Profile, integration_id: uuid.UUID) -> None:
    integration = get_integration(db, user, integration_id)
    # Events keep existing; their integration link is cleared.
    db.query(Event).filter(Event.integration_id == integration.id).update(
        {Event.integration_id: None}, synchronize_session=False
    )
    db.delete(integration)
    db.commit()
    logger.info("Disconnected integration %s", integration_id)


def mark_synced(db: Session, user: Profile, integration_id: uuid.UUID) -> Integration:
    integration = get_integration(db, user, integration_id)
    if not integration.active:
        raise DomainValidationError("Integration is inactive", "active")
    if not integration.sync_enabled:
        raise DomainValidationError("Sync is disabled for this integration", "sync_enabled")
    integration.last_sync = utcnow()
    db.commit()
    db.refresh(integration)
    return integration
