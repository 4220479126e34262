"""
Reminder service.

Link rules by type:
  task  → task_id required
  event → event_id required
  habit → habit_id, task_id or event_id required
Linked rows must belong to the caller. Dismissing stamps actual_time;
un-dismissing clears it.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.clock import as_utc, day_bounds, utcnow
from app.core.errors import DomainValidationError, NotFoundError
from app.models.event import Event
from app.models.habit import Habit
from app.models.profile import Profile
from app.models.reminder import Reminder, ReminderType
from app.models.task import Task
from app.services.common import apply_changes, paginate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row rules
# ---------------------------------------------------------------------------

def check_links(reminder: Reminder) -> None:
    if reminder.type == ReminderType.task.value and reminder.task_id is None:
        raise DomainValidationError("Task reminders must have a task_id", "task_id")
    if reminder.type == ReminderType.event.value and reminder.event_id is None:
        raise DomainValidationError("Event reminders must have an event_id", "event_id")
    if reminder.type == ReminderType.habit.value and reminder.habit_id is None \
            and reminder.task_id is None and reminder.event_id is None:
        raise DomainValidationError(
            "Habit reminders must have a habit_id, task_id or event_id", "habit_id"
        )


def check_score(score: Optional[Decimal]) -> None:
    if score is not None and not (0 <= score <= 1):
        raise DomainValidationError(
            "effectiveness_score must be between 0 and 1", "effectiveness_score"
        )


def check_snooze(reminder: Reminder) -> None:
    if reminder.snoozed_until is not None and \
            as_utc(reminder.snoozed_until) <= as_utc(reminder.scheduled_time):
        raise DomainValidationError(
            "snoozed_until must be after scheduled_time", "snoozed_until"
        )


def set_dismissed(reminder: Reminder, dismissed: bool) -> None:
    if dismissed and not reminder.dismissed and reminder.actual_time is None:
        reminder.actual_time = utcnow()
    elif not dismissed and reminder.dismissed:
        reminder.actual_time = None
    reminder.dismissed = dismissed


def _check_ownership(db: Session, user: Profile, reminder: Reminder) -> None:
    for model, value, name in (
        (Task, reminder.task_id, "task"),
        (Event, reminder.event_id, "event"),
        (Habit, reminder.habit_id, "habit"),
    ):
        if value is None:
            continue
        row = db.get(model, value)
        if row is None or row.user_id != user.id:
            raise NotFoundError(name, value)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _owned(db: Session, user: Profile):
    return db.query(Reminder).filter(Reminder.user_id == user.id)


def list_reminders(
    db: Session,
    user: Profile,
    pending_only: bool = True,
    day: Optional[date] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> tuple[int, list[Reminder]]:
    query = _owned(db, user)
    if pending_only:
        query = query.filter(Reminder.dismissed.is_(False))
    if day is not None:
        start, end = day_bounds(day, user.timezone)
        query = query.filter(Reminder.scheduled_time >= start, Reminder.scheduled_time < end)
    query = query.order_by(Reminder.scheduled_time.asc())
    return paginate(query, limit, offset)


def list_due(db: Session, user: Profile, now: Optional[datetime] = None) -> list[Reminder]:
    """Pending reminders whose time has come and that are not snoozed past now."""
    now = as_utc(now) if now else utcnow()
    return (
        _owned(db, user)
        .filter(
            Reminder.dismissed.is_(False),
            Reminder.scheduled_time <= now,
            or_(Reminder.snoozed_until.is_(None), Reminder.snoozed_until <= now),
        )
        .order_by(Reminder.scheduled_time.asc())
        .all()
    )


def get_reminder(db: Session, user: Profile, reminder_id: uuid.UUID) -> Reminder:
    reminder = _owned(db, user).filter(Reminder.id == reminder_id).first()
    if reminder is None:
        raise NotFoundError("reminder", reminder_id)
    return reminder


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def create_reminder(db: Session, user: Profile, data: dict[str, Any]) -> Reminder:
    data = dict(data)
    data["scheduled_time"] = as_utc(data["scheduled_time"])
    if data["scheduled_time"] <= utcnow():
        raise DomainValidationError(
            "Reminder scheduled_time must be in the future", "scheduled_time"
        )
    check_score(data.get("effectiveness_score"))

    reminder = Reminder(user_id=user.id, dismissed=False, **data)
    check_links(reminder)
    _check_ownership(db, user, reminder)

    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    logger.info("Scheduled %s reminder %s", reminder.type, reminder.id)
    return reminder


def update_reminder(
    db: Session, user: Profile, reminder_id: uuid.UUID, changes: dict[str, Any]
) -> Reminder:
    reminder = get_reminder(db, user, reminder_id)
    changes = dict(changes)

    if changes.get("scheduled_time") is not None:
        changes["scheduled_time"] = as_utc(changes["scheduled_time"])
        if changes["scheduled_time"] <= utcnow():
            raise DomainValidationError(
                "Reminder scheduled_time must be in the future", "scheduled_time"
            )
    if changes.get("snoozed_until") is not None:
        changes["snoozed_until"] = as_utc(changes["snoozed_until"])
    if "effectiveness_score" in changes:
        check_score(changes["effectiveness_score"])
    dismissed = changes.pop("dismissed", None)

    try:
        apply_changes(reminder, changes, required=("scheduled_time", "strategy"))
        check_snooze(reminder)
    except DomainValidationError:
        db.rollback()
        raise
    if dismissed is not None:
        set_dismissed(reminder, dismissed)

    db.commit()
    db.refresh(reminder)
    return reminder


def dismiss_reminder(db: Session, user: Profile, reminder_id: uuid.UUID) -> Reminder:
    reminder = get_reminder(db, user, reminder_id)
    set_dismissed(reminder, True)
    db.commit()
    db.refresh(reminder)
    logger.info("Dismissed reminder %s", reminder_id)
    return reminder


def snooze_reminder(
    db: Session, user: Profile, reminder_id: uuid.UUID, until: datetime
) -> Reminder:
    return update_reminder(db, user, reminder_id, {"snoozed_until": until})


def score_reminder(
    db: Session, user: Profile, reminder_id: uuid.UUID, score: Decimal
) -> Reminder:
    return update_reminder(db, user, reminder_id, {"effectiveness_score": score})


def delete_reminder(db: Session, user: Profile, reminder_id: uuid.UUID) -> None:
    reminder = get_reminder(db, user, reminder_id)
    db.delete(reminder)
    db.commit()
