"""
Nudge service: suggestions with an optional follow-up action and an
estimated CO2 saving.

Acting on a nudge performs its action:
  task_creation → new Task (source "ai_suggested")
  habit_start   → new Habit
  reminder_set  → recorded only; the client schedules the reminder
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.clock import as_utc, utcnow
from app.core.errors import DomainValidationError, NotFoundError
from app.models.habit import HabitCategory, HabitFrequency
from app.models.nudge import Nudge, NudgeActionType
from app.models.profile import Profile
from app.models.task import TaskSource
from app.services import habits as habit_service
from app.services import tasks as task_service
from app.services.common import paginate

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    nudge: Nudge
    created_task_id: Optional[uuid.UUID] = None
    created_habit_id: Optional[uuid.UUID] = None


@dataclass
class ImpactTotals:
    nudges_acted_on: int
    nudge_impact_kg: Decimal
    habit_impact_kg: Decimal

    @property
    def total_impact_kg(self) -> Decimal:
        return self.nudge_impact_kg + self.habit_impact_kg


# ---------------------------------------------------------------------------
# Row rules
# ---------------------------------------------------------------------------

def check_nudge(data: dict[str, Any]) -> None:
    if not (data.get("title") or "").strip():
        raise DomainValidationError("Nudge title cannot be empty", "title")
    if not (data.get("message") or "").strip():
        raise DomainValidationError("Nudge message cannot be empty", "message")
    if data.get("impact_kg") is not None and data["impact_kg"] < 0:
        raise DomainValidationError("impact_kg must be non-negative", "impact_kg")
    if data.get("action_data") is None:
        raise DomainValidationError("action_data cannot be null JSONB", "action_data")
    if data.get("expires_at") is not None and as_utc(data["expires_at"]) <= utcnow():
        raise DomainValidationError("expires_at must be in the future", "expires_at")
    if data.get("shown_at") is not None and as_utc(data["shown_at"]) > utcnow():
        raise DomainValidationError("shown_at cannot be in the future", "shown_at")


def set_acted_on(nudge: Nudge, acted_on: bool) -> None:
    if acted_on and nudge.acted_at is None:
        nudge.acted_at = utcnow()
    elif not acted_on:
        nudge.acted_at = None
    nudge.acted_on = acted_on


def _active_filter(query, now):
    return query.filter(
        Nudge.acted_on.is_(False),
        or_(Nudge.expires_at.is_(None), Nudge.expires_at > now),
    )


def _is_expired(nudge: Nudge) -> bool:
    return nudge.expires_at is not None and as_utc(nudge.expires_at) <= utcnow()


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def create_nudge(db: Session, user: Profile, data: dict[str, Any]) -> Nudge:
    data = dict(data)
    check_nudge(data)
    for key in ("expires_at", "shown_at"):
        if data.get(key) is not None:
            data[key] = as_utc(data[key])
    data["title"] = data["title"].strip()
    data["message"] = data["message"].strip()

    nudge = Nudge(user_id=user.id, acted_on=False, **data)
    db.add(nudge)
    db.commit()
    db.refresh(nudge)
    return nudge


def list_active(
    db: Session,
    user: Profile,
    nudge_type: Optional[str] = None,
    mark_shown: bool = True,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> tuple[int, list[Nudge]]:
    """Unexpired nudges not yet acted on, newest first. Stamps shown_at on first view."""
    now = utcnow()
    query = _active_filter(db.query(Nudge).filter(Nudge.user_id == user.id), now)
    if nudge_type:
        query = query.filter(Nudge.type == nudge_type)
    query = query.order_by(Nudge.created_at.desc())
    total, items = paginate(query, limit, offset)

    if mark_shown:
        unseen = [n for n in items if n.shown_at is None]
        for nudge in unseen:
            nudge.shown_at = now
        if unseen:
            db.commit()
            for nudge in unseen:
                db.refresh(nudge)
    return total, items


def get_nudge(db: Session, user: Profile, nudge_id: uuid.UUID) -> Nudge:
    nudge = db.query(Nudge).filter(Nudge.user_id == user.id, Nudge.id == nudge_id).first()
    if nudge is None:
        raise NotFoundError("nudge", nudge_id)
    return nudge


def act_on_nudge(db: Session, user: Profile, nudge_id: uuid.UUID) -> ActionResult:
    nudge = get_nudge(db, user, nudge_id)
    if nudge.acted_on:
        raise DomainValidationError("Nudge has already been acted on", "acted_on")
    if _is_expired(nudge):
        raise DomainValidationError("Nudge has expired", "expires_at")

    result = ActionResult(nudge=nudge)
    data = nudge.action_data or {}

    if nudge.action_type == NudgeActionType.task_creation.value:
        task = task_service.create_task(db, user, {
            "title": data.get("title") or nudge.title,
            "description": data.get("description") or nudge.message,
            "source": TaskSource.ai_suggested.value,
        })
        result.created_task_id = task.id
    elif nudge.action_type == NudgeActionType.habit_start.value:
        frequency = data.get("frequency", HabitFrequency.daily.value)
        if frequency not in HabitFrequency.__members__:
            raise DomainValidationError(
                "action_data frequency must be one of: daily, weekly, monthly", "action_data"
            )
        category = nudge.type if nudge.type in HabitCategory.__members__ else None
        impact = data.get("impact_per_completion")
        habit = habit_service.create_habit(db, user, {
            "name": data.get("name") or nudge.title,
            "description": nudge.message,
            "frequency": frequency,
            "category": category,
            "impact_per_completion": Decimal(str(impact)) if impact is not None else None,
        })
        result.created_habit_id = habit.id

    set_acted_on(nudge, True)
    db.commit()
    db.refresh(nudge)
    logger.info("User %s acted on nudge %s (%s)", user.id, nudge.id, nudge.action_type)
    return result


def dismiss_nudge(db: Session, user: Profile, nudge_id: uuid.UUID) -> Nudge:
    nudge = get_nudge(db, user, nudge_id)
    nudge.expires_at = utcnow()
    db.commit()
    db.refresh(nudge)
    return nudge


def impact_summary(db: Session, user: Profile) -> ImpactTotals:
    count, nudge_kg = (
        db.query(func.count(Nudge.id), func.coalesce(func.sum(Nudge.impact_kg), 0))
        .filter(Nudge.user_id == user.id, Nudge.acted_on.is_(True))
        .one()
    )
    return ImpactTotals(
        nudges_acted_on=count,
        nudge_impact_kg=Decimal(str(nudge_kg)),
        habit_impact_kg=habit_service.habit_impact_kg(db, user),
    )
