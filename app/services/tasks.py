"""
Task service.

Row rules (formerly database triggers) live here:
  - completion   : completed false→true stamps completed_at, true→false clears it
  - recurring    : recurring_rule, when present, needs a valid `frequency`
  - ownership    : every lookup is scoped to the caller; foreign rows are 404
  - soft delete  : DELETE sets deleted_at; reads skip deleted rows
"""
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.errors import AlreadyDeletedError, DomainValidationError, NotFoundError
from app.models.profile import Household, Profile
from app.models.task import Task
from app.services.common import apply_changes, paginate

logger = logging.getLogger(__name__)

RECURRING_FREQUENCIES = ("daily", "weekly", "monthly", "yearly")

_REQUIRED_FIELDS = ("title", "priority", "tags", "source", "completed")


# ---------------------------------------------------------------------------
# Row rules
# ---------------------------------------------------------------------------

def validate_recurring_rule(rule: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if rule is None:
        return None
    if not isinstance(rule, dict):
        raise DomainValidationError("recurring_rule must be an object", "recurring_rule")
    if "frequency" not in rule:
        raise DomainValidationError(
            "recurring_rule must contain a frequency field", "recurring_rule"
        )
    if rule["frequency"] not in RECURRING_FREQUENCIES:
        raise DomainValidationError(
            "recurring_rule frequency must be one of: daily, weekly, monthly, yearly",
            "recurring_rule",
        )

    interval = rule.get("interval", 1)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise DomainValidationError(
            "recurring_rule interval must be a positive integer", "recurring_rule"
        )

    days_of_week = rule.get("days_of_week")
    if days_of_week is not None:
        if not isinstance(days_of_week, list) or not all(
            isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6
            for d in days_of_week
        ):
            raise DomainValidationError(
                "recurring_rule days_of_week must contain integers 0-6", "recurring_rule"
            )

    day_of_month = rule.get("day_of_month")
    if day_of_month is not None:
        if isinstance(day_of_month, bool) or not isinstance(day_of_month, int) \
                or not 1 <= day_of_month <= 31:
            raise DomainValidationError(
                "recurring_rule day_of_month must be between 1 and 31", "recurring_rule"
            )

    end_date = rule.get("end_date")
    if end_date is not None:
        try:
            date.fromisoformat(str(end_date))
        except ValueError:
            raise DomainValidationError(
                "recurring_rule end_date must be an ISO date", "recurring_rule"
            )
    return rule


def set_completed(task: Task, completed: bool) -> None:
    if completed and not task.completed:
        task.completed_at = utcnow()
    elif not completed and task.completed:
        task.completed_at = None
    task.completed = completed


def _check_household(db: Session, user: Profile, household_id: Optional[uuid.UUID]) -> None:
    if household_id is None:
        return
    household = db.get(Household, household_id)
    if household is None or (
        household.owner_id != user.id and user.household_id != household_id
    ):
        raise DomainValidationError(
            "Household not found or not shared with you", "household_id"
        )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _owned(db: Session, user: Profile):
    return db.query(Task).filter(Task.user_id == user.id)


def list_tasks(
    db: Session,
    user: Profile,
    day: Optional[date] = None,
    include_completed: bool = True,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> tuple[int, list[Task]]:
    """Non-deleted tasks; high priority first, then earliest due time (nulls last)."""
    query = _owned(db, user).filter(Task.deleted_at.is_(None))
    if day is not None:
        query = query.filter(Task.due_date == day)
    if not include_completed:
        query = query.filter(Task.completed.is_(False))
    query = query.order_by(
        Task.priority.desc(),
        Task.due_time.is_(None),
        Task.due_time.asc(),
        Task.created_at.asc(),
    )
    return paginate(query, limit, offset)


def get_task(
    db: Session, user: Profile, task_id: uuid.UUID, include_deleted: bool = False
) -> Task:
    task = _owned(db, user).filter(Task.id == task_id).first()
    if task is None or (task.deleted_at is not None and not include_deleted):
        raise NotFoundError("task", task_id)
    return task


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def create_task(db: Session, user: Profile, data: dict[str, Any]) -> Task:
    data = dict(data)
    completed = data.pop("completed", False)
    validate_recurring_rule(data.get("recurring_rule"))
    _check_household(db, user, data.get("household_id"))

    task = Task(user_id=user.id, completed=False, **data)
    set_completed(task, completed)
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Created task %s for user %s", task.id, user.id)
    return task


def update_task(db: Session, user: Profile, task_id: uuid.UUID, changes: dict[str, Any]) -> Task:
    task = get_task(db, user, task_id)
    if not changes:
        return task

    changes = dict(changes)
    if "recurring_rule" in changes:
        validate_recurring_rule(changes["recurring_rule"])
    if "household_id" in changes:
        _check_household(db, user, changes["household_id"])
    if changes.get("completed") is not None:
        set_completed(task, changes.pop("completed"))

    apply_changes(task, changes, required=_REQUIRED_FIELDS, messages={"title": "Title is required"})
    db.commit()
    db.refresh(task)
    logger.info("Updated task %s fields=%s", task.id, sorted(changes))
    return task


def toggle_task(db: Session, user: Profile, task_id: uuid.UUID) -> Task:
    task = get_task(db, user, task_id)
    set_completed(task, not task.completed)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, user: Profile, task_id: uuid.UUID) -> None:
    task = get_task(db, user, task_id, include_deleted=True)
    if task.deleted_at is not None:
        raise AlreadyDeletedError("task", task_id)
    task.deleted_at = utcnow()
    db.commit()
    logger.info("Soft-deleted task %s", task_id)


def restore_task(db: Session, user: Profile, task_id: uuid.UUID) -> Task:
    task = get_task(db, user, task_id, include_deleted=True)
    if task.deleted_at is not None:
        task.deleted_at = None
        db.commit()
        db.refresh(task)
        logger.info("Restored task %s", task_id)
    return task
