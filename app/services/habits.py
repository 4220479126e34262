"""
Habit service.

Streaks are stored counters, not derived from a completion log:
`complete_habit` bumps current_streak and `reset_streak` zeroes it.
After any write, longest_streak is raised to current_streak if behind.
"""
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import DomainValidationError, NotFoundError
from app.models.habit import Habit
from app.models.profile import Profile
from app.services.common import paginate

logger = logging.getLogger(__name__)


def check_habit(habit: Habit) -> None:
    """Validate a habit row in place and clamp longest_streak."""
    if not habit.name or not habit.name.strip():
        raise DomainValidationError("Habit name cannot be empty", "name")
    if habit.target_count is None or habit.target_count <= 0:
        raise DomainValidationError("target_count must be positive", "target_count")
    if habit.current_streak is None or habit.current_streak < 0:
        raise DomainValidationError("current_streak cannot be negative", "current_streak")
    if habit.longest_streak is None or habit.longest_streak < 0:
        raise DomainValidationError("longest_streak cannot be negative", "longest_streak")
    if habit.impact_per_completion is not None and habit.impact_per_completion < 0:
        raise DomainValidationError(
            "impact_per_completion must be non-negative", "impact_per_completion"
        )
    if habit.auto_rules is None:
        raise DomainValidationError("auto_rules cannot be null JSONB", "auto_rules")
    if habit.frequency is None:
        raise DomainValidationError("frequency is required", "frequency")

    if habit.current_streak > habit.longest_streak:
        habit.longest_streak = habit.current_streak


def list_habits(
    db: Session,
    user: Profile,
    category: Optional[str] = None,
    frequency: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> tuple[int, list[Habit]]:
    query = db.query(Habit).filter(Habit.user_id == user.id)
    if category:
        query = query.filter(Habit.category == category)
    if frequency:
        query = query.filter(Habit.frequency == frequency)
    query = query.order_by(Habit.created_at.asc(), Habit.name.asc())
    return paginate(query, limit, offset)


def get_habit(db: Session, user: Profile, habit_id: uuid.UUID) -> Habit:
    habit = db.query(Habit).filter(Habit.user_id == user.id, Habit.id == habit_id).first()
    if habit is None:
        raise NotFoundError("habit", habit_id)
    return habit


def _save(db: Session, habit: Habit) -> Habit:
    try:
        check_habit(habit)
    except DomainValidationError:
        db.rollback()
        raise
    db.commit()
    db.refresh(habit)
    return habit


def create_habit(db: Session, user: Profile, data: dict[str, Any]) -> Habit:
    values: dict[str, Any] = {
        "target_count": 1, "current_streak": 0, "longest_streak": 0, "auto_rules": {},
    }
    values.update(data)
    habit = Habit(user_id=user.id, **values)
    # check before add so a rejected habit never reaches the session
    check_habit(habit)
    db.add(habit)
    db.commit()
    db.refresh(habit)
    logger.info("Created habit %s for user %s", habit.id, user.id)
    return habit


def update_habit(db: Session, user: Profile, habit_id: uuid.UUID, changes: dict[str, Any]) -> Habit:
    habit = get_habit(db, user, habit_id)
    for field, value in changes.items():
        setattr(habit, field, value)
    return _save(db, habit)


def complete_habit(db: Session, user: Profile, habit_id: uuid.UUID) -> Habit:
    habit = get_habit(db, user, habit_id)
    habit.current_streak += 1
    logger.info("Habit %s streak now %d", habit.id, habit.current_streak)
    return _save(db, habit)


def reset_streak(db: Session, user: Profile, habit_id: uuid.UUID) -> Habit:
    habit = get_habit(db, user, habit_id)
    habit.current_streak = 0
    return _save(db, habit)


def delete_habit(db: Session, user: Profile, habit_id: uuid.UUID) -> None:
    habit = get_habit(db, user, habit_id)
    db.delete(habit)
    db.commit()
    logger.info("Deleted habit %s", habit_id)


def habit_impact_kg(db: Session, user: Profile) -> Decimal:
    """kg CO2 attributed to current streaks: streak × impact_per_completion."""
    total = Decimal("0")
    habits = (
        db.query(Habit)
        .filter(Habit.user_id == user.id, Habit.impact_per_completion.isnot(None))
        .all()
    )
    for habit in habits:
        total += Decimal(habit.current_streak) * Decimal(habit.impact_per_completion)
    return total
