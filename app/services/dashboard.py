"""
Today view: the day's tasks, events, reminders and nudges plus progress.

Days are calendar days in the profile's timezone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.core.clock import as_utc, day_bounds, get_zone, local_today
from app.core.config import settings
from app.models.profile import Profile
from app.models.task import Task
from app.services import events as event_service
from app.services import nudges as nudge_service
from app.services import reminders as reminder_service
from app.services import tasks as task_service

logger = logging.getLogger(__name__)

# Completion history further back than this is not walked for the streak.
STREAK_LOOKBACK_DAYS = 366

_MESSAGES = (
    (75, "🚀 You're crushing it! Almost there!"),
    (50, "💪 Great progress! Keep going!"),
    (25, "📈 You're building momentum!"),
)
ALL_DONE_MESSAGE = "🎉 Amazing! You've completed all your tasks today!"
DEFAULT_MESSAGE = "🌟 Every task completed is a win. Let's get started!"


@dataclass
class Progress:
    completed: int
    total: int
    daily_progress: float
    streak: int
    weekly_goal: int
    weekly_completed: int
    weekly_progress: float
    message: str


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part * 100.0 / whole, 1)


def motivational_message(progress: float) -> str:
    if progress >= 100:
        return ALL_DONE_MESSAGE
    for threshold, message in _MESSAGES:
        if progress >= threshold:
            return message
    return DEFAULT_MESSAGE


def compute_streak(completion_days: set[date], day: date) -> int:
    """
    Consecutive days ending at `day` with at least one completion.

    A day with nothing completed yet does not break the streak; counting
    then starts from the day before.
    """
    cursor = day if day in completion_days else day - timedelta(days=1)
    streak = 0
    while cursor in completion_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def _completion_days(db: Session, user: Profile, day: date) -> set[date]:
    zone = get_zone(user.timezone)
    since, _ = day_bounds(day - timedelta(days=STREAK_LOOKBACK_DAYS), user.timezone)
    _, until = day_bounds(day, user.timezone)
    rows = (
        db.query(Task.completed_at)
        .filter(
            Task.user_id == user.id,
            Task.deleted_at.is_(None),
            Task.completed.is_(True),
            Task.completed_at >= since,
            Task.completed_at < until,
        )
        .all()
    )
    return {as_utc(completed_at).astimezone(zone).date() for (completed_at,) in rows}


def weekly_completed_days(completion_days: set[date], day: date) -> int:
    """Days in the ISO week of `day`, up to and including it, with a completion."""
    monday = day - timedelta(days=day.weekday())
    return sum(1 for d in completion_days if monday <= d <= day)


def progress_for(db: Session, user: Profile, day: date, tasks: list[Task]) -> Progress:
    completed = sum(1 for t in tasks if t.completed)
    daily = percentage(completed, len(tasks))
    weekly_goal = settings.WEEKLY_TASK_GOAL
    completion_days = _completion_days(db, user, day)
    weekly_completed = weekly_completed_days(completion_days, day)
    return Progress(
        completed=completed,
        total=len(tasks),
        daily_progress=daily,
        streak=compute_streak(completion_days, day),
        weekly_goal=weekly_goal,
        weekly_completed=weekly_completed,
        weekly_progress=min(100.0, percentage(weekly_completed, weekly_goal)),
        message=motivational_message(daily),
    )


def today(db: Session, user: Profile, day: Optional[date] = None) -> dict:
    target = day or local_today(user.timezone)
    _, tasks = task_service.list_tasks(db, user, day=target, limit=settings.MAX_PAGE_SIZE)
    _, events = event_service.list_events_for_day(db, user, target)
    _, reminders = reminder_service.list_reminders(
        db, user, pending_only=True, day=target, limit=settings.MAX_PAGE_SIZE
    )
    _, nudges = nudge_service.list_active(db, user, mark_shown=False)

    progress = progress_for(db, user, target, tasks)
    logger.debug(
        "Dashboard for %s on %s: %s/%s tasks", user.id, target, progress.completed, progress.total
    )
    return {
        "date": target.isoformat(),
        "timezone": user.timezone,
        "tasks": tasks,
        "events": events,
        "reminders": reminders,
        "nudges": nudges,
        "progress": progress,
    }
