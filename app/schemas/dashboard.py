from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.event import EventOut
from app.schemas.nudge import NudgeOut
from app.schemas.reminder import ReminderOut
from app.schemas.task import TaskOut


class ProgressStats(BaseModel):
    completed: int
    total: int
    daily_progress: float = Field(description="Percent of the day's tasks completed.")
    streak: int = Field(description="Consecutive days with at least one completed task.")
    weekly_goal: int
    weekly_completed: int
    weekly_progress: float
    message: str


class TodayResponse(BaseModel):
    date: str
    timezone: str
    tasks: list[TaskOut]
    events: list[EventOut]
    reminders: list[ReminderOut]
    nudges: list[NudgeOut]
    progress: ProgressStats
