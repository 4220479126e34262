"""
Dashboard router.

GET /dashboard/today?date=YYYY-MM-DD
"""
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.dashboard import ProgressStats, TodayResponse
from app.services.dashboard import today

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(rate_limit("api"))],
)


@router.get(
    "/today",
    response_model=TodayResponse,
    summary="Everything for one day",
    responses={200: {"description": "Tasks, events, reminders, nudges and progress."}},
)
def dashboard_today(
    day: Optional[date] = Query(
        default=None, alias="date",
        description="ISO date in your profile timezone. Defaults to today.",
        examples=["2026-10-19"],
    ),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Progress counts the tasks due on the day. The streak counts
    consecutive days with at least one completed task; a day with nothing
    done yet does not break it.
    """
    snapshot = today(db, user, day)
    snapshot["progress"] = ProgressStats(**asdict(snapshot["progress"]))
    return TodayResponse(**snapshot)
