"""
Dashboard: progress maths and the /dashboard/today view.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.config import settings
from app.models.task import Task
from app.services.dashboard import (
    ALL_DONE_MESSAGE,
    DEFAULT_MESSAGE,
    compute_streak,
    motivational_message,
    percentage,
    weekly_completed_days,
)

DAY = date(2026, 3, 18)


class TestProgressMaths:
    def test_percentage(self):
        assert percentage(0, 0) == 0.0
        assert percentage(1, 3) == 33.3
        assert percentage(3, 3) == 100.0

    @pytest.mark.parametrize("progress,expected", [
        (100, ALL_DONE_MESSAGE),
        (80, "🚀 You're crushing it! Almost there!"),
        (50, "💪 Great progress! Keep going!"),
        (25, "📈 You're building momentum!"),
        (10, DEFAULT_MESSAGE),
        (0, DEFAULT_MESSAGE),
    ])
    def test_messages(self, progress, expected):
        assert motivational_message(progress) == expected


class TestStreak:
    def test_consecutive_days_ending_today(self):
        days = {DAY, DAY - timedelta(days=1), DAY - timedelta(days=2)}
        assert compute_streak(days, DAY) == 3

    def test_nothing_done_today_counts_from_yesterday(self):
        days = {DAY - timedelta(days=1), DAY - timedelta(days=2)}
        assert compute_streak(days, DAY) == 2

    def test_gap_breaks_streak(self):
        days = {DAY, DAY - timedelta(days=2)}
        assert compute_streak(days, DAY) == 1

    def test_empty(self):
        assert compute_streak(set(), DAY) == 0


class TestWeeklyDays:
    def test_counts_days_not_tasks(self):
        # 2026-03-18 is a Wednesday; Sunday the 15th belongs to the previous week
        days = {DAY, DAY - timedelta(days=2), DAY - timedelta(days=3)}
        assert weekly_completed_days(days, DAY) == 2

    def test_later_days_in_week_ignored(self):
        assert weekly_completed_days({DAY + timedelta(days=1)}, DAY) == 0


def _noon(d):
    return datetime(d.year, d.month, d.day, 12, tzinfo=timezone.utc)


def _completed_task(profile, title, due, completed_at):
    return Task(
        user_id=profile.id, title=title, due_date=due, completed=True,
        completed_at=completed_at, priority=2, tags=[], source="manual",
    )


class TestTodayEndpoint:
    def test_empty_day(self, client, auth):
        r = client.get("/dashboard/today", params={"date": DAY.isoformat()}, headers=auth)
        assert r.status_code == 200
        body = r.json()
        assert body["date"] == "2026-03-18"
        assert body["timezone"] == "UTC"
        assert body["tasks"] == []
        progress = body["progress"]
        assert progress["total"] == 0
        assert progress["daily_progress"] == 0.0
        assert progress["streak"] == 0
        assert progress["weekly_goal"] == settings.WEEKLY_TASK_GOAL
        assert progress["message"] == DEFAULT_MESSAGE

    def test_progress_and_streak(self, client, db, user):
        headers, profile = user
        db.add_all([
            _completed_task(profile, "today done", DAY, _noon(DAY)),
            _completed_task(profile, "yesterday", DAY - timedelta(days=1), _noon(DAY - timedelta(days=1))),
            _completed_task(profile, "two days ago", DAY - timedelta(days=2), _noon(DAY - timedelta(days=2))),
            # Sunday of the previous ISO week
            _completed_task(profile, "last week", DAY - timedelta(days=3), _noon(DAY - timedelta(days=3))),
            Task(user_id=profile.id, title="today open", due_date=DAY, priority=2,
                 tags=[], source="manual", completed=False),
        ])
        db.commit()

        body = client.get(
            "/dashboard/today", params={"date": DAY.isoformat()}, headers=headers
        ).json()
        progress = body["progress"]
        assert progress["completed"] == 1
        assert progress["total"] == 2
        assert progress["daily_progress"] == 50.0
        assert progress["message"] == "💪 Great progress! Keep going!"
        assert progress["streak"] == 4
        # 2026-03-18 is a Wednesday: Mon 16th to today, one completion per day
        assert progress["weekly_completed"] == 3
        assert {t["title"] for t in body["tasks"]} == {"today done", "today open"}

    def test_weekly_progress_is_capped(self, client, db, user, monkeypatch):
        monkeypatch.setattr(settings, "WEEKLY_TASK_GOAL", 1)
        headers, profile = user
        for i in range(3):
            db.add(_completed_task(profile, f"t{i}", DAY, datetime(2026, 3, 18 - i, 9, tzinfo=timezone.utc)))
        db.commit()
        progress = client.get(
            "/dashboard/today", params={"date": DAY.isoformat()}, headers=headers
        ).json()["progress"]
        assert progress["weekly_completed"] == 3
        assert progress["weekly_progress"] == 100.0
        assert progress["message"] == ALL_DONE_MESSAGE

    def test_weekly_goal_counts_days(self, client, db, user):
        headers, profile = user
        for i in range(3):
            db.add(_completed_task(profile, f"same day {i}", DAY, datetime(2026, 3, 18, 9, i, tzinfo=timezone.utc)))
        db.commit()
        progress = client.get(
            "/dashboard/today", params={"date": DAY.isoformat()}, headers=headers
        ).json()["progress"]
        assert progress["completed"] == 3
        assert progress["weekly_completed"] == 1
        assert progress["weekly_progress"] == round(100 / settings.WEEKLY_TASK_GOAL, 1)

    def test_includes_events_reminders_and_nudges(self, client, auth):
        client.post(
            "/events",
            json={"title": "Dentist", "start_time": f"{DAY.isoformat()}T10:00:00Z",
                  "end_time": f"{DAY.isoformat()}T11:00:00Z"},
            headers=auth,
        )
        client.post(
            "/nudges",
            json={"type": "health", "title": "Walk", "message": "Take a short walk."},
            headers=auth,
        )
        body = client.get(
            "/dashboard/today", params={"date": DAY.isoformat()}, headers=auth
        ).json()
        assert [e["title"] for e in body["events"]] == ["Dentist"]
        assert [n["title"] for n in body["nudges"]] == ["Walk"]
        # the dashboard does not count as showing a nudge
        assert body["nudges"][0]["shown_at"] is None
        assert body["reminders"] == []
