"""
Reminder endpoints: link rules, scheduling, dismissal and snoozing.
"""
import uuid
from datetime import datetime, timedelta, timezone

from app.models.reminder import Reminder


def _iso(delta):
    return (datetime.now(tz=timezone.utc) + delta).isoformat()


def _task(client, auth):
    return client.post("/tasks", json={"title": "Call mum"}, headers=auth).json()


def _reminder(client, auth, **fields):
    body = {"type": "task", "scheduled_time": _iso(timedelta(hours=2))}
    body.update(fields)
    return client.post("/reminders", json=body, headers=auth)


class TestCreate:
    def test_task_reminder(self, client, auth):
        task = _task(client, auth)
        r = _reminder(client, auth, task_id=task["id"])
        assert r.status_code == 201
        body = r.json()
        assert body["strategy"] == "smart"
        assert body["dismissed"] is False
        assert body["actual_time"] is None

    def test_task_reminder_needs_task(self, client, auth):
        r = _reminder(client, auth)
        assert r.status_code == 422
        assert r.json()["message"] == "Task reminders must have a task_id"

    def test_event_reminder_needs_event(self, client, auth):
        r = _reminder(client, auth, type="event")
        assert r.status_code == 422
        assert r.json()["message"] == "Event reminders must have an event_id"

    def test_habit_reminder_needs_a_link(self, client, auth):
        r = _reminder(client, auth, type="habit")
        assert r.status_code == 422
        assert r.json()["details"]["field"] == "habit_id"

    def test_habit_reminder(self, client, auth):
        habit = client.post(
            "/habits", json={"name": "Water plants", "frequency": "weekly"}, headers=auth
        ).json()
        r = _reminder(client, auth, type="habit", habit_id=habit["id"], strategy="gentle")
        assert r.status_code == 201
        assert r.json()["strategy"] == "gentle"

    def test_must_be_in_future(self, client, auth):
        task = _task(client, auth)
        r = _reminder(client, auth, task_id=task["id"], scheduled_time=_iso(-timedelta(minutes=1)))
        assert r.status_code == 422
        assert r.json()["message"] == "Reminder scheduled_time must be in the future"

    def test_score_range(self, client, auth):
        task = _task(client, auth)
        r = _reminder(client, auth, task_id=task["id"], effectiveness_score=1.5)
        assert r.status_code == 422
        assert r.json()["message"] == "effectiveness_score must be between 0 and 1"

    def test_linked_task_must_be_yours(self, client, auth, other_auth):
        task = _task(client, other_auth)
        r = _reminder(client, auth, task_id=task["id"])
        assert r.status_code == 404

    def test_unknown_strategy(self, client, auth):
        task = _task(client, auth)
        assert _reminder(client, auth, task_id=task["id"], strategy="nagging").status_code == 422


class TestLifecycle:
    def test_dismiss_stamps_actual_time(self, client, auth):
        task = _task(client, auth)
        reminder = _reminder(client, auth, task_id=task["id"]).json()
        r = client.post(f"/reminders/{reminder['id']}/dismiss", headers=auth)
        assert r.json()["dismissed"] is True
        assert r.json()["actual_time"] is not None

        r = client.patch(f"/reminders/{reminder['id']}", json={"dismissed": False}, headers=auth)
        assert r.json()["dismissed"] is False
        assert r.json()["actual_time"] is None

    def test_pending_list_excludes_dismissed(self, client, auth):
        task = _task(client, auth)
        later = _reminder(client, auth, task_id=task["id"], scheduled_time=_iso(timedelta(hours=5))).json()
        sooner = _reminder(client, auth, task_id=task["id"], scheduled_time=_iso(timedelta(hours=1))).json()
        gone = _reminder(client, auth, task_id=task["id"]).json()
        client.post(f"/reminders/{gone['id']}/dismiss", headers=auth)

        pending = client.get("/reminders", headers=auth).json()
        assert [r["id"] for r in pending["items"]] == [sooner["id"], later["id"]]
        everything = client.get("/reminders", params={"pending": False}, headers=auth).json()
        assert everything["total"] == 3

    def test_snooze_must_follow_schedule(self, client, auth):
        task = _task(client, auth)
        reminder = _reminder(client, auth, task_id=task["id"]).json()
        r = client.post(
            f"/reminders/{reminder['id']}/snooze", json={"until": _iso(timedelta(minutes=30))},
            headers=auth,
        )
        assert r.status_code == 422
        assert r.json()["message"] == "snoozed_until must be after scheduled_time"

        r = client.post(
            f"/reminders/{reminder['id']}/snooze", json={"until": _iso(timedelta(hours=3))},
            headers=auth,
        )
        assert r.status_code == 200
        assert r.json()["snoozed_until"] is not None

    def test_score(self, client, auth):
        task = _task(client, auth)
        reminder = _reminder(client, auth, task_id=task["id"]).json()
        r = client.post(
            f"/reminders/{reminder['id']}/score", json={"effectiveness_score": 0.75}, headers=auth
        )
        assert r.status_code == 200
        assert r.json()["effectiveness_score"] == 0.75

    def test_reschedule_into_past(self, client, auth):
        task = _task(client, auth)
        reminder = _reminder(client, auth, task_id=task["id"]).json()
        r = client.patch(
            f"/reminders/{reminder['id']}",
            json={"scheduled_time": _iso(-timedelta(hours=1))},
            headers=auth,
        )
        assert r.status_code == 422

    def test_delete(self, client, auth):
        task = _task(client, auth)
        reminder = _reminder(client, auth, task_id=task["id"]).json()
        assert client.delete(f"/reminders/{reminder['id']}", headers=auth).status_code == 204
        assert client.get(f"/reminders/{reminder['id']}", headers=auth).status_code == 404


class TestDue:
    def test_due_respects_snooze(self, client, db, user):
        headers, profile = user
        task = _task(client, headers)
        now = datetime.now(tz=timezone.utc)
        due = Reminder(user_id=profile.id, task_id=uuid.UUID(task["id"]), type="task",
                       scheduled_time=now - timedelta(minutes=10))
        snoozed = Reminder(user_id=profile.id, task_id=uuid.UUID(task["id"]), type="task",
                           scheduled_time=now - timedelta(minutes=10),
                           snoozed_until=now + timedelta(minutes=20))
        future = Reminder(user_id=profile.id, task_id=uuid.UUID(task["id"]), type="task",
                          scheduled_time=now + timedelta(hours=1))
        db.add_all([due, snoozed, future])
        db.commit()

        r = client.get("/reminders/due", headers=headers)
        assert r.status_code == 200
        assert [item["id"] for item in r.json()] == [str(due.id)]
