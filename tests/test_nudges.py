"""
Nudges: creation rules, active listing, acting on them and CO2 impact.
"""
from datetime import datetime, timedelta, timezone

from app.models.nudge import Nudge


def _nudge(client, auth, **fields):
    body = {
        "type": "eco",
        "title": "Take the train",
        "message": "The train emits far less than driving.",
        "impact_kg": 2.5,
    }
    body.update(fields)
    return client.post("/nudges", json=body, headers=auth)


class TestCreate:
    def test_create(self, client, auth):
        r = _nudge(client, auth)
        assert r.status_code == 201
        body = r.json()
        assert body["acted_on"] is False
        assert body["shown_at"] is None
        assert body["action_data"] == {}

    def test_blank_message(self, client, auth):
        r = _nudge(client, auth, message="   ")
        assert r.status_code == 422
        assert r.json()["message"] == "Nudge message cannot be empty"

    def test_negative_impact(self, client, auth):
        r = _nudge(client, auth, impact_kg=-1)
        assert r.json()["message"] == "impact_kg must be non-negative"

    def test_null_action_data(self, client, auth):
        r = _nudge(client, auth, action_data=None)
        assert r.json()["message"] == "action_data cannot be null JSONB"

    def test_expiry_in_past(self, client, auth):
        past = (datetime.now(tz=timezone.utc) - timedelta(hours=1)).isoformat()
        r = _nudge(client, auth, expires_at=past)
        assert r.status_code == 422
        assert r.json()["message"] == "expires_at must be in the future"

    def test_shown_at_in_future(self, client, auth):
        future = (datetime.now(tz=timezone.utc) + timedelta(hours=1)).isoformat()
        r = _nudge(client, auth, shown_at=future)
        assert r.status_code == 422
        assert r.json()["message"] == "shown_at cannot be in the future"
        assert r.json()["details"]["field"] == "shown_at"

    def test_shown_at_in_past_is_kept(self, client, auth):
        r = _nudge(client, auth, shown_at="2026-01-05T08:30:00Z")
        assert r.status_code == 201
        assert r.json()["shown_at"].startswith("2026-01-05T08:30:00")
        listed = client.get("/nudges", headers=auth).json()["items"][0]
        assert listed["shown_at"].startswith("2026-01-05T08:30:00")


class TestListing:
    def test_listing_marks_shown(self, client, auth):
        _nudge(client, auth)
        first = client.get("/nudges", headers=auth).json()
        stamp = first["items"][0]["shown_at"]
        assert stamp is not None
        second = client.get("/nudges", headers=auth).json()
        assert second["items"][0]["shown_at"] == stamp

    def test_expired_and_acted_are_hidden(self, client, db, user):
        headers, profile = user
        keep = _nudge(client, headers, title="keep").json()
        acted = _nudge(client, headers, title="acted").json()
        client.post(f"/nudges/{acted['id']}/act", headers=headers)
        db.add(Nudge(user_id=profile.id, type="health", title="old", message="m",
                     action_data={},
                     expires_at=datetime.now(tz=timezone.utc) - timedelta(days=1)))
        db.commit()

        listed = client.get("/nudges", headers=headers).json()
        assert [n["id"] for n in listed["items"]] == [keep["id"]]

    def test_dismiss(self, client, auth):
        nudge = _nudge(client, auth).json()
        assert client.post(f"/nudges/{nudge['id']}/dismiss", headers=auth).status_code == 200
        assert client.get("/nudges", headers=auth).json()["total"] == 0


class TestActions:
    def test_task_creation(self, client, auth):
        nudge = _nudge(
            client, auth, action_type="task_creation",
            action_data={"title": "Buy a train pass"},
        ).json()
        r = client.post(f"/nudges/{nudge['id']}/act", headers=auth)
        assert r.status_code == 200
        body = r.json()
        assert body["nudge"]["acted_on"] is True
        assert body["nudge"]["acted_at"] is not None
        task = client.get(f"/tasks/{body['created_task_id']}", headers=auth).json()
        assert task["title"] == "Buy a train pass"
        assert task["source"] == "ai_suggested"

    def test_habit_start(self, client, auth):
        nudge = _nudge(
            client, auth, action_type="habit_start",
            action_data={"name": "Meatless Monday", "frequency": "weekly",
                         "impact_per_completion": 1.2},
        ).json()
        body = client.post(f"/nudges/{nudge['id']}/act", headers=auth).json()
        habit = client.get(f"/habits/{body['created_habit_id']}", headers=auth).json()
        assert habit["name"] == "Meatless Monday"
        assert habit["frequency"] == "weekly"
        assert habit["category"] == "eco"

    def test_reminder_set_is_recorded_only(self, client, auth):
        nudge = _nudge(client, auth, action_type="reminder_set").json()
        body = client.post(f"/nudges/{nudge['id']}/act", headers=auth).json()
        assert body["nudge"]["acted_on"] is True
        assert body["created_task_id"] is None
        assert body["created_habit_id"] is None

    def test_cannot_act_twice(self, client, auth):
        nudge = _nudge(client, auth).json()
        client.post(f"/nudges/{nudge['id']}/act", headers=auth)
        r = client.post(f"/nudges/{nudge['id']}/act", headers=auth)
        assert r.status_code == 422
        assert r.json()["message"] == "Nudge has already been acted on"

    def test_other_users_nudge(self, client, auth, other_auth):
        nudge = _nudge(client, auth).json()
        assert client.post(f"/nudges/{nudge['id']}/act", headers=other_auth).status_code == 404


class TestImpact:
    def test_impact_sums_nudges_and_habits(self, client, auth):
        nudge = _nudge(client, auth, impact_kg=2.5).json()
        _nudge(client, auth, impact_kg=100)  # never acted on
        client.post(f"/nudges/{nudge['id']}/act", headers=auth)

        habit = client.post(
            "/habits",
            json={"name": "Bike", "frequency": "daily", "impact_per_completion": 0.5},
            headers=auth,
        ).json()
        for _ in range(4):
            client.post(f"/habits/{habit['id']}/complete", headers=auth)

        r = client.get("/nudges/impact", headers=auth)
        assert r.status_code == 200
        body = r.json()
        assert body["nudges_acted_on"] == 1
        assert body["nudge_impact_kg"] == 2.5
        assert body["habit_impact_kg"] == 2.0
        assert body["total_impact_kg"] == 4.5
