"""
Task endpoints and the rules the task service enforces.
"""
import pytest

from app.core.errors import DomainValidationError
from app.services.tasks import validate_recurring_rule


def _create(client, auth, **fields):
    body = {"title": "Write report"}
    body.update(fields)
    r = client.post("/tasks", json=body, headers=auth)
    assert r.status_code == 201, r.text
    return r.json()


class TestRecurringRule:
    def test_none_is_allowed(self):
        assert validate_recurring_rule(None) is None

    def test_valid_rule(self):
        rule = {"frequency": "weekly", "interval": 2, "days_of_week": [0, 6], "end_date": "2027-01-01"}
        assert validate_recurring_rule(rule) == rule

    @pytest.mark.parametrize("rule,message", [
        ({}, "recurring_rule must contain a frequency field"),
        ({"frequency": "hourly"},
         "recurring_rule frequency must be one of: daily, weekly, monthly, yearly"),
        ({"frequency": "daily", "interval": 0}, "recurring_rule interval must be a positive integer"),
        ({"frequency": "weekly", "days_of_week": [7]},
         "recurring_rule days_of_week must contain integers 0-6"),
        ({"frequency": "monthly", "day_of_month": 32},
         "recurring_rule day_of_month must be between 1 and 31"),
        ({"frequency": "yearly", "end_date": "soon"}, "recurring_rule end_date must be an ISO date"),
    ])
    def test_invalid_rules(self, rule, message):
        with pytest.raises(DomainValidationError) as exc:
            validate_recurring_rule(rule)
        assert exc.value.message == message
        assert exc.value.field == "recurring_rule"


class TestCreate:
    def test_defaults(self, client, auth):
        task = _create(client, auth)
        assert task["completed"] is False
        assert task["completed_at"] is None
        assert task["priority"] == 2
        assert task["priority_label"] == "medium"
        assert task["tags"] == []
        assert task["source"] == "manual"
        assert task["deleted_at"] is None

    def test_priority_by_name(self, client, auth):
        assert _create(client, auth, priority="urgent")["priority"] == 4

    def test_priority_out_of_range(self, client, auth):
        r = client.post("/tasks", json={"title": "x", "priority": 9}, headers=auth)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_blank_title(self, client, auth):
        r = client.post("/tasks", json={"title": "   "}, headers=auth)
        assert r.status_code == 422
        assert "Title is required" in r.json()["details"]["errors"][0]["message"]

    def test_bad_recurring_rule(self, client, auth):
        r = client.post(
            "/tasks", json={"title": "Gym", "recurring_rule": {"interval": 1}}, headers=auth
        )
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "DOMAIN_VALIDATION_ERROR"
        assert body["message"] == "recurring_rule must contain a frequency field"

    def test_created_completed_is_stamped(self, client, auth):
        task = _create(client, auth, completed=True)
        assert task["completed"] is True
        assert task["completed_at"] is not None

    def test_requires_auth(self, client):
        assert client.post("/tasks", json={"title": "x"}).status_code == 401


class TestCompletion:
    def test_toggle_stamps_and_clears(self, client, auth):
        task = _create(client, auth)
        r = client.post(f"/tasks/{task['id']}/toggle", headers=auth)
        assert r.json()["completed"] is True
        assert r.json()["completed_at"] is not None

        r = client.post(f"/tasks/{task['id']}/toggle", headers=auth)
        assert r.json()["completed"] is False
        assert r.json()["completed_at"] is None

    def test_patch_completed(self, client, auth):
        task = _create(client, auth)
        r = client.patch(f"/tasks/{task['id']}", json={"completed": True}, headers=auth)
        first_stamp = r.json()["completed_at"]
        assert first_stamp is not None
        # already complete: stamp is kept
        r = client.patch(f"/tasks/{task['id']}", json={"completed": True}, headers=auth)
        assert r.json()["completed_at"] == first_stamp


class TestUpdate:
    def test_partial_update(self, client, auth):
        task = _create(client, auth, description="draft")
        r = client.patch(
            f"/tasks/{task['id']}", json={"title": "Final report", "tags": ["work"]}, headers=auth
        )
        assert r.status_code == 200
        body = r.json()
        assert body["title"] == "Final report"
        assert body["tags"] == ["work"]
        assert body["description"] == "draft"

    def test_empty_body_is_noop(self, client, auth):
        task = _create(client, auth)
        r = client.patch(f"/tasks/{task['id']}", json={}, headers=auth)
        assert r.status_code == 200
        assert r.json()["title"] == task["title"]

    def test_null_title_rejected(self, client, auth):
        task = _create(client, auth)
        r = client.patch(f"/tasks/{task['id']}", json={"title": None}, headers=auth)
        assert r.status_code == 422
        assert r.json()["message"] == "Title is required"

    def test_clear_recurring_rule(self, client, auth):
        task = _create(client, auth, recurring_rule={"frequency": "daily"})
        r = client.patch(f"/tasks/{task['id']}", json={"recurring_rule": None}, headers=auth)
        assert r.status_code == 200
        assert r.json()["recurring_rule"] is None


class TestListing:
    def test_ordering(self, client, auth):
        _create(client, auth, title="low", priority=1, due_date="2026-03-01")
        _create(client, auth, title="urgent-late", priority=4, due_date="2026-03-01", due_time="17:00")
        _create(client, auth, title="urgent-no-time", priority=4, due_date="2026-03-01")
        _create(client, auth, title="urgent-early", priority=4, due_date="2026-03-01", due_time="08:00")
        r = client.get("/tasks", params={"date": "2026-03-01"}, headers=auth)
        titles = [t["title"] for t in r.json()["items"]]
        assert titles == ["urgent-early", "urgent-late", "urgent-no-time", "low"]

    def test_date_filter_and_total(self, client, auth):
        _create(client, auth, due_date="2026-04-01")
        _create(client, auth, due_date="2026-04-02")
        r = client.get("/tasks", params={"date": "2026-04-01"}, headers=auth)
        assert r.json()["total"] == 1

    def test_exclude_completed(self, client, auth):
        _create(client, auth, due_date="2026-05-01", completed=True)
        _create(client, auth, due_date="2026-05-01")
        r = client.get(
            "/tasks", params={"date": "2026-05-01", "include_completed": False}, headers=auth
        )
        assert r.json()["total"] == 1
        assert r.json()["items"][0]["completed"] is False

    def test_pagination(self, client, auth):
        for i in range(5):
            _create(client, auth, title=f"t{i}", due_date="2026-06-01")
        r = client.get(
            "/tasks", params={"date": "2026-06-01", "limit": 2, "offset": 4}, headers=auth
        )
        assert r.json()["total"] == 5
        assert len(r.json()["items"]) == 1


class TestSoftDelete:
    def test_delete_hides_task(self, client, auth):
        task = _create(client, auth, due_date="2026-07-01")
        r = client.delete(f"/tasks/{task['id']}", headers=auth)
        assert r.status_code == 204
        assert client.get(f"/tasks/{task['id']}", headers=auth).status_code == 404
        listed = client.get("/tasks", params={"date": "2026-07-01"}, headers=auth).json()
        assert listed["total"] == 0

    def test_delete_twice(self, client, auth):
        task = _create(client, auth)
        client.delete(f"/tasks/{task['id']}", headers=auth)
        r = client.delete(f"/tasks/{task['id']}", headers=auth)
        assert r.status_code == 409
        assert r.json()["code"] == "ALREADY_DELETED"

    def test_restore(self, client, auth):
        task = _create(client, auth)
        client.delete(f"/tasks/{task['id']}", headers=auth)
        r = client.post(f"/tasks/{task['id']}/restore", headers=auth)
        assert r.status_code == 200
        assert r.json()["deleted_at"] is None
        assert client.get(f"/tasks/{task['id']}", headers=auth).status_code == 200


class TestOwnership:
    def test_other_users_task_is_not_found(self, client, auth, other_auth):
        task = _create(client, auth)
        for call in (
            lambda: client.get(f"/tasks/{task['id']}", headers=other_auth),
            lambda: client.patch(f"/tasks/{task['id']}", json={"title": "mine"}, headers=other_auth),
            lambda: client.post(f"/tasks/{task['id']}/toggle", headers=other_auth),
            lambda: client.delete(f"/tasks/{task['id']}", headers=other_auth),
        ):
            r = call()
            assert r.status_code == 404
            assert r.json()["code"] == "NOT_FOUND"

    def test_lists_are_scoped(self, client, auth, other_auth):
        _create(client, auth, due_date="2026-08-08")
        r = client.get("/tasks", params={"date": "2026-08-08"}, headers=other_auth)
        assert r.json()["total"] == 0
