"""
Fixed-window rate limiter: unit tests with a fake clock, plus the
FastAPI dependency through the tasks endpoints.
"""
from types import SimpleNamespace

from app.core.config import settings
from app.core import rate_limit as rate_limit_module
from app.core.rate_limit import RateLimiter, get_client_identifier, rate_limiters


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _request(headers=None, host="10.0.0.1"):
    return SimpleNamespace(
        headers={k.lower(): v for k, v in (headers or {}).items()},
        client=SimpleNamespace(host=host) if host else None,
    )


class TestRateLimiter:
    def test_allows_up_to_max(self):
        limiter = RateLimiter(60, 3, "slow down", clock=FakeClock())
        results = [limiter.check("a") for _ in range(3)]
        assert all(r.allowed for r in results)
        assert [r.remaining for r in results] == [2, 1, 0]

        refused = limiter.check("a")
        assert not refused.allowed
        assert refused.remaining == 0
        assert refused.message == "slow down"

    def test_identifiers_are_independent(self):
        limiter = RateLimiter(60, 1, clock=FakeClock())
        assert limiter.check("a").allowed
        assert limiter.check("b").allowed
        assert not limiter.check("a").allowed

    def test_window_expires(self):
        clock = FakeClock()
        limiter = RateLimiter(60, 1, clock=clock)
        first = limiter.check("a")
        assert first.reset_at == 1060.0
        assert not limiter.check("a").allowed

        clock.now = 1061.0
        again = limiter.check("a")
        assert again.allowed
        assert again.reset_at == 1121.0

    def test_cleanup_drops_expired(self):
        clock = FakeClock()
        limiter = RateLimiter(10, 5, clock=clock)
        limiter.check("a")
        clock.now += 5
        limiter.check("b")
        clock.now += 6
        assert limiter.cleanup() == 1
        assert limiter.check("b").remaining == 3

    def test_reset(self):
        limiter = RateLimiter(60, 1, clock=FakeClock())
        limiter.check("a")
        limiter.reset()
        assert limiter.check("a").allowed

    def test_named_limiters(self):
        assert rate_limiters["auth"].max_requests == 5
        assert rate_limiters["auth"].window_seconds == 15 * 60
        assert rate_limiters["api"].max_requests == 100
        assert rate_limiters["tasks"].max_requests == 30
        assert rate_limiters["forms"].max_requests == 10


class TestClientIdentifier:
    def test_forwarded_for_first_address(self, monkeypatch):
        monkeypatch.setattr(settings, "APP_ENV", "production")
        req = _request({"X-Forwarded-For": "203.0.113.5, 10.0.0.2"})
        assert get_client_identifier(req) == "203.0.113.5"

    def test_header_precedence(self, monkeypatch):
        monkeypatch.setattr(settings, "APP_ENV", "production")
        assert get_client_identifier(_request({"X-Real-IP": "1.1.1.1"})) == "1.1.1.1"
        assert get_client_identifier(_request({"CF-Connecting-IP": "2.2.2.2"})) == "2.2.2.2"
        assert get_client_identifier(_request()) == "10.0.0.1"
        assert get_client_identifier(_request(host=None)) == "unknown"

    def test_development_prefix(self, monkeypatch):
        monkeypatch.setattr(settings, "APP_ENV", "development")
        assert get_client_identifier(_request()) == "dev-10.0.0.1"


class TestDependency:
    def test_task_writes_are_limited(self, client, auth):
        for i in range(30):
            r = client.post("/tasks", json={"title": f"task {i}"}, headers=auth)
            assert r.status_code == 201
        r = client.post("/tasks", json={"title": "one too many"}, headers=auth)
        assert r.status_code == 429
        assert r.json()["message"] == "Too many task operations. Please slow down."

    def test_reads_are_not_limited(self, client, auth):
        for _ in range(35):
            assert client.get("/tasks", headers=auth).status_code == 200

    def test_disabled(self, client, auth, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
        for i in range(32):
            assert client.post("/tasks", json={"title": f"t{i}"}, headers=auth).status_code == 201

    def test_dashboard_uses_api_limiter(self, client, auth, monkeypatch):
        monkeypatch.setattr(rate_limiters["api"], "max_requests", 2)
        assert client.get("/dashboard/today", headers=auth).status_code == 200
        assert client.get("/dashboard/today", headers=auth).status_code == 200
        r = client.get("/dashboard/today", headers=auth)
        assert r.status_code == 429
        assert r.json()["code"] == "RATE_LIMIT_EXCEEDED"

    def test_expired_windows_swept_at_threshold(self, client, auth, monkeypatch):
        monkeypatch.setattr(rate_limit_module, "SWEEP_THRESHOLD", 1)
        limiter = rate_limiters["tasks"]
        limiter._store["stale"] = rate_limit_module._Window(count=1, reset_at=0.0)
        assert client.post("/tasks", json={"title": "sweep"}, headers=auth).status_code == 201
        assert "stale" not in limiter._store

    def test_other_writes_use_forms_limiter(self, client, auth, monkeypatch):
        monkeypatch.setattr(rate_limiters["forms"], "max_requests", 2)
        r = client.post("/integrations", json={"provider": "ical"}, headers=auth)
        assert r.status_code == 201
        integration_id = r.json()["id"]
        assert client.post(f"/integrations/{integration_id}/sync", headers=auth).status_code == 200
        r = client.delete(f"/integrations/{integration_id}", headers=auth)
        assert r.status_code == 429
        assert r.json()["message"] == "Too many form submissions. Please try again in a minute."
