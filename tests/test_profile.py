"""
Profile read / update.
"""
import pytest

from app.core.clock import get_zone, is_valid_timezone


class TestProfile:
    def test_get(self, client, auth):
        r = client.get("/profile", headers=auth)
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["data"]["privacy_mode"] is False
        assert body["data"]["local_mode"] is False

    def test_update(self, client, auth):
        r = client.patch(
            "/profile",
            json={"full_name": "Ada L.", "timezone": "Europe/Madrid", "privacy_mode": True},
            headers=auth,
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["full_name"] == "Ada L."
        assert data["timezone"] == "Europe/Madrid"
        assert data["privacy_mode"] is True

    def test_unknown_timezone(self, client, auth):
        r = client.patch("/profile", json={"timezone": "Mars/Olympus_Mons"}, headers=auth)
        assert r.status_code == 422
        assert r.json()["details"]["field"] == "timezone"

    @pytest.mark.parametrize("name", ["America", "Europe", "../etc"])
    def test_zone_directory_name_rejected(self, client, auth, name):
        assert not is_valid_timezone(name)
        assert get_zone(name).key == "UTC"
        r = client.patch("/profile", json={"timezone": name}, headers=auth)
        assert r.status_code == 422
        assert r.json()["code"] == "DOMAIN_VALIDATION_ERROR"

    def test_email_taken(self, client, auth, make_user):
        _, other = make_user()
        r = client.patch("/profile", json={"email": other["email"]}, headers=auth)
        assert r.status_code == 422
        assert r.json()["message"] == "Email address is already registered"

    def test_email_is_normalised(self, client, auth):
        r = client.patch("/profile", json={"email": "  New.Address@Example.COM "}, headers=auth)
        assert r.json()["data"]["email"] == "new.address@example.com"

    def test_null_timezone_rejected(self, client, auth):
        r = client.patch("/profile", json={"timezone": None}, headers=auth)
        assert r.status_code == 422
