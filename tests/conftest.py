"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.rate_limit import rate_limiters
from app.db.base import Base, get_db
from app.main import app
from app.models.profile import Profile

SQLITE_URL = "sqlite:///./test_clearday.db"
PASSWORD = "correct-horse-42"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    for limiter in rate_limiters.values():
        limiter.reset()
    yield


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def signup_payload(email=None, **overrides):
    payload = {
        "email": email or f"user-{uuid.uuid4().hex[:10]}@example.com",
        "password": PASSWORD,
        "confirm_password": PASSWORD,
        "full_name": "Test User",
        "terms": True,
    }
    payload.update(overrides)
    return payload


def register(client, email=None):
    """Sign up a fresh account and return (bearer headers, user json)."""
    r = client.post("/auth/signup", json=signup_payload(email))
    assert r.status_code == 201, r.text
    body = r.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]


@pytest.fixture()
def auth(client):
    headers, _ = register(client)
    return headers


@pytest.fixture()
def user(client, db):
    """(headers, Profile row) for tests that also call services directly."""
    headers, body = register(client)
    profile = db.get(Profile, uuid.UUID(body["id"]))
    return headers, profile


@pytest.fixture()
def other_auth(client):
    headers, _ = register(client)
    return headers


@pytest.fixture()
def make_user(client):
    """Factory: `headers, user = make_user()` registers another account."""
    return lambda email=None: register(client, email)


@pytest.fixture()
def new_signup():
    return signup_payload
