# File: tests/conftest.py

import os

# Settings are read at import time; point them at throwaway values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["FRONTEND_URL"] = "http://localhost:3000"
os.environ.pop("GOOGLE_CLIENT_ID", None)
os.environ.pop("GOOGLE_CLIENT_SECRET", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gearshare.api.deps import get_db
from gearshare.db.init_db import init_db
from gearshare.main import app
from gearshare.models.base import Base
from gearshare.services import auth_service


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup_payload():
    return {"email": "a@b.com", "password": "Abcdefg1!", "name": "Ann"}


@pytest.fixture
def complete_signup_payload(signup_payload):
    return {**signup_payload, "birthday": "1990-05-17", "phone_number": "+1 5551234567"}


@pytest.fixture
def login(client):
    """Log in and return the access token, without leaving a cookie on the client."""

    def _login(email: str, password: str) -> str:
        resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        client.cookies.clear()
        return resp.json()["access_token"]

    return _login


@pytest.fixture
def miss_first_lookup(monkeypatch):
    """Make the next uniqueness pre-check come back empty, as if a concurrent write landed after it."""

    def _miss(name: str) -> list[str]:
        real = getattr(auth_service, name)
        calls: list[str] = []

        def lookup(db, value):
            calls.append(value)
            if len(calls) == 1:
                return None
            return real(db, value)

        monkeypatch.setattr(auth_service, name, lookup)
        return calls

    return _miss
