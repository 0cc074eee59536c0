from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be in place before taskapi reads its settings.
os.environ["ENV"] = "test"
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

import taskapi.db.base  # noqa: F401,E402
from taskapi.db.session import get_session  # noqa: E402
from taskapi.main import app  # noqa: E402
from taskapi.models.user import User  # noqa: E402


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine):
    def _override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _override_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    """Insert a user row directly; password checks are not involved."""
    def _make(email: str = "owner@mail.com") -> User:
        user = User(email=email, password_hash="not-a-real-hash")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def register_and_login(client: TestClient, email: str, password: str = "secret123") -> dict:
    r = client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["data"]


@pytest.fixture()
def login_as(client):
    def _login(email: str, password: str = "secret123") -> dict:
        return register_and_login(client, email, password)

    return _login


@pytest.fixture()
def auth_headers(client):
    data = register_and_login(client, "alice@mail.com")
    return {"Authorization": f"Bearer {data['accessToken']}"}


@pytest.fixture()
def other_headers(client):
    data = register_and_login(client, "bob@mail.com")
    return {"Authorization": f"Bearer {data['accessToken']}"}
