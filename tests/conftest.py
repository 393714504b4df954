# tests/conftest.py

from __future__ import annotations

import os

# Configure the process before the application module is imported.
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STATIC_DIR"] = "does-not-exist"

from collections.abc import Iterator

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session

from taskmaster.db.config import create_db_engine, get_session
from taskmaster.db.init import init_db
from taskmaster.main import app
from taskmaster.models import User
from taskmaster.routers.tasks import get_task_service
from taskmaster.services.auth_service import AuthService
from taskmaster.services.security import (
    TokenService,
    get_password_hasher,
    get_token_service,
)
from taskmaster.services.task_service import TaskService

from .fakes import CountingHasher, FakeClock

TEST_SECRET = "test-secret"


@pytest.fixture()
def engine() -> Iterator[Engine]:
    """Fresh in-memory database per test."""
    db_engine = create_db_engine("sqlite://")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hasher() -> CountingHasher:
    return CountingHasher(rounds=4)


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(secret=TEST_SECRET)


@pytest.fixture()
def auth_service(session: Session, hasher: CountingHasher, tokens: TokenService) -> AuthService:
    return AuthService(session, hasher, tokens)


@pytest.fixture()
def task_service(session: Session, clock: FakeClock) -> TaskService:
    return TaskService(session, clock=clock)


@pytest.fixture()
def users(session: Session) -> tuple[User, User]:
    """Two owners inserted directly, for task tests that do not need real credentials."""
    alice = User(email="alice@example.com", password_hash="not-a-real-hash")
    bob = User(email="bob@example.com", password_hash="not-a-real-hash")
    session.add(alice)
    session.add(bob)
    session.commit()
    session.refresh(alice)
    session.refresh(bob)
    return alice, bob


@pytest.fixture()
def client(engine: Engine, hasher: CountingHasher, tokens: TokenService, clock: FakeClock) -> Iterator[TestClient]:
    """
    TestClient bound to the per-test database.

    Startup hooks are not run (no context manager), so the engine built
    by create_app is never used.
    """

    def override_get_session() -> Iterator[Session]:
        with Session(engine) as db_session:
            yield db_session

    def override_get_task_service(db_session: Session = Depends(get_session)) -> TaskService:
        return TaskService(db_session, clock=clock)

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_service] = lambda: tokens
    app.dependency_overrides[get_task_service] = override_get_task_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register(client: TestClient, email: str, password: str = "pw1") -> dict:
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
