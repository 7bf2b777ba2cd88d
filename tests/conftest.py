"""Pytest fixtures: an isolated app per test on in-memory SQLite, plus a controllable clock."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from api import create_app
from api.config import TestingConfig
from api.deps import get_services
from models import DBStorage, SQLTokenStore, UserStore
from utils.security import PasswordHasher


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def hasher():
    """Cheap argon2 parameters so the suite stays fast."""
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def storage():
    db = DBStorage("sqlite:///:memory:")
    db.reload()
    try:
        yield db
    finally:
        db.close()
        db.drop_all()


@pytest.fixture
def token_store(storage):
    return SQLTokenStore(storage)


@pytest.fixture
def user_store(storage):
    return UserStore(storage)


@pytest.fixture
def user_id(user_store) -> uuid.UUID:
    """Persisted owner for refresh tokens (the FK requires a real user)."""
    return user_store.create("owner@example.com", "not-a-real-hash").id_uuid


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        get_services().storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    with app.app_context():
        yield get_services()
