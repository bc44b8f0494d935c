from __future__ import annotations

import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TOKEN_CLEANUP_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import onlineshops.models  # noqa: E402,F401
from onlineshops.db.base import Base  # noqa: E402
from onlineshops.db.session import get_db  # noqa: E402
from onlineshops.models.enums import UserRole  # noqa: E402
from onlineshops.schemas.user import UserCreate  # noqa: E402
from onlineshops.services.users import create_user  # noqa: E402

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(
        email: str = "shopper@example.com",
        *,
        role: UserRole = UserRole.shopper,
        password: str = DEFAULT_PASSWORD,
    ):
        return create_user(
            db,
            UserCreate(email=email, password=password, first_name="Test", last_name="User", role=role),
        )

    return _make_user


@pytest.fixture
def client(session_factory):
    from onlineshops.main import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
