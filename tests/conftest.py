"""Pytest configuration and shared fixtures for PauseGate tests.

The application reads its configuration at import time, so the environment
is prepared here before any ``pausegate`` module is imported. All tests share
one SQLite file database that is emptied before each test.
"""

import os
import tempfile
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="pausegate-tests-"))

os.environ["APP_ENV"] = "development"
os.environ["APP_SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'test.db'}"
os.environ["SITE_NAME"] = "Test Site"
os.environ["SITE_TIMEZONE"] = "UTC"
os.environ["CRON_TOKEN"] = "cron-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session

from pausegate.config import settings
from pausegate.main import create_app
from pausegate.models import Base, MediaAsset, SystemSettings, User
from pausegate.models.user import Role
from pausegate.services.settings_service import MAINTENANCE_SETTINGS_KEY
from pausegate.utils.security import create_access_token, hash_password

TEST_PASSWORD = "correct-horse-battery"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def sync_engine():
    """Synchronous engine on the test database, for setup and inspection."""
    engine = create_engine(settings.sync_database_url)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_db(sync_engine):
    """Start every test with empty tables."""
    with Session(sync_engine) as session:
        for model in (SystemSettings, User, MediaAsset):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture()
def db_session(sync_engine):
    """Synchronous session for arranging test data."""
    with Session(sync_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture()
def store_settings(db_session):
    """Write a raw maintenance settings record."""

    def _store(value: dict) -> None:
        row = db_session.query(SystemSettings).filter_by(key=MAINTENANCE_SETTINGS_KEY).one_or_none()
        if row is None:
            db_session.add(SystemSettings(key=MAINTENANCE_SETTINGS_KEY, value=value))
        else:
            row.value = value
        db_session.commit()

    return _store


@pytest.fixture()
def stored_settings(db_session):
    """Read the raw maintenance settings record (None if absent)."""

    def _read() -> dict | None:
        db_session.expire_all()
        row = db_session.query(SystemSettings).filter_by(key=MAINTENANCE_SETTINGS_KEY).one_or_none()
        return row.value if row else None

    return _read


# =============================================================================
# Users and tokens
# =============================================================================


@pytest.fixture()
def make_user(db_session):
    """Create a user with the given role."""

    def _make(role: Role = Role.SUBSCRIBER, email: str | None = None) -> User:
        user = User(
            email=email or f"{role.value}@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            display_name=role.label,
            role=role.value,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def admin_user(make_user):
    return make_user(Role.ADMINISTRATOR)


@pytest.fixture()
def admin_token(admin_user):
    return create_access_token(admin_user.id, admin_user.role, admin_user.display_name)


@pytest.fixture()
def editor_token(make_user):
    user = make_user(Role.EDITOR)
    return create_access_token(user.id, user.role, user.display_name)


# =============================================================================
# Application
# =============================================================================


@pytest.fixture()
def app():
    return create_app(run_scheduler=False)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
