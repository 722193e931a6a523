"""Tests for session management."""

import pytest
from sqlalchemy.pool import NullPool

from pausegate.database import engine_options, get_db
from pausegate.models import SystemSettings


def test_sqlite_uses_null_pool():
    assert engine_options()["poolclass"] is NullPool


async def test_get_db_commits_on_success(db_session):
    sessions = get_db()
    session = await anext(sessions)
    session.add(SystemSettings(key="committed", value={"ok": True}))
    with pytest.raises(StopAsyncIteration):
        await anext(sessions)

    row = db_session.query(SystemSettings).filter_by(key="committed").one_or_none()
    assert row is not None
    assert row.value == {"ok": True}


async def test_get_db_rolls_back_on_error(db_session):
    sessions = get_db()
    session = await anext(sessions)
    session.add(SystemSettings(key="rolled_back", value={}))
    with pytest.raises(RuntimeError):
        await sessions.athrow(RuntimeError("boom"))

    assert db_session.query(SystemSettings).filter_by(key="rolled_back").one_or_none() is None
