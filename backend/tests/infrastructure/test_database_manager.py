"""Database Session Manager — error mapping and health check against SQLite."""

import pytest
from sqlalchemy import text

from cooler_admin.core.errors import DatabaseError
from cooler_admin.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager(test_engine, test_session_factory):
    mgr = DatabaseSessionManager.__new__(DatabaseSessionManager)
    mgr.engine = test_engine
    mgr._session_factory = test_session_factory
    return mgr


async def test_health_check_succeeds(manager):
    assert await manager.health_check() is True


async def test_sqlalchemy_errors_become_database_error(manager):
    with pytest.raises(DatabaseError) as exc_info:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))

    assert exc_info.value.http_status == 500
    assert exc_info.value.to_response()["error"] == "Database execute failed"
