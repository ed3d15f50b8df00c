"""Route test fixtures — FastAPI test client over the stubbed upstream and SQLite.

Invariants:
    - get_db overridden to hand out sessions from the per-test SQLite engine
    - get_upstream overridden to the MockTransport-backed CoolerApiClient
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - ASGITransport does not run the lifespan; the overrides replace everything it would set up
"""

import pytest
from httpx import ASGITransport, AsyncClient

import cooler_admin.infrastructure.database as db_module
from cooler_admin.infrastructure.database import DatabaseSessionManager, get_db
from cooler_admin.infrastructure.upstream_client import get_upstream
from cooler_admin.main import app


@pytest.fixture
async def client(test_engine, test_session_factory, upstream):
    """FastAPI test client with DB and upstream dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    async def override_get_upstream():
        return upstream

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upstream] = override_get_upstream

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
