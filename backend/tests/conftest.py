"""Root conftest — shared test configuration.

Invariants:
    - Environment is set before any cooler_admin import (settings are cached)
    - Every test gets a fresh in-memory SQLite database
    - The upstream Cooler API is an httpx.MockTransport stub; nothing leaves the process
"""

import os

# Ensure tests never talk to a real upstream or database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("UPSTREAM_ADMIN_TOKEN", "test-upstream-token")
os.environ.setdefault("UPSTREAM_API_URL", "http://upstream.test")
os.environ.setdefault("ADMIN_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("APP_URL", "https://app.test")

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from cooler_admin.db.base import Base  # noqa: E402
from cooler_admin.infrastructure.upstream_client import CoolerApiClient  # noqa: E402
import cooler_admin.models.anomaly_flag  # noqa: E402,F401
import cooler_admin.models.integration  # noqa: E402,F401
import cooler_admin.models.submission  # noqa: E402,F401
import cooler_admin.models.transaction  # noqa: E402,F401

UPSTREAM_TOKEN = os.environ["UPSTREAM_ADMIN_TOKEN"]


class UpstreamStub:
    """Answers (method, path) pairs with canned responses and records every request.

    A canned body may be a callable taking the httpx.Request; it can return an
    httpx.Response or raise a transport error.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, json=None, status_code: int = 200):
        self.routes[(method, path)] = (status_code, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, text="Not Found")
        status_code, body = self.routes[key]
        if callable(body):
            return body(request)
        return httpx.Response(status_code, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def upstream_stub():
    return UpstreamStub()


@pytest.fixture
async def upstream(upstream_stub):
    client = CoolerApiClient(
        "http://upstream.test",
        UPSTREAM_TOKEN,
        transport=httpx.MockTransport(upstream_stub.handler),
    )
    yield client
    await client.aclose()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
