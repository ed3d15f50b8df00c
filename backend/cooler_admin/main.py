"""Cooler Admin API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CoolerAdminError → {success: false, error, details}
    - CORS configured from settings (not hardcoded)
    - Database pool and upstream client created on startup, closed on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cooler_admin.api.error_handlers import register_error_handlers
from cooler_admin.api.routes import (
    anomalies,
    api_requests,
    customers,
    health,
    impersonate,
    maintenance,
    transactions,
)
from cooler_admin.config import get_settings
from cooler_admin.infrastructure.database import init_db
from cooler_admin.infrastructure.observability import setup_logging
from cooler_admin.infrastructure.upstream_client import init_upstream

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        idle_timeout_seconds=settings.database_idle_timeout_seconds,
        connect_timeout_seconds=settings.database_connect_timeout_seconds,
    )
    upstream = init_upstream(
        settings.upstream_api_url,
        settings.upstream_admin_token,
        timeout_seconds=settings.upstream_timeout_seconds,
    )
    logger.info(f"Cooler Admin API started (upstream: {settings.upstream_api_url})")
    yield
    logger.info("Cooler Admin API shutting down")
    await upstream.aclose()
    await db.dispose()


app = FastAPI(
    title="Cooler Admin API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration, maintenance before transactions so
# DELETE /api/transactions/clear never reaches the per-user GET route
app.include_router(health.router)
app.include_router(maintenance.router)
app.include_router(api_requests.router)
app.include_router(customers.router)
app.include_router(anomalies.router)
app.include_router(transactions.router)
app.include_router(impersonate.router)

register_error_handlers(app)
