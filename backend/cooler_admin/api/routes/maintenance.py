"""Maintenance — destructive clear operations, all behind the admin password header.

Invariants:
    - Every route here depends on require_admin_password (401 before any work)
    - Table routes report the number of rows removed
    - A failed table clear answers 500 with the database error as details
    - A non-2xx VectorDB clear keeps the upstream status ("API call failed: <status>");
      an unreachable Cooler API answers 500 ("Failed to call Cooler API")
    - clear-database always answers 200 with per-target results; `success` is true
      only when every target succeeded
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cooler_admin.api.dependencies import require_admin_password
from cooler_admin.api.responses import success
from cooler_admin.core.domain_types import ClearableTable
from cooler_admin.core.errors import (
    CoolerAdminError, ErrorCategory, ErrorSeverity, UpstreamAPIError,
)
from cooler_admin.infrastructure.database import get_db
from cooler_admin.infrastructure.upstream_client import CoolerApiClient, get_upstream
from cooler_admin.services.table_maintenance import (
    ClearResult,
    VECTORDB_CLEAR_PATH,
    VECTORDB_TIMEOUT_SECONDS,
    clear_database,
    clear_shopify_integrations,
    clear_table,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api",
    tags=["maintenance"],
    dependencies=[Depends(require_admin_password)],
)


class VectorDbCallFailed(CoolerAdminError):
    """Cooler API answered the VectorDB clear with a non-2xx status."""
    def __init__(self, e: UpstreamAPIError):
        super().__init__(
            f"API call failed: {e.status_code}", e.code, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, e.details, None, e.status_code,
        )


class ClearFailed(CoolerAdminError):
    """A table clear returned success=False."""
    def __init__(self, label: str, reason: str | None):
        super().__init__(
            f"Failed to clear {label}", "CLEAR_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, reason or "Unknown error", None, 500,
        )


def _table_response(result: ClearResult, label: str, title: str) -> dict:
    if not result.success:
        raise ClearFailed(label, result.error)
    return success(
        message=f"{title} cleared successfully. Removed {result.row_count} rows.",
        rowCount=result.row_count,
    )


@router.delete("/anomalies/clear")
async def clear_anomalies(db: AsyncSession = Depends(get_db)):
    result = await clear_table(db, ClearableTable.ANOMALY_FLAGS)
    return _table_response(result, "anomaly flags", "Anomaly flags")


@router.delete("/submissions/clear")
async def clear_submissions(db: AsyncSession = Depends(get_db)):
    result = await clear_table(db, ClearableTable.SUBMISSIONS)
    return _table_response(result, "submissions", "Submissions")


@router.delete("/transactions/clear")
async def clear_transactions(db: AsyncSession = Depends(get_db)):
    result = await clear_table(db, ClearableTable.TRANSACTIONS)
    return _table_response(result, "transactions", "Transactions")


@router.delete("/transaction-items/clear")
async def clear_transaction_items(db: AsyncSession = Depends(get_db)):
    result = await clear_table(db, ClearableTable.TRANSACTION_ITEMS)
    return _table_response(result, "transaction items", "Transaction items")


@router.delete("/integrations/clear")
async def clear_integrations(db: AsyncSession = Depends(get_db)):
    """Only Shopify integrations are removed."""
    result = await clear_shopify_integrations(db)
    return _table_response(result, "Shopify integrations", "Shopify integrations")


@router.delete("/vectordb/clear")
async def clear_vector_db(upstream: CoolerApiClient = Depends(get_upstream)):
    """Upstream-owned: the Cooler API drops every embedding."""
    logger.info(f"VectorDB Clear: Using Cooler API URL: {upstream.base_url}")
    try:
        response = await upstream.delete(
            VECTORDB_CLEAR_PATH,
            action="call Cooler API",
            timeout=VECTORDB_TIMEOUT_SECONDS,
        )
    except UpstreamAPIError as e:
        raise VectorDbCallFailed(e) from e
    return success(message="VectorDB cleared successfully", apiResponse=response)


@router.post("/clear-database")
async def clear_all(
    db: AsyncSession = Depends(get_db),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Clear every target in order and report per-target outcomes."""
    logger.info("Clear Database: Admin password verified, starting cleanup")
    return await clear_database(db, upstream)
