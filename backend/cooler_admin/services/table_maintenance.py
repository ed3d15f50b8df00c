"""Table Maintenance — destructive admin operations on the Cooler database.

Invariants:
    - Only ClearableTable members can be cleared or counted (no caller-supplied SQL)
    - clear_table never raises: failures come back as ClearResult(success=False, error=...)
    - get_table_counts never raises: a table that cannot be counted reports 0
    - clear_database runs every target even when earlier ones fail, in ClearTarget order
    - The vector DB lives behind the upstream API; it is cleared over HTTP, not SQL

Design Decisions:
    - Targets run in-process instead of calling our own HTTP routes, so one request
      holds one DB session and one admin check
"""

import logging
import time
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cooler_admin.core.domain_types import ClearableTable, ClearTarget
from cooler_admin.core.errors import CoolerAdminError, UpstreamAPIError
from cooler_admin.db.base import Base
from cooler_admin.infrastructure.upstream_client import CoolerApiClient
from cooler_admin.models.anomaly_flag import AnomalyFlag
from cooler_admin.models.integration import Integration, SHOPIFY_INTEGRATION_TYPE
from cooler_admin.models.submission import Submission
from cooler_admin.models.transaction import Transaction, TransactionItem

logger = logging.getLogger(__name__)

VECTORDB_CLEAR_PATH = "/admin/vector-db/clear-all"
VECTORDB_TIMEOUT_SECONDS = 10.0

_TABLE_MODELS: dict[ClearableTable, type[Base]] = {
    ClearableTable.ANOMALY_FLAGS: AnomalyFlag,
    ClearableTable.SUBMISSIONS: Submission,
    ClearableTable.TRANSACTIONS: Transaction,
    ClearableTable.TRANSACTION_ITEMS: TransactionItem,
    ClearableTable.INTEGRATIONS: Integration,
}


@dataclass
class ClearResult:
    """Outcome of clearing one table or target."""
    success: bool
    row_count: int = 0
    error: str | None = None
    api_response: object = None


async def _rollback_quietly(db: AsyncSession, label: str) -> None:
    """Roll back after a failed statement; a dead connection may refuse even that."""
    try:
        await db.rollback()
    except Exception as e:
        logger.warning(
            f"Rollback after failure on {label} also failed: {e!r}",
            extra={"table": label},
        )


def _describe(e: Exception) -> str:
    if isinstance(e, SQLAlchemyError):
        return str(getattr(e, "orig", None) or e)
    return str(e) or type(e).__name__


async def _delete_and_commit(db: AsyncSession, statement, label: str) -> ClearResult:
    start = time.monotonic()
    try:
        result = await db.execute(statement)
        await db.commit()
    except Exception as e:
        # asyncpg connect timeouts and socket errors reach here unwrapped
        await _rollback_quietly(db, label)
        message = _describe(e)
        logger.error(
            f"Failed to clear table {label}: {message}", extra={"table": label},
        )
        return ClearResult(success=False, error=message)

    row_count = max(result.rowcount or 0, 0)
    logger.info(
        f"Successfully cleared {row_count} rows from {label}",
        extra={
            "table": label,
            "row_count": row_count,
            "duration_ms": int((time.monotonic() - start) * 1000),
        },
    )
    return ClearResult(success=True, row_count=row_count)


async def clear_table(db: AsyncSession, table: ClearableTable) -> ClearResult:
    """DELETE every row of one allow-listed table."""
    table = ClearableTable(table)
    logger.info(f"Clearing table: {table.value}", extra={"table": table.value})
    return await _delete_and_commit(db, delete(_TABLE_MODELS[table]), table.value)


async def clear_tables(
    db: AsyncSession, tables: list[ClearableTable],
) -> dict[str, ClearResult]:
    """Clear several tables in sequence; each result is independent."""
    results = {}
    for table in tables:
        table = ClearableTable(table)
        results[table.value] = await clear_table(db, table)
    return results


async def clear_shopify_integrations(db: AsyncSession) -> ClearResult:
    """DELETE only the Shopify rows of the integrations table."""
    statement = delete(Integration).where(
        Integration.type == SHOPIFY_INTEGRATION_TYPE,
    )
    return await _delete_and_commit(db, statement, "integrations (shopify)")


async def get_table_counts(
    db: AsyncSession, tables: list[ClearableTable],
) -> dict[str, int]:
    """Row count per table; tables that cannot be counted report 0."""
    counts = {}
    for table in tables:
        table = ClearableTable(table)
        try:
            result = await db.execute(
                select(func.count()).select_from(_TABLE_MODELS[table]),
            )
            counts[table.value] = int(result.scalar_one())
        except Exception as e:
            await _rollback_quietly(db, table.value)
            logger.error(
                f"Failed to get count for table {table.value}: {_describe(e)}",
                extra={"table": table.value},
            )
            counts[table.value] = 0
    return counts


async def clear_vectordb(upstream: CoolerApiClient) -> ClearResult:
    """Ask the upstream API to drop every vector embedding."""
    logger.info(f"Calling {upstream.url_for(VECTORDB_CLEAR_PATH)} to clear VectorDB")
    try:
        response = await upstream.delete(
            VECTORDB_CLEAR_PATH,
            action="call Cooler API",
            timeout=VECTORDB_TIMEOUT_SECONDS,
        )
    except UpstreamAPIError as e:
        error = f"API call failed: {e.status_code}"
        return ClearResult(success=False, error=f"{error}: {e.details}" if e.details else error)
    except CoolerAdminError as e:
        error = f"{e.message}: {e.details}" if e.details else e.message
        return ClearResult(success=False, error=error)
    logger.info("VectorDB cleared successfully")
    return ClearResult(success=True, api_response=response)


async def _run_target(
    target: ClearTarget, db: AsyncSession, upstream: CoolerApiClient,
) -> ClearResult:
    if target == ClearTarget.VECTORDB:
        return await clear_vectordb(upstream)
    if target == ClearTarget.INTEGRATIONS:
        return await clear_shopify_integrations(db)
    table = {
        ClearTarget.TRANSACTIONS: ClearableTable.TRANSACTIONS,
        ClearTarget.TRANSACTION_ITEMS: ClearableTable.TRANSACTION_ITEMS,
        ClearTarget.SUBMISSIONS: ClearableTable.SUBMISSIONS,
        ClearTarget.ANOMALIES: ClearableTable.ANOMALY_FLAGS,
    }[target]
    return await clear_table(db, table)


async def clear_database(db: AsyncSession, upstream: CoolerApiClient) -> dict:
    """Clear every target and summarize. Never stops on a failed target."""
    results: dict[str, dict] = {}
    for target in ClearTarget:
        logger.info(f"Clearing {target.value}...", extra={"target": target.value})
        try:
            outcome = await _run_target(target, db, upstream)
        except Exception as e:
            logger.error(
                f"Clearing {target.value} raised: {e}",
                extra={"target": target.value}, exc_info=True,
            )
            outcome = ClearResult(success=False, error=str(e) or type(e).__name__)
        results[target.value] = {"success": outcome.success, "error": outcome.error}

    cleared = sum(1 for r in results.values() if r["success"])
    total = len(results)
    overall = cleared == total
    message = (
        f"Successfully cleared {cleared}/{total} database tables"
        if overall
        else f"Cleared {cleared}/{total} database tables with some errors"
    )
    logger.info(message)
    return {
        "success": overall,
        "message": message,
        "results": results,
        "summary": {"cleared": cleared, "total": total, "errors": total - cleared},
    }
