"""Customer Transactions — recent transactions for one customer (bearer-gated)."""

import logging

from fastapi import APIRouter, Depends

from cooler_admin.api.dependencies import require_admin_token
from cooler_admin.api.responses import success
from cooler_admin.core.errors import RequestValidationFailed
from cooler_admin.infrastructure.upstream_client import (
    CoolerApiClient, get_upstream, path_segment,
)
from cooler_admin.schemas.transaction import summarize_transactions

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/transactions",
    tags=["transactions"],
    dependencies=[Depends(require_admin_token)],
)


@router.get("/{user_id}")
async def get_customer_transactions(
    user_id: str,
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Up to 7 recent transactions plus the customer's total transaction count."""
    if not user_id.strip():
        raise RequestValidationFailed("userId is required")

    path = f"/admin/customers/{path_segment(user_id)}/database-counts"
    logger.info(
        f"Fetching transactions for user {user_id} from {upstream.url_for(path)}",
        extra={"user_id": user_id},
    )
    data = await upstream.get(path, action="fetch transactions") or {}
    transactions, total = summarize_transactions(data)
    return success(userId=user_id, transactions=transactions, totalCount=total)
