"""API Requests — recent upstream API traffic, platform-wide or per customer.

Invariants:
    - userId switches the upstream path to the per-customer feed
    - limit defaults to 100 and is forwarded as-is
    - /metrics filters locally after the same upstream call; metrics describe the
      whole fetched feed, the filters only narrow the returned list
"""

import logging

from fastapi import APIRouter, Depends, Query

from cooler_admin.api.responses import success
from cooler_admin.core.domain_types import RequestStatusFilter
from cooler_admin.core.request_metrics import compute_request_metrics, filter_requests
from cooler_admin.infrastructure.upstream_client import (
    CoolerApiClient, get_upstream, path_segment,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/api-requests", tags=["api-requests"])


async def fetch_recent_requests(
    upstream: CoolerApiClient, limit: int, user_id: str | None,
):
    """Shared by the list and metrics endpoints (and the CLI watcher)."""
    path = (
        f"/admin/customers/{path_segment(user_id)}/api-requests/recent"
        if user_id
        else "/admin/api-requests/recent"
    )
    logger.info(f"API Requests: Fetching from {upstream.url_for(path)}?limit={limit}")
    return await upstream.get(
        path, action="fetch API requests", params={"limit": limit},
    )


@router.get("")
async def list_api_requests(
    limit: int = Query(100, ge=1, le=1000),
    user_id: str | None = Query(None, alias="userId"),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Proxy the recent-requests feed."""
    data = await fetch_recent_requests(upstream, limit, user_id)
    return success(data=data)


@router.get("/metrics")
async def api_request_metrics(
    limit: int = Query(100, ge=1, le=1000),
    user_id: str | None = Query(None, alias="userId"),
    search: str = Query("", max_length=200),
    status_filter: RequestStatusFilter = Query(RequestStatusFilter.ALL, alias="status"),
    endpoint: str = Query("", max_length=500),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Filtered recent requests plus a performance summary of the whole feed."""
    data = await fetch_recent_requests(upstream, limit, user_id)
    requests = data if isinstance(data, list) else []
    filtered = filter_requests(
        requests,
        search=search,
        status=status_filter,
        endpoint=endpoint,
        user_id=user_id or "",
    )
    return success(data=filtered, metrics=compute_request_metrics(requests))
