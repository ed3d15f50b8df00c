"""Customers & Dashboard — platform stats, aggregate usage and the customer list.

Invariants:
    - Customer pages come from the upstream; local filters only narrow the fetched page
    - hasApiUsage is True only when the 30-day usage report shows totalRequests > 0;
      a failed usage lookup counts as no usage and never fails the page
    - Usage lookups for one page run concurrently
    - period picks the signup window (thisYear, lastYear, custom, all); startDate and
      endDate apply only with period=custom
    - Pagination block always carries page, limit, total, totalPages, hasNextPage, hasPrevPage
"""

import asyncio
import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from cooler_admin.api.responses import success
from cooler_admin.core.customer_filters import (
    CustomerFilter, date_range_for_period, filter_customers,
)
from cooler_admin.core.domain_types import (
    ApiStatusFilter, CustomerSortField, DatePeriod, SortDirection, UsagePeriod,
)
from cooler_admin.core.errors import CoolerAdminError
from cooler_admin.infrastructure.upstream_client import (
    CoolerApiClient, get_upstream, path_segment,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["customers"])

USAGE_CHECK_DAYS = 30


@router.get("/stats")
async def dashboard_stats(upstream: CoolerApiClient = Depends(get_upstream)):
    """Totals for users, organizations and API keys."""
    data = await upstream.get("/admin/stats", action="fetch dashboard stats")
    return success(data=data)


@router.get("/api-usage")
async def aggregate_usage(
    days: int = Query(30, ge=1, le=365),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Platform-wide daily usage, endpoint distribution and performance."""
    data = await upstream.get(
        "/admin/api-usage", action="fetch aggregate usage", params={"days": days},
    )
    return success(data=data)


async def has_api_usage(upstream: CoolerApiClient, user_id: str) -> bool:
    try:
        usage = await upstream.get(
            f"/admin/customers/{path_segment(user_id)}/api-usage",
            action="check API usage",
            params={"days": USAGE_CHECK_DAYS},
        )
    except CoolerAdminError as e:
        logger.warning(
            f"Failed to check API usage for user {user_id}: {e.message}",
            extra={"user_id": user_id},
        )
        return False
    return isinstance(usage, dict) and (usage.get("totalRequests") or 0) > 0


@router.get("/customers")
async def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    search: str | None = Query(None, max_length=200),
    include_usage: bool = Query(True, alias="includeUsage"),
    plan_id: str | None = Query(None, alias="planId"),
    api_status: ApiStatusFilter = Query(ApiStatusFilter.ALL, alias="apiStatus"),
    only_api_users: bool = Query(False, alias="onlyApiUsers"),
    only_non_api_users: bool = Query(False, alias="onlyNonApiUsers"),
    start_date: str = Query("", alias="startDate", max_length=10),
    end_date: str = Query("", alias="endDate", max_length=10),
    period: DatePeriod = Query(DatePeriod.ALL),
    sort_field: CustomerSortField = Query(CustomerSortField.DATE_CREATED, alias="sortField"),
    sort_direction: SortDirection = Query(SortDirection.DESC, alias="sortDirection"),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """One upstream page of customers, enriched and filtered."""
    data = await upstream.get(
        "/admin/customers",
        action="fetch customers",
        params={"page": page, "limit": limit, "search": search or None},
    ) or {}
    customers = data.get("customers") or []

    if include_usage and customers:
        flags = await asyncio.gather(
            *(has_api_usage(upstream, c.get("userId")) for c in customers),
        )
        customers = [
            {**c, "hasApiUsage": flag, "lastActivity": c.get("lastActivity")}
            for c, flag in zip(customers, flags)
        ]

    start, end = date_range_for_period(period, date.today(), start_date, end_date)
    criteria = CustomerFilter(
        search=search or "",
        only_api_users=only_api_users,
        only_non_api_users=only_non_api_users,
        plan_id=plan_id,
        api_status=api_status,
        start_date=start,
        end_date=end,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
    return success(
        customers=filter_customers(customers, criteria),
        pagination={
            "page": page,
            "limit": limit,
            "total": data.get("total", 0),
            "totalPages": data.get("totalPages", 0),
            "hasNextPage": data.get("hasNextPage", False),
            "hasPrevPage": data.get("hasPrevPage", False),
        },
    )


@router.get("/customers/{user_id}/usage")
async def customer_usage(
    user_id: str,
    period: str = Query(UsagePeriod.MONTH.value, max_length=10),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Usage breakdown for one customer over 7, 30 or 90 days."""
    try:
        days = UsagePeriod(period).days
    except ValueError:
        days = UsagePeriod.QUARTER.days
    data = await upstream.get(
        f"/admin/customers/{path_segment(user_id)}/api-usage",
        action="fetch customer usage",
        params={"days": days},
    )
    return success(userId=user_id, period=period, data=data)
