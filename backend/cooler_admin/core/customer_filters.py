"""Customer Filters — pure filtering and sorting of upstream customer records.

Invariants:
    - Inputs are customer dicts as returned by /admin/customers (camelCase keys)
    - Never mutates the input list; always returns a new list
    - Missing or unparseable dates sort as the epoch (oldest)

Design Decisions:
    - Filters run after the upstream page is fetched, so they only narrow
      the current page (the upstream search already handled the coarse cut)
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone

from cooler_admin.core.domain_types import (
    ApiStatusFilter, CustomerSortField, DatePeriod, SortDirection,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CustomerFilter:
    """Criteria applied by filter_customers."""
    search: str = ""
    only_api_users: bool = False
    only_non_api_users: bool = False
    plan_id: str | None = None
    api_status: ApiStatusFilter = ApiStatusFilter.ALL
    start_date: str = ""
    end_date: str = ""
    sort_field: CustomerSortField = CustomerSortField.DATE_CREATED
    sort_direction: SortDirection = SortDirection.DESC


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp, falling back to the epoch."""
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def date_range_for_period(
    period: DatePeriod,
    today: date,
    custom_start: str = "",
    custom_end: str = "",
) -> tuple[str, str]:
    """Resolve a named period to (start, end) ISO dates. Empty strings mean unbounded."""
    if period == DatePeriod.THIS_YEAR:
        return date(today.year, 1, 1).isoformat(), today.isoformat()
    if period == DatePeriod.LAST_YEAR:
        return (
            date(today.year - 1, 1, 1).isoformat(),
            date(today.year - 1, 12, 31).isoformat(),
        )
    if period == DatePeriod.CUSTOM:
        return custom_start, custom_end
    return "", ""


def _matches_search(customer: dict, term: str) -> bool:
    term = term.lower()
    return any(
        term in (customer.get(key) or "").lower()
        for key in ("firstName", "lastName", "email", "organizationName")
    )


def _matches_api_status(customer: dict, status: ApiStatusFilter) -> bool:
    has_usage = bool(customer.get("hasApiUsage"))
    key_count = customer.get("apiKeyCount") or 0
    if status == ApiStatusFilter.ACTIVE:
        return has_usage
    if status == ApiStatusFilter.NO_USAGE:
        return not has_usage and key_count > 0
    if status == ApiStatusFilter.NO_KEYS:
        return key_count == 0
    return True


def _within_dates(customer: dict, start: str, end: str) -> bool:
    created = (customer.get("dateCreated") or "")[:10]
    if start and (not created or created < start):
        return False
    if end and (not created or created > end):
        return False
    return True


def _sort_key(field: CustomerSortField):
    if field == CustomerSortField.LAST_ACTIVITY:
        return lambda c: parse_timestamp(c.get("lastActivity"))
    if field == CustomerSortField.ORGANIZATION_NAME:
        return lambda c: (c.get("organizationName") or "").lower()
    return lambda c: parse_timestamp(c.get("dateCreated"))


def filter_customers(customers: list[dict], criteria: CustomerFilter) -> list[dict]:
    """Apply search, usage, plan, status and date filters, then sort. Pure, no IO."""
    result = list(customers)

    if criteria.search:
        result = [c for c in result if _matches_search(c, criteria.search)]

    # Both toggles on (or both off) means no usage restriction
    if criteria.only_api_users and not criteria.only_non_api_users:
        result = [c for c in result if c.get("hasApiUsage")]
    elif criteria.only_non_api_users and not criteria.only_api_users:
        result = [c for c in result if not c.get("hasApiUsage")]

    if criteria.plan_id:
        result = [c for c in result if c.get("planId") == criteria.plan_id]

    if criteria.api_status != ApiStatusFilter.ALL:
        result = [c for c in result if _matches_api_status(c, criteria.api_status)]

    if criteria.start_date or criteria.end_date:
        result = [
            c for c in result
            if _within_dates(c, criteria.start_date, criteria.end_date)
        ]

    return sorted(
        result,
        key=_sort_key(criteria.sort_field),
        reverse=criteria.sort_direction == SortDirection.DESC,
    )
