"""Request Metrics — pure performance summary of recent API requests.

Invariants:
    - Input list is newest-first (upstream /recent ordering); the last entry is the oldest
    - Percentages and averages are rounded to whole numbers
    - Empty input yields all-zero metrics, never a ZeroDivisionError
    - The time span used for requests-per-minute is at least one minute
"""

from datetime import datetime, timezone

from cooler_admin.core.customer_filters import parse_timestamp
from cooler_admin.core.domain_types import RequestStatusFilter


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def compute_request_metrics(
    requests: list[dict], now: datetime | None = None,
) -> dict:
    """Compute success/error rates, mean latency and throughput. Pure, no IO."""
    if not requests:
        return {
            "totalRequests": 0,
            "successRate": 0,
            "averageResponseTime": 0,
            "requestsPerMinute": 0,
            "errorRate": 0,
        }

    now = now or datetime.now(timezone.utc)
    total = len(requests)
    successful = sum(1 for r in requests if r.get("success"))
    timed = [r["responseTime"] for r in requests if r.get("responseTime")]

    oldest = parse_timestamp(requests[-1].get("timestamp"))
    span_minutes = max(1.0, (now - oldest).total_seconds() / 60)

    return {
        "totalRequests": total,
        "successRate": _round_half_up(successful / total * 100),
        "averageResponseTime": (
            _round_half_up(sum(timed) / len(timed)) if timed else 0
        ),
        "requestsPerMinute": _round_half_up(total / span_minutes),
        "errorRate": _round_half_up((total - successful) / total * 100),
    }


def filter_requests(
    requests: list[dict],
    search: str = "",
    status: RequestStatusFilter = RequestStatusFilter.ALL,
    endpoint: str = "",
    user_id: str = "",
) -> list[dict]:
    """Narrow a request list by request type, outcome, endpoint substring and user."""
    term = search.lower()
    result = []
    for r in requests:
        if term and term not in (r.get("requestType") or "").lower():
            continue
        if status == RequestStatusFilter.SUCCESS and not r.get("success"):
            continue
        if status == RequestStatusFilter.ERROR and r.get("success"):
            continue
        if endpoint and endpoint not in (r.get("endpoint") or ""):
            continue
        if user_id and r.get("userId") != user_id:
            continue
        result.append(r)
    return result
