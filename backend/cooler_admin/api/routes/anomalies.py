"""Anomalies — review queue, statistics and resolution of anomaly flags.

Invariants:
    - `resolved` is forwarded as a boolean, or omitted for "all"
    - "all" type/severity filters are omitted upstream
    - Resolution bodies are shaped by ResolutionRequest.to_upstream_payload()
    - An upstream 2xx carrying success: false is surfaced as a 502, not as success
"""

import logging

from fastapi import APIRouter, Depends, Query

from cooler_admin.api.responses import success
from cooler_admin.core.domain_types import (
    AnomalySeverity, AnomalyType, ResolvedFilter, SortDirection,
)
from cooler_admin.core.errors import UpstreamRejectedError
from cooler_admin.infrastructure.upstream_client import (
    CoolerApiClient, get_upstream, path_segment,
)
from cooler_admin.schemas.anomaly import ResolutionNotes, ResolutionRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/anomalies", tags=["anomalies"])

_TYPE_PATTERN = "^(all|" + "|".join(t.value for t in AnomalyType) + ")$"
_SEVERITY_PATTERN = "^(all|" + "|".join(s.value for s in AnomalySeverity) + ")$"

_RESOLVED_PARAM = {
    ResolvedFilter.ALL: None,
    ResolvedFilter.RESOLVED: True,
    ResolvedFilter.UNRESOLVED: False,
}


@router.get("")
async def list_anomalies(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    search: str | None = Query(None, max_length=200),
    anomaly_type: str = Query("all", alias="type", pattern=_TYPE_PATTERN),
    severity: str = Query("all", pattern=_SEVERITY_PATTERN),
    resolved: ResolvedFilter = Query(ResolvedFilter.ALL),
    sort_by: str = Query("dateCreated", alias="sortBy", pattern=r"^(dateCreated|severity|type)$"),
    sort_direction: SortDirection = Query(SortDirection.DESC, alias="sortDirection"),
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """One page of anomaly flags with upstream filtering and sorting."""
    data = await upstream.get(
        "/admin/anomalies",
        action="fetch anomalies",
        params={
            "page": page,
            "limit": limit,
            "search": search or None,
            "type": None if anomaly_type == "all" else anomaly_type,
            "severity": None if severity == "all" else severity,
            "resolved": _RESOLVED_PARAM[resolved],
            "sortBy": sort_by,
            "sortDirection": sort_direction.value,
        },
    ) or {}
    return success(
        anomalies=data.get("anomalies") or [],
        pagination={
            "page": page,
            "limit": limit,
            "total": data.get("total", 0),
            "totalPages": data.get("totalPages", 0),
            "hasNextPage": data.get("hasNextPage", False),
            "hasPrevPage": data.get("hasPrevPage", False),
        },
    )


@router.get("/stats")
async def anomaly_stats(upstream: CoolerApiClient = Depends(get_upstream)):
    """Totals and breakdowns by type, severity, code and day."""
    data = await upstream.get("/admin/anomalies/stats", action="fetch anomaly stats")
    return success(data=data)


@router.post("/{anomaly_id}/resolve")
async def resolve_anomaly(
    anomaly_id: str,
    body: ResolutionRequest,
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Apply an admin resolution to one anomaly flag."""
    payload = body.to_upstream_payload()
    logger.info(f"Resolving anomaly {anomaly_id} with {body.action.value}")
    result = await upstream.post(
        f"/admin/anomalies/{path_segment(anomaly_id)}/resolve",
        action="resolve anomaly",
        json=payload,
    )
    if isinstance(result, dict) and result.get("success") is False:
        raise UpstreamRejectedError(
            "resolve anomaly", result.get("error") or "Upstream reported failure",
        )
    return success(anomalyId=anomaly_id, action=body.action.value, data=result)


@router.patch("/{anomaly_id}/notes")
async def resolve_with_notes(
    anomaly_id: str,
    body: ResolutionNotes,
    upstream: CoolerApiClient = Depends(get_upstream),
):
    """Mark resolved with notes only (PATCH flow of the review list)."""
    result = await upstream.patch(
        f"/admin/anomalies/{path_segment(anomaly_id)}/resolve",
        action="resolve anomaly",
        json={"resolutionNotes": body.resolution_notes},
    )
    return success(anomalyId=anomaly_id, data=result)
