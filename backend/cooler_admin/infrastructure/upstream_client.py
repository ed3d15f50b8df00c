"""Cooler API Client — thin httpx wrapper for the upstream admin REST API.

Invariants:
    - Every request carries `Authorization: Bearer <admin token>` and JSON content type
    - Non-2xx responses raise UpstreamAPIError carrying the upstream status and body text
    - Transport failures, timeouts and unreadable bodies raise UpstreamUnavailableError
    - Query parameters whose value is None are dropped before sending
    - No retries, no backoff: one call per route invocation

Design Decisions:
    - Each call names its `action` ("fetch API requests") so errors read the same
      across routes without per-route try/except
    - Singleton created in the FastAPI lifespan; tests swap it via dependency override
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from cooler_admin.core.errors import UpstreamAPIError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if params is None:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        # httpx would send True as "True"; upstream expects JSON-style booleans
        cleaned[key] = str(value).lower() if isinstance(value, bool) else value
    return cleaned


def path_segment(value: str) -> str:
    """Percent-encode one caller-supplied path segment (/, ?, # and .. included)."""
    return quote(str(value), safe="")


class CoolerApiClient:
    """Authenticated async client for the Cooler admin API."""

    def __init__(
        self,
        base_url: str,
        admin_token: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {admin_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        kwargs: dict[str, Any] = {"params": _clean_params(params)}
        if json is not None:
            kwargs["json"] = json
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                f"Upstream {method} {path} failed: {e!r}",
                extra={"path": path},
            )
            raise UpstreamUnavailableError(action, str(e) or type(e).__name__)

        if response.is_error:
            logger.error(
                f"Upstream {method} {path} returned {response.status_code} "
                f"{response.reason_phrase}",
                extra={"path": path, "upstream_status": response.status_code},
            )
            raise UpstreamAPIError(action, response.status_code, response.text)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Upstream {method} {path} returned invalid JSON: {e}")
            raise UpstreamUnavailableError(action, f"Invalid JSON from upstream: {e}")

    async def get(self, path: str, *, action: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, action=action, params=params)

    async def post(self, path: str, *, action: str, json: Any = None) -> Any:
        return await self.request("POST", path, action=action, json=json)

    async def patch(self, path: str, *, action: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, action=action, json=json)

    async def delete(
        self, path: str, *, action: str, timeout: float | None = None,
    ) -> Any:
        return await self.request("DELETE", path, action=action, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()


# Singleton (initialized on startup)
upstream_client: CoolerApiClient | None = None


def init_upstream(base_url: str, admin_token: str, **kwargs) -> CoolerApiClient:
    global upstream_client
    upstream_client = CoolerApiClient(base_url, admin_token, **kwargs)
    return upstream_client


async def get_upstream() -> CoolerApiClient:
    """FastAPI dependency for the upstream client."""
    if not upstream_client:
        raise RuntimeError("Upstream client not initialized")
    return upstream_client
