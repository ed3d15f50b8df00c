"""Response helpers — success envelope shared by all routes."""

from datetime import datetime, timezone


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z",
    )


def success(**fields) -> dict:
    """{success: true, ...fields, timestamp}."""
    return {"success": True, **fields, "timestamp": utc_timestamp()}
