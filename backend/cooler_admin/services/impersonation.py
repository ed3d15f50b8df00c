"""Impersonation — signed, short-lived magic links that open a customer session read-only.

Invariants:
    - Tokens are HS256 JWTs signed with the admin JWT secret
    - Payload: userId, adminId, readOnly=True, expiresAt (ISO), nonce (uuid4), iat, exp
    - exp == iat + ttl; decode rejects expired or tampered tokens
    - Every issued link is written to the audit log with its nonce
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

import jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
DEFAULT_ADMIN_ID = "admin"


@dataclass(frozen=True)
class MagicLink:
    link: str
    token: str
    expires_at: datetime
    nonce: str


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_magic_link(
    user_id: str,
    secret: str,
    app_url: str,
    ttl_minutes: int = 5,
    admin_id: str = DEFAULT_ADMIN_ID,
    now: datetime | None = None,
) -> MagicLink:
    """Sign an impersonation token and build the customer-app link for it."""
    issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expires_at = issued_at + timedelta(minutes=ttl_minutes)
    nonce = str(uuid.uuid4())

    payload = {
        "userId": user_id,
        "adminId": admin_id,
        "readOnly": True,
        "expiresAt": _iso(expires_at),
        "nonce": nonce,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    query = urlencode({"impersonate": user_id, "token": token})
    link = f"{app_url.rstrip('/')}/transactions?{query}"

    logger.info(
        "[AUDIT] Impersonation request",
        extra={
            "admin_id": admin_id,
            "user_id": user_id,
            "expires_at": _iso(expires_at),
            "nonce": nonce,
        },
    )
    return MagicLink(link=link, token=token, expires_at=expires_at, nonce=nonce)


def decode_impersonation_token(token: str, secret: str) -> dict:
    """Verify signature and expiry. Raises jwt.InvalidTokenError subclasses."""
    return jwt.decode(
        token, secret, algorithms=[JWT_ALGORITHM],
        options={"require": ["exp", "iat", "userId", "nonce"]},
    )


def format_expiry(expires_at: datetime) -> str:
    return _iso(expires_at)
