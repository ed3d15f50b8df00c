"""Route Dependencies — admin gates shared by the route modules.

Invariants:
    - require_admin_password: `admin-password` header must equal settings.admin_password
    - require_admin_token: `Authorization` header must equal `Bearer <upstream_admin_token>`
    - Missing and wrong credentials are indistinguishable (both 401 Unauthorized)
    - Comparisons are constant-time
"""

import hmac

from fastapi import Depends, Header

from cooler_admin.config import Settings, get_settings
from cooler_admin.core.errors import UnauthorizedError


def _matches(provided: str | None, expected: str) -> bool:
    if not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


async def require_admin_password(
    admin_password: str | None = Header(None, alias="admin-password"),
    settings: Settings = Depends(get_settings),
) -> str:
    if not _matches(admin_password, settings.admin_password):
        raise UnauthorizedError()
    return admin_password


async def require_admin_token(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not _matches(authorization, f"Bearer {settings.upstream_admin_token}"):
        raise UnauthorizedError()
