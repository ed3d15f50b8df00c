"""Impersonation — issue a read-only magic link for a customer (bearer-gated)."""

import logging

from fastapi import APIRouter, Depends

from cooler_admin.api.dependencies import require_admin_token
from cooler_admin.config import Settings, get_settings
from cooler_admin.core.errors import RequestValidationFailed
from cooler_admin.schemas.impersonation import ImpersonateRequest, ImpersonateResponse
from cooler_admin.services.impersonation import create_magic_link, format_expiry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/impersonate", tags=["impersonation"])


@router.post(
    "",
    dependencies=[Depends(require_admin_token)],
    response_model=ImpersonateResponse,
    response_model_by_alias=True,
)
async def impersonate(
    body: ImpersonateRequest,
    settings: Settings = Depends(get_settings),
):
    """Sign a short-lived token and return the customer-app magic link."""
    if not body.user_id:
        raise RequestValidationFailed("userId is required")

    magic = create_magic_link(
        body.user_id,
        secret=settings.admin_jwt_secret,
        app_url=settings.app_url,
        ttl_minutes=settings.impersonation_ttl_minutes,
    )
    return ImpersonateResponse(
        magic_link=magic.link,
        token=magic.token,
        expires_at=format_expiry(magic.expires_at),
    )
