"""Impersonation Schemas — magic-link request and response bodies."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ImpersonateRequest(BaseModel):
    """userId is optional here so the route can answer with its own 400 message."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str | None = Field(None, max_length=200)


class ImpersonateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    magic_link: str
    token: str
    expires_at: str
    message: str = "Magic link generated successfully"
