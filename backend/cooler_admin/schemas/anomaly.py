"""Anomaly Schemas — resolution requests and the payloads forwarded upstream.

Invariants:
    - Every resolution payload carries `action` and `notes`
    - UPDATE_SUBMISSION carries the full submissionData block (7 keys)
    - UPDATE_NAICS_CODE carries naicsCode; UPDATE_PRICE carries price and currency
    - MARK_RESOLVED carries nothing else
    - Action-specific data missing from the request is a validation error, not a silent omission

Design Decisions:
    - camelCase aliases on the wire, snake_case in Python (populate_by_name accepts both)
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from cooler_admin.core.domain_types import ResolutionAction


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmissionData(_CamelModel):
    """Editable product fields of the submission behind an anomaly."""
    title: str = ""
    manufacturer: str = ""
    category: str = ""
    description: str = ""
    price: float = Field(0, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    naics_code: str = ""


class ResolutionRequest(_CamelModel):
    """Admin resolution of one anomaly flag."""
    action: ResolutionAction = ResolutionAction.MARK_RESOLVED
    notes: str = Field("", max_length=5000)

    # action == UPDATE_SUBMISSION
    submission_data: SubmissionData | None = None

    # action == UPDATE_NAICS_CODE
    naics_code: str | None = Field(None, max_length=10)

    # action == UPDATE_PRICE
    price: float | None = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)

    @model_validator(mode="after")
    def validate_action_fields(self):
        if self.action == ResolutionAction.UPDATE_SUBMISSION and self.submission_data is None:
            raise ValueError("UPDATE_SUBMISSION requires submissionData")
        if self.action == ResolutionAction.UPDATE_NAICS_CODE and not self.naics_code:
            raise ValueError("UPDATE_NAICS_CODE requires naicsCode")
        if self.action == ResolutionAction.UPDATE_PRICE and self.price is None:
            raise ValueError("UPDATE_PRICE requires price")
        return self

    def to_upstream_payload(self) -> dict:
        """Shape the body for POST /admin/anomalies/{id}/resolve."""
        payload: dict = {"action": self.action.value, "notes": self.notes}
        if self.action == ResolutionAction.UPDATE_SUBMISSION:
            payload["submissionData"] = self.submission_data.model_dump(by_alias=True)
        elif self.action == ResolutionAction.UPDATE_NAICS_CODE:
            payload["naicsCode"] = self.naics_code
        elif self.action == ResolutionAction.UPDATE_PRICE:
            payload["price"] = self.price
            payload["currency"] = self.currency
        return payload


class ResolutionNotes(_CamelModel):
    """Notes-only resolution (PATCH flow)."""
    resolution_notes: str = Field("", max_length=5000)
