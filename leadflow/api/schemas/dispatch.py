"""Email dispatch request/response schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DispatchRequest(BaseModel):
    """Body of an email dispatch call."""

    model_config = ConfigDict(populate_by_name=True)

    submission_id: str = Field(alias="submissionId", min_length=1)
    subdomain: str | None = None
    lead_data: dict[str, Any] | None = Field(default=None, alias="leadData")


class DispatchResponse(BaseModel):
    """Aggregated dispatch outcome."""

    customerEmailSent: bool
    adminEmailSent: bool
    ghlIntegrationEligible: bool
    errors: list[str]
    config: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Fatal dispatch error."""

    error: str
    details: str
