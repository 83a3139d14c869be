"""Eligibility verification Pydantic schemas."""

from typing import List

from pydantic import BaseModel, Field


class EligibilityResponseSchema(BaseModel):
    """Schema for POST /v1/applications/{id}/eligibility response body."""

    application_id: str
    is_eligible: bool
    passed_checks: List[str]
    failed_checks: List[str] = Field(..., description="Any entry here disqualifies")
    warnings: List[str]
    summary: str
