"""Status transition Pydantic schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from irrrl_gateway.domain.entities import ApplicationStatus


class TransitionRequestSchema(BaseModel):
    """Schema for POST /v1/applications/{id}/transitions request body."""

    target_status: ApplicationStatus
    actor: Optional[str] = Field(None, max_length=255, examples=["underwriter@lender.example"])
    note: Optional[str] = Field(None, max_length=2000)


class TransitionOutcomeSchema(BaseModel):
    accepted: bool
    from_status: str
    to_status: str
    reason: Optional[str] = None


class TransitionResponseSchema(BaseModel):
    """Result of a transition request; 409 when any step was rejected."""

    application_id: str
    status: str
    accepted: bool
    transitions: List[TransitionOutcomeSchema]
