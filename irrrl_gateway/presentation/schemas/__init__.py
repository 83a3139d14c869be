"""Pydantic schemas for API request/response validation."""

from .application import (
    ApplicationListResponseSchema,
    ApplicationResponseSchema,
    CreateApplicationSchema,
    CurrentLoanSchema,
    DocumentSchema,
    DocumentsResponseSchema,
    FundingFeeResponseSchema,
    NextStatusesResponseSchema,
    StatusChangeSchema,
)
from .eligibility import EligibilityResponseSchema
from .error import ErrorResponseSchema
from .ntb import NtbResponseSchema, NtbResultSchema
from .transition import (
    TransitionOutcomeSchema,
    TransitionRequestSchema,
    TransitionResponseSchema,
)

__all__ = [
    "ApplicationListResponseSchema",
    "ApplicationResponseSchema",
    "CreateApplicationSchema",
    "CurrentLoanSchema",
    "DocumentSchema",
    "DocumentsResponseSchema",
    "FundingFeeResponseSchema",
    "NextStatusesResponseSchema",
    "StatusChangeSchema",
    "EligibilityResponseSchema",
    "ErrorResponseSchema",
    "NtbResponseSchema",
    "NtbResultSchema",
    "TransitionOutcomeSchema",
    "TransitionRequestSchema",
    "TransitionResponseSchema",
]
