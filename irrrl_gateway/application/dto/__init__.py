"""Data Transfer Objects for the application layer."""

from .application import (
    ApplicationResponse,
    CreateApplicationRequest,
    CurrentLoanInput,
    EligibilityResponse,
    NtbResponse,
    StatusChangeDTO,
    TransitionOutcome,
    TransitionRequest,
    TransitionResponse,
)

__all__ = [
    "ApplicationResponse",
    "CreateApplicationRequest",
    "CurrentLoanInput",
    "EligibilityResponse",
    "NtbResponse",
    "StatusChangeDTO",
    "TransitionOutcome",
    "TransitionRequest",
    "TransitionResponse",
]
