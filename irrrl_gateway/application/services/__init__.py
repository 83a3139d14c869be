"""Application services (use cases)."""

from .application_service import ApplicationService, WORKFLOW_STEPS

__all__ = [
    "ApplicationService",
    "WORKFLOW_STEPS",
]
