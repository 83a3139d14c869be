"""Calculation-related domain exceptions."""

from .base import DomainException


class MissingPrerequisiteDataException(DomainException):
    """
    Raised when a calculation is invoked without data it cannot default.

    Fatal to the one calculation only; the caller must supply the data
    or skip the calculation.
    """

    def __init__(self, missing: str, message: str | None = None):
        super().__init__(
            message=message or f"Missing prerequisite data: {missing}",
            code="MISSING_PREREQUISITE_DATA",
        )
        self.missing = missing
