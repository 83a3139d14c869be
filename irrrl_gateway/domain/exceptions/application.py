"""Application-related domain exceptions."""

from .base import DomainException


class ApplicationNotFoundException(DomainException):
    """Raised when an application cannot be found."""

    def __init__(self, application_id: str):
        super().__init__(
            message=f"Application not found: {application_id}",
            code="APPLICATION_NOT_FOUND",
        )
        self.application_id = application_id


class InvalidApplicationRequestException(DomainException):
    """Raised when an application request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_APPLICATION_REQUEST",
        )


class InvalidStoredStatusException(DomainException):
    """Raised when a stored application carries a status the workflow cannot reach."""

    def __init__(self, application_id: str, status: str):
        super().__init__(
            message=f"Application {application_id} has unreachable status: {status}",
            code="INVALID_STORED_STATUS",
        )
        self.application_id = application_id
        self.status = status
