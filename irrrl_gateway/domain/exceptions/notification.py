"""Notification delivery exceptions."""

from .base import DomainException


class NotificationDeliveryException(DomainException):
    """Raised when the notification endpoint rejects an event."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="NOTIFICATION_DELIVERY_FAILED",
        )
        self.status_code = status_code
