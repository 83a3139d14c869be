"""External service clients."""

from .notification_client import HttpNotificationPublisher

__all__ = [
    "HttpNotificationPublisher",
]
