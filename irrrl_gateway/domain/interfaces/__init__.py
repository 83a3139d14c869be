"""
Domain Interfaces (Ports)
"""

from .repositories import ApplicationRepository
from .clients import DocumentChecklistProvider, NotificationPublisher

__all__ = [
    "ApplicationRepository",
    "DocumentChecklistProvider",
    "NotificationPublisher",
]
