"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .application import (
    ApplicationNotFoundException,
    InvalidApplicationRequestException,
    InvalidStoredStatusException,
)
from .calculation import MissingPrerequisiteDataException
from .notification import NotificationDeliveryException

__all__ = [
    "DomainException",
    "ApplicationNotFoundException",
    "InvalidApplicationRequestException",
    "InvalidStoredStatusException",
    "MissingPrerequisiteDataException",
    "NotificationDeliveryException",
]
