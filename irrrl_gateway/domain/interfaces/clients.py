"""Collaborator interfaces consumed by the decision engine."""

from abc import ABC, abstractmethod
from typing import List

from irrrl_gateway.domain.entities import Application, ApplicationEvent, DocumentType


class NotificationPublisher(ABC):
    """
    Abstract publisher for application events.

    Delivery is fire-and-forget: callers never depend on the outcome.
    """

    @abstractmethod
    async def publish(self, event: ApplicationEvent) -> bool:
        """
        Publish an application event.

        Args:
            event: The event to publish

        Returns:
            True if the event was delivered

        Note:
            Implementations must not raise on delivery failure.
        """
        ...


class DocumentChecklistProvider(ABC):
    """Supplies the documents required for an application."""

    @abstractmethod
    def required_documents(self, application: Application) -> List[DocumentType]:
        """
        List the documents required for an application.

        Args:
            application: The application being processed

        Returns:
            Required document types in checklist order
        """
        ...
