"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from irrrl_gateway.domain.entities import Application, ApplicationStatus


class ApplicationRepository(ABC):
    """
    Abstract repository for the Application aggregate.

    Loads and saves the aggregate as a whole: current loan snapshot,
    requested loan, latest NTB result and status history.
    """

    @abstractmethod
    async def get_by_id(
        self,
        application_id: UUID,
        for_update: bool = False,
    ) -> Optional[Application]:
        """
        Retrieve an application by ID.

        Args:
            application_id: The application's unique identifier
            for_update: Lock the aggregate until the surrounding
                transaction ends (single writer per application)

        Returns:
            The application if found, None otherwise
        """
        ...

    @abstractmethod
    async def save(self, application: Application) -> Application:
        """
        Persist the aggregate.

        Status history records not yet stored are appended in the same
        transaction as the rest of the change. Any prior NTB result is
        replaced by the application's current one.

        Args:
            application: The application to save

        Returns:
            The saved application
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """
        Make saved changes durable and release locks taken by for_update.

        Events describing the change are published only after this returns.
        """
        ...

    @abstractmethod
    async def list_by_status(
        self,
        status: ApplicationStatus,
        limit: int = 50,
    ) -> List[Application]:
        """
        Retrieve applications currently in a status.

        Args:
            status: Workflow status to filter on
            limit: Maximum number of applications to return

        Returns:
            Applications ordered by created_at ascending
        """
        ...
