"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from irrrl_gateway.application.services import ApplicationService
from irrrl_gateway.domain.interfaces import (
    ApplicationRepository,
    DocumentChecklistProvider,
    NotificationPublisher,
)
from irrrl_gateway.infrastructure.clients import HttpNotificationPublisher
from irrrl_gateway.infrastructure.database import get_db_session
from irrrl_gateway.infrastructure.repositories import PostgresApplicationRepository
from irrrl_gateway.service.underwriting import PolicyDocumentChecklist, va_policy


# Repository dependencies
async def get_application_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApplicationRepository:
    """Get an ApplicationRepository bound to the request's session."""
    return PostgresApplicationRepository(session)


# Collaborator dependencies
def get_notification_publisher() -> NotificationPublisher:
    return HttpNotificationPublisher()


def get_document_checklist() -> DocumentChecklistProvider:
    return PolicyDocumentChecklist(va_policy)


# Service dependencies
async def get_application_service(
    repository: Annotated[ApplicationRepository, Depends(get_application_repository)],
    publisher: Annotated[NotificationPublisher, Depends(get_notification_publisher)],
    checklist: Annotated[DocumentChecklistProvider, Depends(get_document_checklist)],
) -> ApplicationService:
    """Get an ApplicationService instance with all dependencies."""
    return ApplicationService(
        application_repository=repository,
        notification_publisher=publisher,
        document_checklist=checklist,
        policy=va_policy,
    )
