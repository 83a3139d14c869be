"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    ApplicationModel,
    CurrentLoanModel,
    NetTangibleBenefitModel,
    StatusHistoryModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "ApplicationModel",
    "CurrentLoanModel",
    "NetTangibleBenefitModel",
    "StatusHistoryModel",
]
