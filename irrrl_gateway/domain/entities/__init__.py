"""Domain Entities - Core business objects."""

from .application import (
    Application,
    ApplicationStatus,
    ApplicationType,
    Borrower,
    Property,
    StatusTransitionRecord,
)
from .document import DocumentType
from .eligibility import EligibilityReport
from .event import ApplicationEvent, EventType
from .loan import CurrentLoanSnapshot, LoanTerms, LoanType, RequestedLoan
from .ntb import NEVER_RECOUPS, NetTangibleBenefitResult, Recoupment

__all__ = [
    "Application",
    "ApplicationStatus",
    "ApplicationType",
    "Borrower",
    "Property",
    "StatusTransitionRecord",
    "DocumentType",
    "EligibilityReport",
    "ApplicationEvent",
    "EventType",
    "CurrentLoanSnapshot",
    "LoanTerms",
    "LoanType",
    "RequestedLoan",
    "NEVER_RECOUPS",
    "NetTangibleBenefitResult",
    "Recoupment",
]
