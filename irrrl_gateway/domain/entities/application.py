"""IRRRL application aggregate and its workflow entities."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from .loan import CurrentLoanSnapshot, RequestedLoan
from .ntb import NetTangibleBenefitResult


class ApplicationType(str, Enum):
    """Kind of refinance requested."""

    RATE_AND_TERM = "rate_and_term"
    CASH_OUT = "cash_out"


class ApplicationStatus(str, Enum):
    """Workflow status, declared in process order."""

    SUBMITTED = "submitted"
    AI_ANALYZING = "ai_analyzing"
    PENDING_APPROVAL = "pending_approval"  # Cash-out manual review
    DOCUMENT_GATHERING = "document_gathering"
    AI_PROCESSING = "ai_processing"
    FILE_PREPARATION = "file_preparation"
    UNDERWRITER_READY = "underwriter_ready"
    IN_UNDERWRITING = "in_underwriting"
    APPROVED = "approved"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    CLOSED = "closed"


@dataclass(frozen=True)
class StatusTransitionRecord:
    """Append-only audit entry for one accepted status change."""

    from_status: ApplicationStatus
    to_status: ApplicationStatus
    changed_at: datetime
    changed_by: Optional[str] = None
    note: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "from_status": self.from_status.value,
            "to_status": self.to_status.value,
            "changed_at": self.changed_at.isoformat(),
            "changed_by": self.changed_by,
            "note": self.note,
        }


@dataclass(frozen=True)
class Borrower:
    """The veteran applying for the refinance."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    has_disability_rating: bool = False
    disability_percentage: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Property:
    """Subject property and its occupancy history."""

    street_address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    currently_occupied: bool = False
    previously_occupied: bool = False


@dataclass
class Application:
    """
    IRRRL application aggregate root.

    Status changes go through the workflow state machine, which appends a
    StatusTransitionRecord for each accepted transition.
    """

    application_type: ApplicationType
    borrower: Borrower
    property: Property
    requested_loan: RequestedLoan
    current_loan: Optional[CurrentLoanSnapshot] = None
    total_loan_costs: Decimal = Decimal("0")
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    ntb_result: Optional[NetTangibleBenefitResult] = None
    status_history: List[StatusTransitionRecord] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    application_number: str = ""

    # Eligibility
    eligibility_verified: bool = False
    eligibility_notes: Optional[str] = None

    # Key dates
    created_at: datetime = field(default_factory=datetime.utcnow)
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    decline_reason: Optional[str] = None
    completed_at: Optional[datetime] = None
    actual_closing_date: Optional[datetime] = None

    @property
    def is_cash_out(self) -> bool:
        return self.application_type == ApplicationType.CASH_OUT

    @property
    def cash_out_amount(self) -> Decimal:
        return self.requested_loan.cash_out_amount or Decimal("0")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "application_id": str(self.id),
            "application_number": self.application_number,
            "application_type": self.application_type.value,
            "status": self.status.value,
            "borrower_name": self.borrower.full_name,
            "requested_amount": str(self.requested_loan.amount),
            "requested_rate": str(self.requested_loan.interest_rate),
            "requested_term_months": self.requested_loan.term_months,
            "total_loan_costs": str(self.total_loan_costs),
            "ntb": self.ntb_result.to_dict() if self.ntb_result else None,
            "eligibility_verified": self.eligibility_verified,
            "status_history": [record.to_dict() for record in self.status_history],
            "created_at": self.created_at.isoformat() + "Z",
        }
