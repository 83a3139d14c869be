"""Data transfer objects for IRRRL application operations."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from irrrl_gateway.domain.entities import (
    Application,
    ApplicationStatus,
    ApplicationType,
    EligibilityReport,
    LoanType,
    NetTangibleBenefitResult,
)


@dataclass(frozen=True)
class CurrentLoanInput:
    """The borrower's existing loan as entered at intake."""

    current_balance: Decimal
    interest_rate: Decimal
    original_term_months: int
    remaining_term_months: int
    monthly_principal_and_interest: Decimal
    loan_type: LoanType = LoanType.FIXED_RATE
    monthly_property_tax: Decimal = Decimal("0")
    monthly_insurance: Decimal = Decimal("0")
    monthly_pmi: Decimal = Decimal("0")
    current_on_payments: bool = True
    late_payments_last_12_months: int = 0
    late_payments_over_30_days: int = 0
    last_late_payment_date: Optional[date] = None
    is_va_loan: bool = True
    loan_number: str = ""
    lender: str = ""

    def validate(self) -> List[str]:
        errors = []

        if self.current_balance <= 0:
            errors.append("current_loan.current_balance must be positive")
        if self.interest_rate < 0:
            errors.append("current_loan.interest_rate cannot be negative")
        if self.remaining_term_months <= 0:
            errors.append("current_loan.remaining_term_months must be positive")
        if self.remaining_term_months > self.original_term_months:
            errors.append("current_loan.remaining_term_months exceeds original term")
        if self.monthly_principal_and_interest < 0:
            errors.append("current_loan.monthly_principal_and_interest cannot be negative")

        return errors


@dataclass(frozen=True)
class CreateApplicationRequest:
    """Input data for creating an IRRRL application."""

    application_type: ApplicationType
    first_name: str
    last_name: str
    email: str
    street_address: str
    city: str
    state: str
    zip_code: str
    requested_amount: Decimal
    requested_rate: Decimal
    requested_term_months: int
    requested_loan_type: LoanType = LoanType.FIXED_RATE
    total_loan_costs: Decimal = Decimal("0")
    cash_out_amount: Optional[Decimal] = None
    cash_out_purpose: Optional[str] = None
    currently_occupied: bool = False
    previously_occupied: bool = False
    has_disability_rating: bool = False
    disability_percentage: Optional[int] = None
    current_loan: Optional[CurrentLoanInput] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.first_name.strip() or not self.last_name.strip():
            errors.append("borrower name is required")
        if self.requested_amount <= 0:
            errors.append("requested_amount must be positive")
        if self.requested_rate < 0:
            errors.append("requested_rate cannot be negative")
        if self.requested_term_months <= 0:
            errors.append("requested_term_months must be positive")
        if self.total_loan_costs < 0:
            errors.append("total_loan_costs cannot be negative")

        if self.application_type == ApplicationType.CASH_OUT:
            if not self.cash_out_amount or self.cash_out_amount <= 0:
                errors.append("cash_out_amount is required for cash-out applications")
        elif self.cash_out_amount:
            errors.append("cash_out_amount is only allowed for cash-out applications")

        if self.current_loan is not None:
            errors.extend(self.current_loan.validate())

        return errors


@dataclass(frozen=True)
class StatusChangeDTO:
    """One entry of an application's status history."""

    from_status: str
    to_status: str
    changed_at: str
    changed_by: Optional[str]
    note: Optional[str]


@dataclass(frozen=True)
class ApplicationResponse:
    """Response data for an application."""

    application_id: str
    application_number: str
    application_type: str
    status: str
    borrower_name: str
    requested_amount: Decimal
    requested_rate: Decimal
    requested_term_months: int
    total_loan_costs: Decimal
    eligibility_verified: bool
    passes_ntb: Optional[bool]
    submitted_at: Optional[str]
    approved_at: Optional[str]
    decline_reason: Optional[str]
    status_history: List[StatusChangeDTO] = field(default_factory=list)

    @classmethod
    def from_entity(cls, application: Application) -> "ApplicationResponse":
        return cls(
            application_id=str(application.id),
            application_number=application.application_number,
            application_type=application.application_type.value,
            status=application.status.value,
            borrower_name=application.borrower.full_name,
            requested_amount=application.requested_loan.amount,
            requested_rate=application.requested_loan.interest_rate,
            requested_term_months=application.requested_loan.term_months,
            total_loan_costs=application.total_loan_costs,
            eligibility_verified=application.eligibility_verified,
            passes_ntb=application.ntb_result.passes_ntb if application.ntb_result else None,
            submitted_at=_iso(application.submitted_at),
            approved_at=_iso(application.approved_at),
            decline_reason=application.decline_reason,
            status_history=[
                StatusChangeDTO(
                    from_status=record.from_status.value,
                    to_status=record.to_status.value,
                    changed_at=record.changed_at.isoformat(),
                    changed_by=record.changed_by,
                    note=record.note,
                )
                for record in application.status_history
            ],
        )


@dataclass(frozen=True)
class NtbResponse:
    """Response data for a Net Tangible Benefit calculation."""

    application_id: str
    result: NetTangibleBenefitResult
    explanation: str


@dataclass(frozen=True)
class EligibilityResponse:
    """Response data for an eligibility verification."""

    application_id: str
    report: EligibilityReport


@dataclass(frozen=True)
class TransitionRequest:
    """Input data for a manual status transition."""

    target_status: ApplicationStatus
    actor: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class TransitionOutcome:
    """One attempted transition and whether it was accepted."""

    accepted: bool
    from_status: str
    to_status: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class TransitionResponse:
    """
    Response data for a status transition request.

    `accepted` is True only when every attempted transition was accepted.
    """

    application_id: str
    status: str
    accepted: bool
    transitions: List[TransitionOutcome]

    @classmethod
    def from_results(cls, application: Application, results: list) -> "TransitionResponse":
        return cls(
            application_id=str(application.id),
            status=application.status.value,
            accepted=all(results),
            transitions=[
                TransitionOutcome(
                    accepted=result.accepted,
                    from_status=result.from_status.value,
                    to_status=result.to_status.value,
                    reason=result.reason,
                )
                for result in results
            ],
        )


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
