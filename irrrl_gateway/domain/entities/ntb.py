"""Net Tangible Benefit result entity."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class Recoupment:
    """
    Months needed for monthly savings to offset refinance costs.

    Either a concrete month count or "never recoups" (months is None).
    No ordering is defined; use `within()` to compare against a limit.
    """

    months: Optional[int] = None

    @classmethod
    def of(cls, months: int) -> "Recoupment":
        return cls(months=months)

    @property
    def recoups(self) -> bool:
        return self.months is not None

    def within(self, limit_months: int) -> bool:
        """True if costs are recouped in at most `limit_months`."""
        return self.months is not None and self.months <= limit_months

    def __str__(self) -> str:
        if self.months is None:
            return "never"
        return f"{self.months} months"


NEVER_RECOUPS = Recoupment()


@dataclass(frozen=True)
class NetTangibleBenefitResult:
    """
    Outcome of the VA Net Tangible Benefit test for one application.

    Recomputed from scratch on every calculation and replaces any prior
    result; never mutated in place.
    """

    # Current loan
    current_rate: Decimal
    current_monthly_payment: Decimal
    current_remaining_term_months: int

    # New loan
    new_rate: Decimal
    new_monthly_payment: Decimal
    new_term_months: int

    # Calculations
    rate_reduction: Decimal
    monthly_savings: Decimal
    total_loan_costs: Decimal
    recoupment: Recoupment
    break_even_months: Decimal
    lifetime_savings: Decimal
    total_interest_savings: Decimal
    term_reduction_months: int
    equity_growth_acceleration: Decimal

    # Sub-tests
    meets_recoupment: bool
    meets_rate_reduction: bool
    meets_payment_reduction: bool
    passes_ntb: bool

    calculated_at: datetime
    calculated_by: str = "System"

    def failed_tests(self) -> List[str]:
        """Names of the sub-tests that did not pass."""
        failed = []
        if not self.meets_recoupment:
            failed.append("recoupment")
        if not self.meets_rate_reduction:
            failed.append("rate_reduction")
        if not self.meets_payment_reduction:
            failed.append("payment_reduction")
        return failed

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "current_rate": str(self.current_rate),
            "current_monthly_payment": str(self.current_monthly_payment),
            "current_remaining_term_months": self.current_remaining_term_months,
            "new_rate": str(self.new_rate),
            "new_monthly_payment": str(self.new_monthly_payment),
            "new_term_months": self.new_term_months,
            "rate_reduction": str(self.rate_reduction),
            "monthly_savings": str(self.monthly_savings),
            "total_loan_costs": str(self.total_loan_costs),
            "recoupment_months": self.recoupment.months,
            "break_even_months": str(self.break_even_months),
            "lifetime_savings": str(self.lifetime_savings),
            "total_interest_savings": str(self.total_interest_savings),
            "term_reduction_months": self.term_reduction_months,
            "equity_growth_acceleration": str(self.equity_growth_acceleration),
            "meets_recoupment": self.meets_recoupment,
            "meets_rate_reduction": self.meets_rate_reduction,
            "meets_payment_reduction": self.meets_payment_reduction,
            "passes_ntb": self.passes_ntb,
            "calculated_at": self.calculated_at.isoformat(),
            "calculated_by": self.calculated_by,
        }
