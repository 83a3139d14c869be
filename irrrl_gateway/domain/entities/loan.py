"""Loan entities: the borrower's existing VA loan and the requested refinance."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class LoanType(str, Enum):
    """Rate structure of a mortgage."""

    FIXED_RATE = "fixed_rate"
    ARM = "arm"  # Adjustable-rate mortgage
    OTHER = "other"


@dataclass(frozen=True)
class LoanTerms:
    """
    Immutable core terms of a mortgage.

    Attributes:
        principal: Loan balance in dollars
        annual_rate: Annual interest rate in percent (e.g. 6.125)
        term_months: Amortization term in months
        loan_type: Fixed, adjustable or other
    """

    principal: Decimal
    annual_rate: Decimal
    term_months: int
    loan_type: LoanType = LoanType.FIXED_RATE


@dataclass(frozen=True)
class CurrentLoanSnapshot:
    """
    The borrower's existing loan as captured at intake.

    `terms.principal` is the current balance and `terms.term_months` the
    original term. The stored P&I is the borrower's actual payment and is
    never recomputed.
    """

    terms: LoanTerms
    remaining_term_months: int
    monthly_principal_and_interest: Decimal
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

    @property
    def current_balance(self) -> Decimal:
        return self.terms.principal

    @property
    def interest_rate(self) -> Decimal:
        return self.terms.annual_rate

    @property
    def loan_type(self) -> LoanType:
        return self.terms.loan_type


@dataclass(frozen=True)
class RequestedLoan:
    """The new loan the borrower is applying for."""

    terms: LoanTerms
    cash_out_amount: Optional[Decimal] = None
    cash_out_purpose: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        return self.terms.principal

    @property
    def interest_rate(self) -> Decimal:
        return self.terms.annual_rate

    @property
    def term_months(self) -> int:
        return self.terms.term_months

    @property
    def loan_type(self) -> LoanType:
        return self.terms.loan_type
