"""
VA Funding Fee for IRRRL loans.

The IRRRL funding fee is a flat percentage of the new loan amount and
is waived for veterans with a service-connected disability rating at or
above the waiver threshold.
"""

from dataclasses import dataclass
from decimal import Decimal

from irrrl_gateway.domain.entities import Borrower

from .amortization import ZERO, to_money
from .settings import VAPolicySettings, va_policy


@dataclass(frozen=True)
class FundingFee:
    """Funding fee owed on the new loan."""

    percentage: Decimal
    amount: Decimal
    waived: bool


def qualifies_for_fee_waiver(
    borrower: Borrower,
    settings: VAPolicySettings = va_policy,
) -> bool:
    """True if the borrower's disability rating waives the funding fee."""
    if not borrower.has_disability_rating or borrower.disability_percentage is None:
        return False
    return borrower.disability_percentage >= settings.funding_fee_waiver_min_disability


def calculate_funding_fee(
    loan_amount: Decimal,
    borrower: Borrower,
    settings: VAPolicySettings = va_policy,
) -> FundingFee:
    """
    Calculate the IRRRL funding fee.

    Args:
        loan_amount: New loan amount in dollars
        borrower: Borrower whose disability rating may waive the fee
        settings: VA policy settings (uses defaults if not provided)

    Returns:
        FundingFee with the applied percentage and dollar amount
    """
    if qualifies_for_fee_waiver(borrower, settings):
        return FundingFee(percentage=ZERO, amount=ZERO, waived=True)

    if loan_amount <= 0:
        return FundingFee(percentage=settings.funding_fee_percentage, amount=ZERO, waived=False)

    amount = to_money(Decimal(loan_amount) * settings.funding_fee_percentage / 100)
    return FundingFee(
        percentage=settings.funding_fee_percentage,
        amount=amount,
        waived=False,
    )
