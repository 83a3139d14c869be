"""
Net Tangible Benefit Calculator for the IRRRL decision engine.

The VA requires every IRRRL to leave the veteran objectively better off.
This module computes the before/after loan figures and evaluates the
three mandatory sub-tests:

1. Recoupment: closing costs recouped within 36 months
2. Rate reduction: at least 0.5pp for fixed-to-fixed; waived for
   ARM-to-fixed (stability is the benefit); any drop otherwise
3. Payment reduction: lower P&I, or ARM-to-fixed as an alternate path

The overall verdict is the AND of all three. Identical inputs (including
`now`) always produce an identical result.
"""

from datetime import datetime
from typing import Optional

from irrrl_gateway.domain.entities import (
    Application,
    LoanType,
    NetTangibleBenefitResult,
)
from irrrl_gateway.domain.exceptions import MissingPrerequisiteDataException

from .amortization import (
    break_even_months,
    first_month_principal,
    monthly_payment,
    recoupment_period,
    to_money,
    total_interest,
)
from .settings import VAPolicySettings, va_policy


def is_arm_to_fixed(current_type: LoanType, new_type: LoanType) -> bool:
    """True when refinancing an adjustable-rate loan into a fixed rate."""
    return current_type == LoanType.ARM and new_type == LoanType.FIXED_RATE


def meets_rate_reduction(
    current_type: LoanType,
    new_type: LoanType,
    rate_reduction,
    settings: VAPolicySettings = va_policy,
) -> bool:
    """
    Evaluate the interest rate sub-test.

    Rules:
        - Fixed to fixed: reduction >= min_rate_reduction_fixed_to_fixed
        - ARM to fixed: always satisfied
        - Anything else: reduction must be positive
    """
    if current_type == LoanType.FIXED_RATE and new_type == LoanType.FIXED_RATE:
        return rate_reduction >= settings.min_rate_reduction_fixed_to_fixed

    if is_arm_to_fixed(current_type, new_type):
        return True

    return rate_reduction > 0


def meets_payment_reduction(
    current_type: LoanType,
    new_type: LoanType,
    monthly_savings,
) -> bool:
    """Payment must drop, unless moving from an ARM to a fixed rate."""
    return monthly_savings > 0 or is_arm_to_fixed(current_type, new_type)


def calculate_ntb(
    application: Application,
    settings: VAPolicySettings = va_policy,
    now: Optional[datetime] = None,
    calculated_by: str = "System",
) -> NetTangibleBenefitResult:
    """
    Run the Net Tangible Benefit test for an application.

    Algorithm:
        1. New payment from the requested principal, rate and term
        2. Current payment is the borrower's stored P&I (not recomputed)
        3. Monthly savings and rate reduction
        4. Recoupment of total loan costs from monthly savings
        5. Total interest savings: current remaining vs. new term
        6. Lifetime savings over the shorter of the two terms
        7. Equity acceleration: first-month principal of the new vs. the
           current loan, both against the current balance
        8. Sub-tests and overall verdict

    Args:
        application: Application with a current loan snapshot
        settings: VA policy settings (uses defaults if not provided)
        now: Calculation timestamp (defaults to UTC now)
        calculated_by: Actor recorded on the result

    Returns:
        A new NetTangibleBenefitResult

    Raises:
        MissingPrerequisiteDataException: If the current loan is absent
    """
    current = application.current_loan
    if current is None:
        raise MissingPrerequisiteDataException(
            missing="current_loan",
            message="Current loan information is required for NTB calculation",
        )

    requested = application.requested_loan
    total_costs = application.total_loan_costs

    new_payment = monthly_payment(
        requested.amount,
        requested.interest_rate,
        requested.term_months,
    )
    current_payment = current.monthly_principal_and_interest

    monthly_savings = current_payment - new_payment
    rate_reduction = current.interest_rate - requested.interest_rate

    recoupment = recoupment_period(total_costs, monthly_savings)

    current_interest = total_interest(
        current.current_balance,
        current_payment,
        current.remaining_term_months,
    )
    new_interest = total_interest(
        requested.amount,
        new_payment,
        requested.term_months,
    )

    comparison_months = min(current.remaining_term_months, requested.term_months)

    # Both portions use the current balance to isolate the rate effect
    equity_acceleration = first_month_principal(
        current.current_balance, new_payment, requested.interest_rate
    ) - first_month_principal(
        current.current_balance, current_payment, current.interest_rate
    )

    meets_recoupment = recoupment.within(settings.max_recoupment_months)
    rate_ok = meets_rate_reduction(
        current.loan_type, requested.loan_type, rate_reduction, settings
    )
    payment_ok = meets_payment_reduction(
        current.loan_type, requested.loan_type, monthly_savings
    )

    return NetTangibleBenefitResult(
        current_rate=current.interest_rate,
        current_monthly_payment=current_payment,
        current_remaining_term_months=current.remaining_term_months,
        new_rate=requested.interest_rate,
        new_monthly_payment=new_payment,
        new_term_months=requested.term_months,
        rate_reduction=rate_reduction,
        monthly_savings=monthly_savings,
        total_loan_costs=total_costs,
        recoupment=recoupment,
        break_even_months=break_even_months(total_costs, monthly_savings),
        lifetime_savings=to_money(monthly_savings * comparison_months),
        total_interest_savings=to_money(current_interest - new_interest),
        term_reduction_months=current.remaining_term_months - requested.term_months,
        equity_growth_acceleration=to_money(equity_acceleration),
        meets_recoupment=meets_recoupment,
        meets_rate_reduction=rate_ok,
        meets_payment_reduction=payment_ok,
        passes_ntb=meets_recoupment and rate_ok and payment_ok,
        calculated_at=now or datetime.utcnow(),
        calculated_by=calculated_by,
    )


def explain_ntb(result: NetTangibleBenefitResult) -> str:
    """
    Generate a human-readable explanation of an NTB result.

    Used for logs, notification payloads and loan officer notes.

    Args:
        result: The NTB result to explain

    Returns:
        Multi-line explanation string
    """
    lines = []

    if result.passes_ntb:
        lines.append("Net Tangible Benefit: PASS")
    else:
        lines.append("Net Tangible Benefit: FAIL")

    lines.append(
        f"Payment: ${result.current_monthly_payment:,.2f} -> "
        f"${result.new_monthly_payment:,.2f} "
        f"(savings ${result.monthly_savings:,.2f}/month)"
    )
    lines.append(
        f"Rate: {result.current_rate:.3f}% -> {result.new_rate:.3f}% "
        f"(reduction {result.rate_reduction:.3f}pp)"
    )
    lines.append("")
    lines.append("Sub-tests:")

    mark = {True: "pass", False: "fail"}
    lines.append(
        f"  - Recoupment: {result.recoupment} of ${result.total_loan_costs:,.2f} costs "
        f"({mark[result.meets_recoupment]})"
    )
    lines.append(f"  - Rate reduction: {mark[result.meets_rate_reduction]}")
    lines.append(f"  - Payment reduction: {mark[result.meets_payment_reduction]}")

    return "\n".join(lines)
