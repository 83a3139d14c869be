"""
Amortization Math for the IRRRL decision engine.

Pure functions over Decimal money values. Degenerate inputs (zero or
negative principal, term or savings) are valid real-world cases and
return documented fallbacks instead of raising.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from irrrl_gateway.domain.entities import NEVER_RECOUPS, Recoupment

CENT = Decimal("0.01")
ZERO = Decimal("0")

_HUNDRED = Decimal("100")
_MONTHS_PER_YEAR = Decimal("12")


def to_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return Decimal(annual_rate_percent) / _HUNDRED / _MONTHS_PER_YEAR


def monthly_payment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
) -> Decimal:
    """
    Calculate the fixed monthly P&I payment of an amortizing loan.

    Formula:
        P * [r(1+r)^n] / [(1+r)^n - 1], where r = annual% / 100 / 12

    Edge Cases:
        - principal <= 0 or term_months <= 0: returns 0 (no payment due)
        - annual_rate_percent == 0: returns principal / term_months

    Args:
        principal: Loan amount in dollars
        annual_rate_percent: Annual interest rate in percent
        term_months: Number of monthly payments

    Returns:
        Monthly payment rounded to cents (half away from zero)
    """
    principal = Decimal(principal)
    if principal <= 0 or term_months <= 0:
        return ZERO

    rate = monthly_rate(annual_rate_percent)
    if rate == 0:
        return to_money(principal / term_months)

    powered = (1 + rate) ** term_months
    payment = principal * (rate * powered) / (powered - 1)
    return to_money(payment)


def total_interest(
    principal: Decimal,
    payment: Decimal,
    term_months: int,
) -> Decimal:
    """
    Total interest paid over a term: payment * term - principal.

    Returns 0 for non-positive inputs and never goes negative.
    """
    if principal <= 0 or payment <= 0 or term_months <= 0:
        return ZERO

    interest = payment * term_months - principal
    return max(ZERO, interest)


def recoupment_period(
    total_costs: Decimal,
    monthly_savings: Decimal,
) -> Recoupment:
    """
    Months required for monthly savings to offset total loan costs.

    Returns NEVER_RECOUPS when there are no savings or no costs to
    recoup; otherwise ceil(total_costs / monthly_savings).
    """
    if monthly_savings <= 0 or total_costs <= 0:
        return NEVER_RECOUPS

    months = (Decimal(total_costs) / Decimal(monthly_savings)).to_integral_value(
        rounding=ROUND_CEILING
    )
    return Recoupment.of(int(months))


def break_even_months(
    total_costs: Decimal,
    monthly_savings: Decimal,
) -> Decimal:
    """Unrounded break-even point in months (0 when there are no savings)."""
    if monthly_savings <= 0:
        return ZERO
    return to_money(Decimal(total_costs) / Decimal(monthly_savings))


def first_month_principal(
    balance: Decimal,
    payment: Decimal,
    annual_rate_percent: Decimal,
) -> Decimal:
    """Principal portion of the first payment: payment - balance * monthly rate."""
    return payment - balance * monthly_rate(annual_rate_percent)
