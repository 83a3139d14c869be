"""
Eligibility Verification for VA IRRRL applications.

Checks are evaluated independently and all recorded, so the report lists
every issue at once. Missing data becomes a failed check or a warning,
never an exception. The application is eligible when no check failed.

Checks (in report order):
1. Existing VA loan
2. Payment currency (current, no recent late payment, no 30+ day lates)
3. Occupancy (currently or previously occupied)
4. Net Tangible Benefit (warning if not yet calculated)
5. Cash-out warnings (manual review, full documentation)
6. Funding fee waiver note (informational)
"""

from datetime import date
from typing import List, Optional

from irrrl_gateway.domain.entities import (
    Application,
    CurrentLoanSnapshot,
    EligibilityReport,
    NetTangibleBenefitResult,
    Property,
)
from irrrl_gateway.domain.interfaces import DocumentChecklistProvider
from irrrl_gateway.utils.date_utils import months_before, utc_today

from .checklist import additional_documents
from .fees import qualifies_for_fee_waiver
from .settings import VAPolicySettings, va_policy


def has_existing_va_loan(application: Application) -> bool:
    """An IRRRL can only refinance an existing VA loan."""
    return application.current_loan is not None and application.current_loan.is_va_loan


def payment_history_issues(
    current_loan: CurrentLoanSnapshot,
    today: date,
    settings: VAPolicySettings = va_policy,
) -> List[str]:
    """
    List every payment-history disqualifier on the current loan.

    Any one of these fails the payment currency check:
        - not current on payments
        - a late payment within the lookback window (default 6 months)
        - more 30+ day late payments than allowed (default 0)

    Returns:
        Issue descriptions; empty if the borrower is current
    """
    issues = []

    if not current_loan.current_on_payments:
        issues.append("not current on mortgage payments")

    cutoff = months_before(today, settings.late_payment_lookback_months)
    last_late = current_loan.last_late_payment_date
    if last_late is not None and last_late > cutoff:
        issues.append(
            f"late payment on {last_late.isoformat()} within the last "
            f"{settings.late_payment_lookback_months} months"
        )

    if current_loan.late_payments_over_30_days > settings.max_late_payments_30_days_last_12_months:
        issues.append(
            f"{current_loan.late_payments_over_30_days} payment(s) over 30 days late "
            f"in the last 12 months"
        )

    return issues


def meets_occupancy(prop: Property) -> bool:
    """Property must be currently or previously occupied by the veteran."""
    return prop.currently_occupied or prop.previously_occupied


def _ntb_failures(
    ntb: NetTangibleBenefitResult,
    settings: VAPolicySettings,
) -> List[str]:
    details = []
    if not ntb.meets_recoupment:
        details.append(
            f"  - Recoupment period of {ntb.recoupment} exceeds "
            f"{settings.max_recoupment_months}-month maximum"
        )
    if not ntb.meets_rate_reduction:
        details.append(
            f"  - Interest rate reduction of {ntb.rate_reduction:.3f}% is less than "
            f"required {settings.min_rate_reduction_fixed_to_fixed}% for fixed-to-fixed"
        )
    if not ntb.meets_payment_reduction:
        details.append(
            f"  - No monthly payment reduction (savings ${ntb.monthly_savings:,.2f}) "
            f"or stability benefit"
        )
    return details


def verify_eligibility(
    application: Application,
    settings: VAPolicySettings = va_policy,
    today: Optional[date] = None,
    checklist: Optional[DocumentChecklistProvider] = None,
) -> EligibilityReport:
    """
    Verify VA IRRRL eligibility for an application.

    Args:
        application: The application (current loan and NTB result optional)
        settings: VA policy settings (uses defaults if not provided)
        today: Reference date for the late-payment lookback (defaults to UTC today)
        checklist: Optional document checklist used to name the extra
            documents required for cash-out applications

    Returns:
        EligibilityReport with passed/failed checks, warnings and summary
    """
    report = EligibilityReport()
    today = today or utc_today()
    current_loan = application.current_loan

    # Check 1: Existing VA loan
    if has_existing_va_loan(application):
        report.passed_checks.append("Has existing VA loan")
    else:
        report.failed_checks.append(
            "No existing VA loan found - IRRRL requires refinancing an existing VA loan"
        )

    # Check 2: Payment currency
    if current_loan is None:
        report.failed_checks.append("Current loan information not provided")
    else:
        issues = payment_history_issues(current_loan, today, settings)
        if issues:
            report.failed_checks.append("Payment history issues: " + "; ".join(issues))
        else:
            report.passed_checks.append("Current on mortgage payments")

    # Check 3: Occupancy
    if meets_occupancy(application.property):
        report.passed_checks.append(
            "Meets occupancy requirements (previously or currently occupied)"
        )
    else:
        report.failed_checks.append(
            "Property must have been previously or currently occupied by the veteran"
        )

    # Check 4: Net Tangible Benefit
    ntb = application.ntb_result
    if ntb is None:
        report.warnings.append("Net Tangible Benefit calculation not yet performed")
    elif ntb.passes_ntb:
        report.passed_checks.append("Meets Net Tangible Benefit requirements")
        report.passed_checks.append(f"  - Monthly savings: ${ntb.monthly_savings:,.2f}")
        report.passed_checks.append(f"  - Interest rate reduction: {ntb.rate_reduction:.3f}%")
        report.passed_checks.append(
            f"  - Recoupment period: {ntb.recoupment} "
            f"(must be <= {settings.max_recoupment_months})"
        )
    else:
        report.failed_checks.append("Does not meet Net Tangible Benefit requirements")
        report.failed_checks.extend(_ntb_failures(ntb, settings))

    # Check 5: Cash-out
    if application.is_cash_out:
        report.warnings.append(
            "Cash-out refinance requires manual review and full income documentation"
        )

        if application.cash_out_amount > settings.max_cash_out_without_full_docs:
            report.warnings.append(
                f"Cash-out amount of ${application.cash_out_amount:,.2f} exceeds "
                f"${settings.max_cash_out_without_full_docs:,.2f} - full documentation required"
            )

        if checklist is not None:
            extra = additional_documents(application, checklist)
            if extra:
                names = ", ".join(doc.display_name for doc in extra)
                report.warnings.append(f"Additional documents required: {names}")

    # Check 6: Funding fee waiver (informational)
    if qualifies_for_fee_waiver(application.borrower, settings):
        report.passed_checks.append(
            f"Funding fee waived due to {application.borrower.disability_percentage}% "
            f"disability rating"
        )

    if report.is_eligible:
        report.summary = "Application meets all VA IRRRL eligibility requirements."
    else:
        report.summary = (
            f"Application has {len(report.failed_checks)} eligibility issue(s) "
            f"that must be addressed."
        )

    return report
