"""
Unit Tests for VA IRRRL Eligibility Verification.

These tests verify:
1. Each check (VA loan, payment currency, occupancy, NTB, cash-out)
2. That all issues are reported at once
3. Summary wording and issue counts
4. Funding fee waiver note and document warnings
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from irrrl_gateway.domain.entities import (
    Application,
    ApplicationType,
    Borrower,
    CurrentLoanSnapshot,
    LoanTerms,
    Property,
    RequestedLoan,
)
from irrrl_gateway.service.underwriting import (
    PolicyDocumentChecklist,
    calculate_ntb,
    verify_eligibility,
)
from irrrl_gateway.service.underwriting.eligibility import payment_history_issues


D = Decimal
TODAY = date(2025, 6, 15)

VA_LOAN_FAILURE = "No existing VA loan found - IRRRL requires refinancing an existing VA loan"


# =============================================================================
# Test Fixtures
# =============================================================================

def make_current_loan(
    is_va_loan: bool = True,
    current_on_payments: bool = True,
    last_late_payment_date: Optional[date] = None,
    late_payments_over_30_days: int = 0,
    monthly_payment: str = "1449.10",
) -> CurrentLoanSnapshot:
    return CurrentLoanSnapshot(
        terms=LoanTerms(D("200000"), D("7.0"), 360),
        remaining_term_months=340,
        monthly_principal_and_interest=D(monthly_payment),
        current_on_payments=current_on_payments,
        last_late_payment_date=last_late_payment_date,
        late_payments_over_30_days=late_payments_over_30_days,
        is_va_loan=is_va_loan,
    )


def make_application(
    current_loan: Optional[CurrentLoanSnapshot] = None,
    with_current_loan: bool = True,
    currently_occupied: bool = True,
    previously_occupied: bool = False,
    cash_out_amount: Optional[str] = None,
    borrower: Optional[Borrower] = None,
    total_costs: str = "6000",
) -> Application:
    if current_loan is None and with_current_loan:
        current_loan = make_current_loan()

    return Application(
        application_type=ApplicationType.CASH_OUT if cash_out_amount else ApplicationType.RATE_AND_TERM,
        borrower=borrower or Borrower(first_name="Jordan", last_name="Rivera"),
        property=Property(
            currently_occupied=currently_occupied,
            previously_occupied=previously_occupied,
        ),
        requested_loan=RequestedLoan(
            terms=LoanTerms(D("200000"), D("6.0"), 360),
            cash_out_amount=D(cash_out_amount) if cash_out_amount else None,
        ),
        current_loan=current_loan,
        total_loan_costs=D(total_costs),
    )


# =============================================================================
# Check Tests
# =============================================================================

class TestEligibleApplication:
    """Tests for an application with no issues."""

    def test_eligible_with_ntb_warning(self):
        report = verify_eligibility(make_application(), today=TODAY)

        assert report.is_eligible
        assert report.failed_checks == []
        assert "Has existing VA loan" in report.passed_checks
        assert "Current on mortgage payments" in report.passed_checks
        assert report.warnings == ["Net Tangible Benefit calculation not yet performed"]
        assert report.summary == "Application meets all VA IRRRL eligibility requirements."

    def test_passing_ntb_is_itemized(self):
        application = make_application()
        application.ntb_result = calculate_ntb(application, now=datetime(2025, 6, 15))

        report = verify_eligibility(application, today=TODAY)

        assert report.is_eligible
        assert "Meets Net Tangible Benefit requirements" in report.passed_checks
        assert "  - Monthly savings: $250.00" in report.passed_checks
        assert report.warnings == []

    def test_previously_occupied_is_enough(self):
        report = verify_eligibility(
            make_application(currently_occupied=False, previously_occupied=True),
            today=TODAY,
        )

        assert report.is_eligible


class TestVaLoanCheck:
    """Tests for the existing VA loan requirement."""

    def test_non_va_loan_fails(self):
        application = make_application(current_loan=make_current_loan(is_va_loan=False))

        report = verify_eligibility(application, today=TODAY)

        assert not report.is_eligible
        assert VA_LOAN_FAILURE in report.failed_checks

    def test_missing_current_loan_reports_both_issues(self):
        report = verify_eligibility(make_application(with_current_loan=False), today=TODAY)

        assert report.failed_checks == [
            VA_LOAN_FAILURE,
            "Current loan information not provided",
        ]
        assert report.summary == (
            "Application has 2 eligibility issue(s) that must be addressed."
        )


class TestPaymentHistory:
    """Tests for the payment currency check."""

    def test_not_current_fails(self):
        application = make_application(
            current_loan=make_current_loan(current_on_payments=False)
        )

        report = verify_eligibility(application, today=TODAY)

        assert not report.is_eligible
        assert report.failed_checks[0].startswith("Payment history issues:")

    def test_late_payment_within_six_months_fails(self):
        loan = make_current_loan(last_late_payment_date=date(2025, 1, 10))

        assert payment_history_issues(loan, TODAY) == [
            "late payment on 2025-01-10 within the last 6 months"
        ]

    def test_late_payment_exactly_six_months_ago_passes(self):
        loan = make_current_loan(last_late_payment_date=date(2024, 12, 15))

        assert payment_history_issues(loan, TODAY) == []

    def test_old_late_payment_passes(self):
        loan = make_current_loan(last_late_payment_date=date(2024, 6, 1))

        report = verify_eligibility(make_application(current_loan=loan), today=TODAY)

        assert report.is_eligible

    def test_thirty_day_late_fails(self):
        loan = make_current_loan(late_payments_over_30_days=1)

        issues = payment_history_issues(loan, TODAY)

        assert issues == ["1 payment(s) over 30 days late in the last 12 months"]

    def test_all_issues_in_one_entry(self):
        loan = make_current_loan(
            current_on_payments=False,
            last_late_payment_date=date(2025, 5, 1),
            late_payments_over_30_days=2,
        )

        report = verify_eligibility(make_application(current_loan=loan), today=TODAY)

        assert len(report.failed_checks) == 1
        assert len(payment_history_issues(loan, TODAY)) == 3


class TestOccupancy:
    """Tests for the occupancy check."""

    def test_never_occupied_fails(self):
        report = verify_eligibility(
            make_application(currently_occupied=False, previously_occupied=False),
            today=TODAY,
        )

        assert not report.is_eligible
        assert (
            "Property must have been previously or currently occupied by the veteran"
            in report.failed_checks
        )


class TestNtbCheck:
    """Tests for the Net Tangible Benefit check."""

    def test_failed_ntb_lists_each_failed_sub_test(self):
        application = make_application(
            current_loan=make_current_loan(monthly_payment="1349.10"),
            total_costs="6250",
        )
        application.ntb_result = calculate_ntb(application, now=datetime(2025, 6, 15))

        report = verify_eligibility(application, today=TODAY)

        assert not report.is_eligible
        assert report.failed_checks[0] == "Does not meet Net Tangible Benefit requirements"
        assert report.failed_checks[1].startswith("  - Recoupment period of 42 months exceeds")
        # Sub-items count toward the issue total
        assert report.summary == (
            "Application has 2 eligibility issue(s) that must be addressed."
        )

    def test_multiple_issues_reported_together(self):
        application = make_application(
            current_loan=make_current_loan(is_va_loan=False, current_on_payments=False),
            currently_occupied=False,
        )

        report = verify_eligibility(application, today=TODAY)

        assert len(report.failed_checks) == 3


class TestCashOut:
    """Tests for cash-out warnings."""

    def test_cash_out_requires_manual_review(self):
        report = verify_eligibility(make_application(cash_out_amount="5000"), today=TODAY)

        assert report.is_eligible
        assert (
            "Cash-out refinance requires manual review and full income documentation"
            in report.warnings
        )
        assert not any("exceeds" in warning for warning in report.warnings)

    def test_large_cash_out_needs_full_documentation(self):
        report = verify_eligibility(make_application(cash_out_amount="10000"), today=TODAY)

        assert (
            "Cash-out amount of $10,000.00 exceeds $6,000.00 - full documentation required"
            in report.warnings
        )

    def test_checklist_names_additional_documents(self):
        report = verify_eligibility(
            make_application(cash_out_amount="10000"),
            today=TODAY,
            checklist=PolicyDocumentChecklist(),
        )

        assert report.warnings[-1] == (
            "Additional documents required: Recent Pay Stubs (Last 30 days), "
            "W-2 Forms (Last 2 years), Bank Statements (Last 2 months)"
        )

    def test_rate_and_term_has_no_cash_out_warnings(self):
        report = verify_eligibility(
            make_application(),
            today=TODAY,
            checklist=PolicyDocumentChecklist(),
        )

        assert not any("Cash-out" in warning for warning in report.warnings)


class TestFundingFeeNote:
    """Tests for the informational funding fee waiver entry."""

    def test_disability_rating_waiver_noted(self):
        borrower = Borrower(
            first_name="Jordan",
            last_name="Rivera",
            has_disability_rating=True,
            disability_percentage=30,
        )

        report = verify_eligibility(make_application(borrower=borrower), today=TODAY)

        assert "Funding fee waived due to 30% disability rating" in report.passed_checks

    def test_no_waiver_without_rating(self):
        report = verify_eligibility(make_application(), today=TODAY)

        assert not any("Funding fee" in check for check in report.passed_checks)
