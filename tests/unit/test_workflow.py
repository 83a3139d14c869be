"""
Unit Tests for the Application Status Workflow.

These tests verify:
1. The transition table (allowed, rejected and terminal statuses)
2. Side effects keyed by target status
3. Named workflow steps, including prepare_for_underwriter
4. Audit history continuity
5. Cash-out applications pass through manual review before AI analysis
"""

from datetime import datetime
from decimal import Decimal

import pytest

from irrrl_gateway.domain.entities import (
    Application,
    ApplicationStatus,
    ApplicationType,
    Borrower,
    LoanTerms,
    Property,
    RequestedLoan,
)
from irrrl_gateway.service.underwriting import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    bypasses_manual_review,
    can_transition,
    complete_ai_analysis,
    complete_document_gathering,
    is_terminal,
    prepare_for_underwriter,
    reachable_statuses,
    request_transition,
    start_ai_analysis,
    start_document_gathering,
    submit,
    valid_next_statuses,
)

S = ApplicationStatus
NOW = datetime(2025, 6, 15, 9, 30, 0)


# =============================================================================
# Test Fixtures
# =============================================================================

def make_application(
    status: ApplicationStatus = S.SUBMITTED,
    application_type: ApplicationType = ApplicationType.RATE_AND_TERM,
) -> Application:
    return Application(
        application_type=application_type,
        borrower=Borrower(first_name="Jordan", last_name="Rivera"),
        property=Property(currently_occupied=True),
        requested_loan=RequestedLoan(
            terms=LoanTerms(Decimal("200000"), Decimal("6.0"), 360),
            cash_out_amount=Decimal("10000") if application_type == ApplicationType.CASH_OUT else None,
        ),
        status=status,
    )


# =============================================================================
# Transition Table Tests
# =============================================================================

class TestTransitionTable:
    """Tests for the allowed transition table."""

    def test_submitted_next_statuses_in_workflow_order(self):
        assert valid_next_statuses(S.SUBMITTED) == [
            S.AI_ANALYZING,
            S.PENDING_APPROVAL,
            S.CANCELLED,
        ]

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {S.DECLINED, S.CANCELLED, S.CLOSED}
        assert is_terminal(S.CLOSED)
        assert not is_terminal(S.APPROVED)

    def test_approved_can_only_close(self):
        assert valid_next_statuses(S.APPROVED) == [S.CLOSED]

    def test_every_non_terminal_status_can_cancel_except_approved(self):
        for status in ApplicationStatus:
            if status in TERMINAL_STATUSES or status == S.APPROVED:
                continue
            assert can_transition(status, S.CANCELLED), status

    def test_every_status_reachable_from_submitted(self):
        assert reachable_statuses() == frozenset(ApplicationStatus)

    def test_nothing_reachable_from_terminal(self):
        assert reachable_statuses(S.DECLINED) == frozenset({S.DECLINED})

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ALLOWED_TRANSITIONS[S.DECLINED] = frozenset({S.SUBMITTED})

    def test_underwriter_can_send_back_for_documents(self):
        assert can_transition(S.IN_UNDERWRITING, S.DOCUMENT_GATHERING)
        assert can_transition(S.FILE_PREPARATION, S.DOCUMENT_GATHERING)
        assert not can_transition(S.UNDERWRITER_READY, S.DOCUMENT_GATHERING)


class TestRequestTransition:
    """Tests for accepted and rejected transitions."""

    def test_accepted_transition_appends_record(self):
        application = make_application()

        result = request_transition(
            application, S.CANCELLED, actor="veteran", note="No longer needed", now=NOW
        )

        assert result
        assert application.status == S.CANCELLED
        assert len(application.status_history) == 1
        record = application.status_history[0]
        assert record == result.record
        assert (record.from_status, record.to_status) == (S.SUBMITTED, S.CANCELLED)
        assert record.changed_at == NOW
        assert record.changed_by == "veteran"
        assert record.note == "No longer needed"

    def test_rejected_transition_changes_nothing(self):
        application = make_application()

        result = request_transition(application, S.APPROVED, actor="underwriter", now=NOW)

        assert not result
        assert result.record is None
        assert result.reason == "cannot transition from submitted to approved"
        assert application.status == S.SUBMITTED
        assert application.status_history == []
        assert application.approved_at is None

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
    def test_terminal_statuses_reject_everything(self, terminal):
        application = make_application(status=terminal)

        for target in ApplicationStatus:
            result = request_transition(application, target, now=NOW)
            assert not result
            assert result.reason == f"{terminal.value} is a terminal status"

        assert application.status == terminal
        assert application.status_history == []

    def test_same_status_is_rejected(self):
        application = make_application(status=S.DOCUMENT_GATHERING)

        assert not request_transition(application, S.DOCUMENT_GATHERING, now=NOW)


class TestSideEffects:
    """Tests for side effects keyed by target status."""

    def test_submit_stamps_submitted_at(self):
        application = make_application()

        submit(application, NOW)

        assert application.submitted_at == NOW
        assert application.status == S.SUBMITTED

    def test_approval_records_time_and_actor(self):
        application = make_application(status=S.IN_UNDERWRITING)

        request_transition(application, S.APPROVED, actor="underwriter@lender.example", now=NOW)

        assert application.approved_at == NOW
        assert application.approved_by == "underwriter@lender.example"

    def test_decline_records_reason(self):
        application = make_application(status=S.IN_UNDERWRITING)

        request_transition(application, S.DECLINED, actor="uw", note="Title defect", now=NOW)

        assert application.decline_reason == "Title defect"

    def test_closing_records_completion(self):
        application = make_application(status=S.APPROVED)

        request_transition(application, S.CLOSED, actor="closer", now=NOW)

        assert application.completed_at == NOW
        assert application.actual_closing_date == NOW


class TestCashOutManualReview:
    """Cash-out applications must be reviewed before AI analysis."""

    def test_direct_move_to_ai_analyzing_rejected(self):
        application = make_application(application_type=ApplicationType.CASH_OUT)

        result = request_transition(application, S.AI_ANALYZING, actor="officer", now=NOW)

        assert not result
        assert result.reason == "cash_out applications must pass through pending_approval before ai_analyzing"
        assert result.record is None
        assert application.status == S.SUBMITTED
        assert application.status_history == []

    def test_ai_analyzing_allowed_after_review(self):
        application = make_application(application_type=ApplicationType.CASH_OUT)

        assert start_ai_analysis(application, NOW)
        result = request_transition(application, S.AI_ANALYZING, actor="officer", now=NOW)

        assert result
        assert [r.to_status for r in application.status_history] == [
            S.PENDING_APPROVAL,
            S.AI_ANALYZING,
        ]

    def test_next_statuses_exclude_ai_analyzing_before_review(self):
        assert valid_next_statuses(S.SUBMITTED, ApplicationType.CASH_OUT) == [
            S.PENDING_APPROVAL,
            S.CANCELLED,
        ]
        assert S.AI_ANALYZING in valid_next_statuses(
            S.PENDING_APPROVAL, ApplicationType.CASH_OUT
        )

    @pytest.mark.parametrize(
        "application_type,current,expected",
        [
            (ApplicationType.CASH_OUT, S.SUBMITTED, True),
            (ApplicationType.CASH_OUT, S.PENDING_APPROVAL, False),
            (ApplicationType.RATE_AND_TERM, S.SUBMITTED, False),
            (None, S.SUBMITTED, False),
        ],
    )
    def test_bypasses_manual_review(self, application_type, current, expected):
        assert bypasses_manual_review(application_type, current, S.AI_ANALYZING) is expected

    def test_unrelated_rejection_keeps_table_reason(self):
        application = make_application(
            status=S.DOCUMENT_GATHERING,
            application_type=ApplicationType.CASH_OUT,
        )

        result = request_transition(application, S.AI_ANALYZING, now=NOW)

        assert result.reason == "cannot transition from document_gathering to ai_analyzing"


# =============================================================================
# Workflow Step Tests
# =============================================================================

class TestWorkflowSteps:
    """Tests for the named workflow steps."""

    def test_rate_and_term_goes_to_ai_analysis(self):
        application = make_application()

        result = start_ai_analysis(application, NOW)

        assert result
        assert application.status == S.AI_ANALYZING
        assert result.record.changed_by == "System"

    def test_cash_out_goes_to_manual_review(self):
        application = make_application(application_type=ApplicationType.CASH_OUT)

        result = start_ai_analysis(application, NOW)

        assert result
        assert application.status == S.PENDING_APPROVAL
        assert result.record.note == "Cash-out application flagged for manual review"

    def test_start_ai_analysis_rejected_after_submission_stage(self):
        application = make_application(status=S.DOCUMENT_GATHERING)

        assert not start_ai_analysis(application, NOW)
        assert application.status == S.DOCUMENT_GATHERING

    def test_happy_path_to_underwriter(self):
        application = make_application()

        assert start_ai_analysis(application, NOW)
        assert complete_ai_analysis(application, NOW)
        assert complete_document_gathering(application, NOW)
        results = prepare_for_underwriter(application, NOW)

        assert all(results)
        assert application.status == S.UNDERWRITER_READY
        assert [r.to_status for r in application.status_history] == [
            S.AI_ANALYZING,
            S.DOCUMENT_GATHERING,
            S.AI_PROCESSING,
            S.FILE_PREPARATION,
            S.UNDERWRITER_READY,
        ]

    def test_start_document_gathering_from_file_preparation(self):
        application = make_application(status=S.FILE_PREPARATION)

        assert start_document_gathering(application, NOW)
        assert application.status == S.DOCUMENT_GATHERING


class TestPrepareForUnderwriter:
    """Tests for the two-step move to UnderwriterReady."""

    def test_from_ai_processing(self):
        application = make_application(status=S.AI_PROCESSING)

        results = prepare_for_underwriter(application, NOW)

        assert len(results) == 2
        assert all(results)
        assert application.status == S.UNDERWRITER_READY
        assert len(application.status_history) == 2
        assert application.status_history[0].to_status == S.FILE_PREPARATION

    def test_from_document_gathering_is_rejected(self):
        application = make_application(status=S.DOCUMENT_GATHERING)

        results = prepare_for_underwriter(application, NOW)

        assert len(results) == 1
        assert not results[0]
        assert application.status == S.DOCUMENT_GATHERING
        assert application.status_history == []


class TestHistoryContinuity:
    """Tests for the audit trail."""

    def test_records_chain_from_status_to_status(self):
        application = make_application()
        start_ai_analysis(application, NOW)
        complete_ai_analysis(application, NOW)
        complete_document_gathering(application, NOW)
        request_transition(application, S.DOCUMENT_GATHERING, actor="lo", now=NOW)
        request_transition(application, S.CANCELLED, actor="veteran", now=NOW)

        history = application.status_history
        assert history[0].from_status == S.SUBMITTED
        for previous, current in zip(history, history[1:]):
            assert previous.to_status == current.from_status
        assert history[-1].to_status == application.status
