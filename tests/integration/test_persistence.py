"""
Integration tests for the application repository.

These tests verify:
1. The aggregate round-trips (current loan, NTB result, status history)
2. Status history is appended, never duplicated
3. A recalculated NTB result replaces the stored one
4. Listing by status (filter, oldest first, limit)
5. Stored statuses outside the workflow are rejected on load
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import update

from irrrl_gateway.domain.entities import (
    Application,
    ApplicationStatus,
    ApplicationType,
    Borrower,
    CurrentLoanSnapshot,
    LoanTerms,
    LoanType,
    Property,
    RequestedLoan,
)
from irrrl_gateway.domain.exceptions import InvalidStoredStatusException
from irrrl_gateway.infrastructure.database import ApplicationModel
from irrrl_gateway.service.underwriting import (
    calculate_ntb,
    request_transition,
    start_ai_analysis,
    submit,
)

D = Decimal
NOW = datetime(2025, 6, 15, 10, 0, 0)


def make_application(total_costs: str = "6000", created_at: datetime = NOW) -> Application:
    application = Application(
        application_type=ApplicationType.RATE_AND_TERM,
        borrower=Borrower(first_name="Jordan", last_name="Rivera", email="jr@example.com"),
        property=Property(street_address="12 Elm St", state="OH", currently_occupied=True),
        requested_loan=RequestedLoan(terms=LoanTerms(D("200000"), D("6.0"), 360)),
        current_loan=CurrentLoanSnapshot(
            terms=LoanTerms(D("200000"), D("7.0"), 360, LoanType.FIXED_RATE),
            remaining_term_months=340,
            monthly_principal_and_interest=D("1449.10"),
            last_late_payment_date=date(2023, 3, 1),
            loan_number="VA-1",
        ),
        total_loan_costs=D(total_costs),
        application_number="IRRRL-2025-TEST01",
        created_at=created_at,
    )
    submit(application, created_at)
    return application


class TestApplicationRepository:
    """Tests for PostgresApplicationRepository against SQLite."""

    @pytest.mark.asyncio
    async def test_round_trip(self, repository):
        application = make_application()
        await repository.save(application)

        loaded = await repository.get_by_id(application.id)

        assert loaded.id == application.id
        assert loaded.status == ApplicationStatus.SUBMITTED
        assert loaded.borrower == application.borrower
        assert loaded.current_loan.monthly_principal_and_interest == D("1449.10")
        assert loaded.current_loan.last_late_payment_date == date(2023, 3, 1)
        assert loaded.current_loan.loan_type == LoanType.FIXED_RATE
        assert loaded.requested_loan.amount == D("200000")
        assert loaded.submitted_at == NOW
        assert loaded.submitted_at.tzinfo is None

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, repository):
        assert await repository.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_history_appended_once(self, repository):
        application = make_application()
        await repository.save(application)

        start_ai_analysis(application, NOW)
        await repository.save(application)
        await repository.save(application)

        loaded = await repository.get_by_id(application.id, for_update=True)

        assert loaded.status == ApplicationStatus.AI_ANALYZING
        assert len(loaded.status_history) == 1
        assert loaded.status_history[0].id == application.status_history[0].id

        request_transition(loaded, ApplicationStatus.CANCELLED, actor="veteran", now=NOW)
        await repository.save(loaded)

        reloaded = await repository.get_by_id(application.id)
        assert [r.to_status for r in reloaded.status_history] == [
            ApplicationStatus.AI_ANALYZING,
            ApplicationStatus.CANCELLED,
        ]

    @pytest.mark.asyncio
    async def test_ntb_result_replaced(self, repository):
        application = make_application()
        application.ntb_result = calculate_ntb(application, now=NOW)
        await repository.save(application)

        application.total_loan_costs = D("0")
        application.ntb_result = calculate_ntb(application, now=NOW)
        await repository.save(application)

        loaded = await repository.get_by_id(application.id)

        assert loaded.ntb_result.recoupment.months is None
        assert loaded.ntb_result.passes_ntb is False
        assert loaded.ntb_result.monthly_savings == D("250.00")

    @pytest.mark.asyncio
    async def test_list_by_status(self, repository):
        first = make_application()
        second = make_application()
        start_ai_analysis(second, NOW)
        await repository.save(first)
        await repository.save(second)

        submitted = await repository.list_by_status(ApplicationStatus.SUBMITTED)

        assert [a.id for a in submitted] == [first.id]

    @pytest.mark.asyncio
    async def test_list_by_status_oldest_first(self, repository):
        newer = make_application(created_at=NOW)
        older = make_application(created_at=NOW - timedelta(days=2))
        middle = make_application(created_at=NOW - timedelta(days=1))
        for application in (newer, older, middle):
            await repository.save(application)

        submitted = await repository.list_by_status(ApplicationStatus.SUBMITTED)

        assert [a.id for a in submitted] == [older.id, middle.id, newer.id]

    @pytest.mark.asyncio
    async def test_list_by_status_limit(self, repository):
        applications = [
            make_application(created_at=NOW + timedelta(minutes=i)) for i in range(3)
        ]
        for application in applications:
            await repository.save(application)

        submitted = await repository.list_by_status(ApplicationStatus.SUBMITTED, limit=2)

        assert [a.id for a in submitted] == [applications[0].id, applications[1].id]

    @pytest.mark.asyncio
    async def test_list_by_status_loads_full_aggregate(self, repository):
        application = make_application()
        start_ai_analysis(application, NOW)
        await repository.save(application)

        analyzing = await repository.list_by_status(ApplicationStatus.AI_ANALYZING)

        assert len(analyzing) == 1
        assert analyzing[0].current_loan.loan_number == "VA-1"
        assert [r.to_status for r in analyzing[0].status_history] == [
            ApplicationStatus.AI_ANALYZING
        ]

    @pytest.mark.asyncio
    async def test_unreachable_stored_status_rejected(self, repository, test_session):
        application = make_application()
        await repository.save(application)
        await test_session.execute(
            update(ApplicationModel)
            .where(ApplicationModel.id == str(application.id))
            .values(status="archived")
        )

        with pytest.raises(InvalidStoredStatusException) as exc_info:
            await repository.get_by_id(application.id)

        assert exc_info.value.code == "INVALID_STORED_STATUS"
        assert exc_info.value.status == "archived"

    @pytest.mark.asyncio
    async def test_commit_ends_transaction(self, repository, test_session):
        application = make_application()
        await repository.save(application)
        assert test_session.in_transaction()

        await repository.commit()

        assert not test_session.in_transaction()
        assert (await repository.get_by_id(application.id)).id == application.id
