"""PostgreSQL implementation of ApplicationRepository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from irrrl_gateway.domain.entities import (
    Application,
    ApplicationStatus,
    ApplicationType,
    Borrower,
    CurrentLoanSnapshot,
    LoanTerms,
    LoanType,
    NetTangibleBenefitResult,
    Property,
    Recoupment,
    RequestedLoan,
    StatusTransitionRecord,
)
from irrrl_gateway.domain.exceptions import InvalidStoredStatusException
from irrrl_gateway.domain.interfaces import ApplicationRepository
from irrrl_gateway.infrastructure.database.models import (
    ApplicationModel,
    CurrentLoanModel,
    NetTangibleBenefitModel,
    StatusHistoryModel,
)
from irrrl_gateway.service.underwriting import reachable_statuses

_AGGREGATE_OPTIONS = (
    selectinload(ApplicationModel.current_loan),
    selectinload(ApplicationModel.ntb),
    selectinload(ApplicationModel.status_history),
)

_STORABLE_STATUSES = frozenset(status.value for status in reachable_statuses())


class PostgresApplicationRepository(ApplicationRepository):
    """
    PostgreSQL implementation of the Application repository.

    The aggregate maps onto four tables: the application row, its current
    loan snapshot, its latest NTB result and its status history. Writes
    only flush; commit() ends the unit of work and releases row locks.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(
        self,
        application_id: UUID,
        for_update: bool = False,
    ) -> Optional[Application]:
        model = await self._load(str(application_id), for_update=for_update)
        if model is None:
            return None
        return self._to_entity(model)

    async def save(self, application: Application) -> Application:
        model = await self._load(str(application.id))
        if model is None:
            model = ApplicationModel(id=str(application.id))
            model.current_loan = None
            model.ntb = None
            self._session.add(model)

        self._apply_application(model, application)
        self._apply_current_loan(model, application.current_loan)
        self._apply_ntb(model, application.ntb_result)
        self._append_history(model, application.status_history)

        await self._session.flush()
        return application

    async def commit(self) -> None:
        await self._session.commit()

    async def list_by_status(
        self,
        status: ApplicationStatus,
        limit: int = 50,
    ) -> List[Application]:
        stmt = (
            select(ApplicationModel)
            .options(*_AGGREGATE_OPTIONS)
            .where(ApplicationModel.status == status.value)
            .order_by(ApplicationModel.created_at.asc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def _load(
        self,
        application_id: str,
        for_update: bool = False,
    ) -> Optional[ApplicationModel]:
        stmt = (
            select(ApplicationModel)
            .options(*_AGGREGATE_OPTIONS)
            .where(ApplicationModel.id == application_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Entity -> model
    # -------------------------------------------------------------------------

    @staticmethod
    def _apply_application(model: ApplicationModel, application: Application) -> None:
        borrower = application.borrower
        prop = application.property
        requested = application.requested_loan

        model.application_number = application.application_number
        model.application_type = application.application_type.value
        model.status = application.status.value

        model.borrower_first_name = borrower.first_name
        model.borrower_last_name = borrower.last_name
        model.borrower_email = borrower.email
        model.has_disability_rating = borrower.has_disability_rating
        model.disability_percentage = borrower.disability_percentage

        model.street_address = prop.street_address
        model.city = prop.city
        model.state = prop.state
        model.zip_code = prop.zip_code
        model.currently_occupied = prop.currently_occupied
        model.previously_occupied = prop.previously_occupied

        model.requested_amount = requested.amount
        model.requested_rate = requested.interest_rate
        model.requested_term_months = requested.term_months
        model.requested_loan_type = requested.loan_type.value
        model.cash_out_amount = requested.cash_out_amount
        model.cash_out_purpose = requested.cash_out_purpose
        model.total_loan_costs = application.total_loan_costs

        model.eligibility_verified = application.eligibility_verified
        model.eligibility_notes = application.eligibility_notes

        model.created_at = application.created_at
        model.submitted_at = application.submitted_at
        model.approved_at = application.approved_at
        model.approved_by = application.approved_by
        model.decline_reason = application.decline_reason
        model.completed_at = application.completed_at
        model.actual_closing_date = application.actual_closing_date

    @staticmethod
    def _apply_current_loan(
        model: ApplicationModel,
        snapshot: Optional[CurrentLoanSnapshot],
    ) -> None:
        if snapshot is None:
            model.current_loan = None
            return

        loan = model.current_loan or CurrentLoanModel()
        loan.loan_number = snapshot.loan_number
        loan.lender = snapshot.lender
        loan.loan_type = snapshot.loan_type.value
        loan.current_balance = snapshot.current_balance
        loan.interest_rate = snapshot.interest_rate
        loan.original_term_months = snapshot.terms.term_months
        loan.remaining_term_months = snapshot.remaining_term_months
        loan.monthly_principal_and_interest = snapshot.monthly_principal_and_interest
        loan.monthly_property_tax = snapshot.monthly_property_tax
        loan.monthly_insurance = snapshot.monthly_insurance
        loan.monthly_pmi = snapshot.monthly_pmi
        loan.current_on_payments = snapshot.current_on_payments
        loan.late_payments_last_12_months = snapshot.late_payments_last_12_months
        loan.late_payments_over_30_days = snapshot.late_payments_over_30_days
        loan.last_late_payment_date = snapshot.last_late_payment_date
        loan.is_va_loan = snapshot.is_va_loan
        model.current_loan = loan

    @staticmethod
    def _apply_ntb(
        model: ApplicationModel,
        result: Optional[NetTangibleBenefitResult],
    ) -> None:
        if result is None:
            model.ntb = None
            return

        # Latest result replaces the stored row in place
        ntb = model.ntb or NetTangibleBenefitModel()
        ntb.current_rate = result.current_rate
        ntb.current_monthly_payment = result.current_monthly_payment
        ntb.current_remaining_term_months = result.current_remaining_term_months
        ntb.new_rate = result.new_rate
        ntb.new_monthly_payment = result.new_monthly_payment
        ntb.new_term_months = result.new_term_months
        ntb.rate_reduction = result.rate_reduction
        ntb.monthly_savings = result.monthly_savings
        ntb.total_loan_costs = result.total_loan_costs
        ntb.recoupment_months = result.recoupment.months
        ntb.break_even_months = result.break_even_months
        ntb.lifetime_savings = result.lifetime_savings
        ntb.total_interest_savings = result.total_interest_savings
        ntb.term_reduction_months = result.term_reduction_months
        ntb.equity_growth_acceleration = result.equity_growth_acceleration
        ntb.meets_recoupment = result.meets_recoupment
        ntb.meets_rate_reduction = result.meets_rate_reduction
        ntb.meets_payment_reduction = result.meets_payment_reduction
        ntb.passes_ntb = result.passes_ntb
        ntb.calculated_at = result.calculated_at
        ntb.calculated_by = result.calculated_by
        model.ntb = ntb

    @staticmethod
    def _append_history(
        model: ApplicationModel,
        history: List[StatusTransitionRecord],
    ) -> None:
        stored = {UUID(str(row.id)) for row in model.status_history}
        for sequence, record in enumerate(history):
            if record.id in stored:
                continue
            model.status_history.append(
                StatusHistoryModel(
                    id=str(record.id),
                    sequence=sequence,
                    from_status=record.from_status.value,
                    to_status=record.to_status.value,
                    changed_at=record.changed_at,
                    changed_by=record.changed_by,
                    note=record.note,
                )
            )

    # -------------------------------------------------------------------------
    # Model -> entity
    # -------------------------------------------------------------------------

    @staticmethod
    def _stored_status(model: ApplicationModel) -> ApplicationStatus:
        if model.status not in _STORABLE_STATUSES:
            raise InvalidStoredStatusException(str(model.id), model.status)
        return ApplicationStatus(model.status)

    def _to_entity(self, model: ApplicationModel) -> Application:
        """Convert database model to domain entity."""
        cash_out = model.cash_out_amount

        return Application(
            id=UUID(str(model.id)),
            application_number=model.application_number,
            application_type=ApplicationType(model.application_type),
            status=self._stored_status(model),
            borrower=Borrower(
                first_name=model.borrower_first_name,
                last_name=model.borrower_last_name,
                email=model.borrower_email,
                has_disability_rating=model.has_disability_rating,
                disability_percentage=model.disability_percentage,
            ),
            property=Property(
                street_address=model.street_address,
                city=model.city,
                state=model.state,
                zip_code=model.zip_code,
                currently_occupied=model.currently_occupied,
                previously_occupied=model.previously_occupied,
            ),
            requested_loan=RequestedLoan(
                terms=LoanTerms(
                    principal=model.requested_amount,
                    annual_rate=model.requested_rate,
                    term_months=model.requested_term_months,
                    loan_type=LoanType(model.requested_loan_type),
                ),
                cash_out_amount=cash_out,
                cash_out_purpose=model.cash_out_purpose,
            ),
            current_loan=self._current_loan_to_entity(model.current_loan),
            total_loan_costs=model.total_loan_costs,
            ntb_result=self._ntb_to_entity(model.ntb),
            status_history=[
                StatusTransitionRecord(
                    id=UUID(str(row.id)),
                    from_status=ApplicationStatus(row.from_status),
                    to_status=ApplicationStatus(row.to_status),
                    changed_at=row.changed_at,
                    changed_by=row.changed_by,
                    note=row.note,
                )
                for row in model.status_history
            ],
            eligibility_verified=model.eligibility_verified,
            eligibility_notes=model.eligibility_notes,
            created_at=model.created_at,
            submitted_at=model.submitted_at,
            approved_at=model.approved_at,
            approved_by=model.approved_by,
            decline_reason=model.decline_reason,
            completed_at=model.completed_at,
            actual_closing_date=model.actual_closing_date,
        )

    @staticmethod
    def _current_loan_to_entity(
        loan: Optional[CurrentLoanModel],
    ) -> Optional[CurrentLoanSnapshot]:
        if loan is None:
            return None

        return CurrentLoanSnapshot(
            terms=LoanTerms(
                principal=loan.current_balance,
                annual_rate=loan.interest_rate,
                term_months=loan.original_term_months,
                loan_type=LoanType(loan.loan_type),
            ),
            remaining_term_months=loan.remaining_term_months,
            monthly_principal_and_interest=loan.monthly_principal_and_interest,
            monthly_property_tax=loan.monthly_property_tax,
            monthly_insurance=loan.monthly_insurance,
            monthly_pmi=loan.monthly_pmi,
            current_on_payments=loan.current_on_payments,
            late_payments_last_12_months=loan.late_payments_last_12_months,
            late_payments_over_30_days=loan.late_payments_over_30_days,
            last_late_payment_date=loan.last_late_payment_date,
            is_va_loan=loan.is_va_loan,
            loan_number=loan.loan_number,
            lender=loan.lender,
        )

    @staticmethod
    def _ntb_to_entity(
        ntb: Optional[NetTangibleBenefitModel],
    ) -> Optional[NetTangibleBenefitResult]:
        if ntb is None:
            return None

        return NetTangibleBenefitResult(
            current_rate=ntb.current_rate,
            current_monthly_payment=ntb.current_monthly_payment,
            current_remaining_term_months=ntb.current_remaining_term_months,
            new_rate=ntb.new_rate,
            new_monthly_payment=ntb.new_monthly_payment,
            new_term_months=ntb.new_term_months,
            rate_reduction=ntb.rate_reduction,
            monthly_savings=ntb.monthly_savings,
            total_loan_costs=ntb.total_loan_costs,
            recoupment=Recoupment(months=ntb.recoupment_months),
            break_even_months=ntb.break_even_months,
            lifetime_savings=ntb.lifetime_savings,
            total_interest_savings=ntb.total_interest_savings,
            term_reduction_months=ntb.term_reduction_months,
            equity_growth_acceleration=ntb.equity_growth_acceleration,
            meets_recoupment=ntb.meets_recoupment,
            meets_rate_reduction=ntb.meets_rate_reduction,
            meets_payment_reduction=ntb.meets_payment_reduction,
            passes_ntb=ntb.passes_ntb,
            calculated_at=ntb.calculated_at,
            calculated_by=ntb.calculated_by,
        )
