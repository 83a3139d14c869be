"""Application service - orchestrates the IRRRL application use cases."""

from datetime import datetime
from typing import Callable, Dict, List, Union
from uuid import UUID

import structlog

from irrrl_gateway.application.dto import (
    ApplicationResponse,
    CreateApplicationRequest,
    EligibilityResponse,
    NtbResponse,
    TransitionRequest,
    TransitionResponse,
)
from irrrl_gateway.core.metrics import (
    record_eligibility_check,
    record_ntb_calculation,
    record_status_transition,
    track_ntb_latency,
)
from irrrl_gateway.domain.entities import (
    Application,
    ApplicationEvent,
    ApplicationStatus,
    Borrower,
    CurrentLoanSnapshot,
    DocumentType,
    EventType,
    LoanTerms,
    Property,
    RequestedLoan,
)
from irrrl_gateway.domain.exceptions import (
    ApplicationNotFoundException,
    InvalidApplicationRequestException,
)
from irrrl_gateway.domain.interfaces import (
    ApplicationRepository,
    DocumentChecklistProvider,
    NotificationPublisher,
)
from irrrl_gateway.service.underwriting import (
    FundingFee,
    TransitionResult,
    VAPolicySettings,
    calculate_funding_fee,
    calculate_ntb,
    complete_ai_analysis,
    complete_document_gathering,
    explain_ntb,
    prepare_for_underwriter,
    request_transition,
    start_ai_analysis,
    start_document_gathering,
    submit,
    valid_next_statuses,
    va_policy,
    verify_eligibility,
)

logger = structlog.get_logger(__name__)

WorkflowStep = Callable[[Application, datetime], Union[TransitionResult, List[TransitionResult]]]

WORKFLOW_STEPS: Dict[str, WorkflowStep] = {
    "start-ai-analysis": start_ai_analysis,
    "complete-ai-analysis": complete_ai_analysis,
    "start-document-gathering": start_document_gathering,
    "complete-document-gathering": complete_document_gathering,
    "prepare-for-underwriter": prepare_for_underwriter,
}


class ApplicationService:
    """
    Application service for IRRRL use cases.

    Every status change loads the aggregate with for_update=True, so the
    surrounding transaction is the single writer for that application.
    Changes are committed before their events are published. Rejected
    transitions are returned, not raised, and are never saved.
    """

    def __init__(
        self,
        application_repository: ApplicationRepository,
        notification_publisher: NotificationPublisher,
        document_checklist: DocumentChecklistProvider,
        policy: VAPolicySettings = va_policy,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._repo = application_repository
        self._publisher = notification_publisher
        self._checklist = document_checklist
        self._policy = policy
        self._clock = clock

    async def create_application(
        self,
        request: CreateApplicationRequest,
    ) -> ApplicationResponse:
        """
        Create and submit a new application.

        Raises:
            InvalidApplicationRequestException: If request validation fails
        """
        errors = request.validate()
        if errors:
            raise InvalidApplicationRequestException("; ".join(errors))

        application = self._build_application(request)
        now = self._clock()
        application.created_at = now
        application.application_number = (
            f"IRRRL-{now.year}-{application.id.hex[:6].upper()}"
        )
        submit(application, now)

        await self._repo.save(application)

        logger.info(
            "application_submitted",
            application_id=str(application.id),
            application_number=application.application_number,
            application_type=application.application_type.value,
        )

        return ApplicationResponse.from_entity(application)

    async def get_application(self, application_id: UUID) -> ApplicationResponse:
        application = await self._get(application_id)
        return ApplicationResponse.from_entity(application)

    async def calculate_ntb(
        self,
        application_id: UUID,
        calculated_by: str = "System",
    ) -> NtbResponse:
        """
        Run the Net Tangible Benefit test and store the result.

        Any prior result is replaced.

        Raises:
            ApplicationNotFoundException: If the application does not exist
            MissingPrerequisiteDataException: If no current loan is on file
        """
        application = await self._get(application_id, for_update=True)
        log = logger.bind(application_id=str(application_id))

        with track_ntb_latency():
            result = calculate_ntb(
                application,
                settings=self._policy,
                now=self._clock(),
                calculated_by=calculated_by,
            )

        application.ntb_result = result
        await self._repo.save(application)
        await self._repo.commit()

        record_ntb_calculation(result.passes_ntb)
        explanation = explain_ntb(result)
        log.info(
            "ntb_calculated",
            passes_ntb=result.passes_ntb,
            monthly_savings=str(result.monthly_savings),
            recoupment=str(result.recoupment),
            failed_tests=result.failed_tests(),
        )

        await self._publish(
            EventType.NTB_CALCULATED,
            application,
            {"passes_ntb": result.passes_ntb, "explanation": explanation},
        )

        return NtbResponse(
            application_id=str(application.id),
            result=result,
            explanation=explanation,
        )

    async def verify_eligibility(self, application_id: UUID) -> EligibilityResponse:
        """Verify eligibility and record the verdict on the application."""
        application = await self._get(application_id, for_update=True)

        report = verify_eligibility(
            application,
            settings=self._policy,
            today=self._clock().date(),
            checklist=self._checklist,
        )

        application.eligibility_verified = report.is_eligible
        application.eligibility_notes = "\n".join([report.summary, *report.failed_checks])
        await self._repo.save(application)
        await self._repo.commit()

        record_eligibility_check(report.is_eligible)
        logger.info(
            "eligibility_verified",
            application_id=str(application_id),
            is_eligible=report.is_eligible,
            failed=len(report.failed_checks),
            warnings=len(report.warnings),
        )

        await self._publish(
            EventType.ELIGIBILITY_VERIFIED,
            application,
            {"is_eligible": report.is_eligible, "summary": report.summary},
        )

        return EligibilityResponse(application_id=str(application.id), report=report)

    async def transition(
        self,
        application_id: UUID,
        request: TransitionRequest,
    ) -> TransitionResponse:
        """Request a manual status change (loan officer or underwriter)."""
        application = await self._get(application_id, for_update=True)
        result = request_transition(
            application,
            request.target_status,
            actor=request.actor,
            note=request.note,
            now=self._clock(),
        )
        return await self._finish_transitions(application, [result])

    async def run_workflow_step(self, application_id: UUID, step: str) -> TransitionResponse:
        """
        Run a named workflow step (see WORKFLOW_STEPS).

        Raises:
            InvalidApplicationRequestException: If the step is unknown
        """
        action = WORKFLOW_STEPS.get(step)
        if action is None:
            raise InvalidApplicationRequestException(f"Unknown workflow step: {step}")

        application = await self._get(application_id, for_update=True)
        outcome = action(application, self._clock())
        results = outcome if isinstance(outcome, list) else [outcome]
        return await self._finish_transitions(application, results)

    async def start_ai_analysis(self, application_id: UUID) -> TransitionResponse:
        return await self.run_workflow_step(application_id, "start-ai-analysis")

    async def complete_ai_analysis(self, application_id: UUID) -> TransitionResponse:
        return await self.run_workflow_step(application_id, "complete-ai-analysis")

    async def complete_document_gathering(self, application_id: UUID) -> TransitionResponse:
        return await self.run_workflow_step(application_id, "complete-document-gathering")

    async def prepare_for_underwriter(self, application_id: UUID) -> TransitionResponse:
        return await self.run_workflow_step(application_id, "prepare-for-underwriter")

    async def next_statuses(self, application_id: UUID) -> List[ApplicationStatus]:
        application = await self._get(application_id)
        return valid_next_statuses(application.status, application.application_type)

    async def list_applications(
        self,
        status: ApplicationStatus,
        limit: int = 50,
    ) -> List[ApplicationResponse]:
        """Applications waiting in `status`, oldest first."""
        applications = await self._repo.list_by_status(status, limit=limit)
        return [ApplicationResponse.from_entity(a) for a in applications]

    async def required_documents(self, application_id: UUID) -> List[DocumentType]:
        application = await self._get(application_id)
        return self._checklist.required_documents(application)

    async def funding_fee(self, application_id: UUID) -> FundingFee:
        application = await self._get(application_id)
        return calculate_funding_fee(
            application.requested_loan.amount,
            application.borrower,
            self._policy,
        )

    async def _get(self, application_id: UUID, for_update: bool = False) -> Application:
        application = await self._repo.get_by_id(application_id, for_update=for_update)
        if application is None:
            raise ApplicationNotFoundException(str(application_id))
        return application

    async def _finish_transitions(
        self,
        application: Application,
        results: List[TransitionResult],
    ) -> TransitionResponse:
        log = logger.bind(application_id=str(application.id))

        for result in results:
            record_status_transition(
                result.from_status.value,
                result.to_status.value,
                result.accepted,
            )
            if result:
                log.info(
                    "status_transition_accepted",
                    from_status=result.from_status.value,
                    to_status=result.to_status.value,
                )
            else:
                log.warning(
                    "status_transition_rejected",
                    from_status=result.from_status.value,
                    to_status=result.to_status.value,
                    reason=result.reason,
                )

        accepted = [result for result in results if result]
        if accepted:
            await self._repo.save(application)
            await self._repo.commit()
            for result in accepted:
                await self._publish(
                    EventType.STATUS_CHANGED,
                    application,
                    result.record.to_dict(),
                )

        return TransitionResponse.from_results(application, results)

    async def _publish(self, event_type: EventType, application: Application, payload: dict) -> None:
        event = ApplicationEvent(
            event_type=event_type,
            application_id=application.id,
            payload=payload,
            occurred_at=self._clock(),
        )
        delivered = await self._publisher.publish(event)
        if not delivered:
            logger.warning(
                "notification_not_delivered",
                application_id=str(application.id),
                event_type=event_type.value,
            )

    @staticmethod
    def _build_application(request: CreateApplicationRequest) -> Application:
        current_loan = None
        if request.current_loan is not None:
            loan = request.current_loan
            current_loan = CurrentLoanSnapshot(
                terms=LoanTerms(
                    principal=loan.current_balance,
                    annual_rate=loan.interest_rate,
                    term_months=loan.original_term_months,
                    loan_type=loan.loan_type,
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

        return Application(
            application_type=request.application_type,
            borrower=Borrower(
                first_name=request.first_name.strip(),
                last_name=request.last_name.strip(),
                email=request.email,
                has_disability_rating=request.has_disability_rating,
                disability_percentage=request.disability_percentage,
            ),
            property=Property(
                street_address=request.street_address,
                city=request.city,
                state=request.state,
                zip_code=request.zip_code,
                currently_occupied=request.currently_occupied,
                previously_occupied=request.previously_occupied,
            ),
            requested_loan=RequestedLoan(
                terms=LoanTerms(
                    principal=request.requested_amount,
                    annual_rate=request.requested_rate,
                    term_months=request.requested_term_months,
                    loan_type=request.requested_loan_type,
                ),
                cash_out_amount=request.cash_out_amount,
                cash_out_purpose=request.cash_out_purpose,
            ),
            current_loan=current_loan,
            total_loan_costs=request.total_loan_costs,
        )
