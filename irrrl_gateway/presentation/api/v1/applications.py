"""IRRRL application API endpoints."""

from dataclasses import asdict
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from irrrl_gateway.application.dto import (
    CreateApplicationRequest,
    CurrentLoanInput,
    TransitionRequest,
    TransitionResponse,
)
from irrrl_gateway.application.services import ApplicationService
from irrrl_gateway.core.dependencies import get_application_service
from irrrl_gateway.domain.entities import ApplicationStatus
from irrrl_gateway.service.underwriting import is_terminal
from irrrl_gateway.presentation.schemas import (
    ApplicationListResponseSchema,
    ApplicationResponseSchema,
    CreateApplicationSchema,
    DocumentSchema,
    DocumentsResponseSchema,
    EligibilityResponseSchema,
    ErrorResponseSchema,
    FundingFeeResponseSchema,
    NextStatusesResponseSchema,
    NtbResponseSchema,
    NtbResultSchema,
    TransitionRequestSchema,
    TransitionResponseSchema,
)

applications_router = APIRouter(
    prefix="/applications",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        404: {"model": ErrorResponseSchema, "description": "Application not found"},
    },
)

Service = Annotated[ApplicationService, Depends(get_application_service)]


def _transition_response(response: TransitionResponse):
    body = TransitionResponseSchema(**asdict(response))
    if not response.accepted:
        return JSONResponse(status_code=409, content=body.model_dump(mode="json"))
    return body


@applications_router.post(
    "",
    response_model=ApplicationResponseSchema,
    status_code=201,
    summary="Submit IRRRL Application",
)
async def create_application(
    request: CreateApplicationSchema,
    service: Service,
) -> ApplicationResponseSchema:
    current_loan = None
    if request.current_loan is not None:
        current_loan = CurrentLoanInput(**request.current_loan.model_dump())

    dto = CreateApplicationRequest(
        **request.model_dump(exclude={"current_loan"}),
        current_loan=current_loan,
    )
    response = await service.create_application(dto)
    return ApplicationResponseSchema(**asdict(response))


@applications_router.get(
    "",
    response_model=ApplicationListResponseSchema,
    summary="List Applications By Status",
    description="Applications currently in `status`, oldest first.",
)
async def list_applications(
    service: Service,
    status: ApplicationStatus = Query(...),
    limit: int = Query(50, ge=1, le=200),
) -> ApplicationListResponseSchema:
    responses = await service.list_applications(status, limit=limit)
    return ApplicationListResponseSchema(
        status=status.value,
        count=len(responses),
        applications=[ApplicationResponseSchema(**asdict(r)) for r in responses],
    )


@applications_router.get(
    "/{application_id}",
    response_model=ApplicationResponseSchema,
    summary="Get Application",
)
async def get_application(
    application_id: UUID,
    service: Service,
) -> ApplicationResponseSchema:
    response = await service.get_application(application_id)
    return ApplicationResponseSchema(**asdict(response))


@applications_router.post(
    "/{application_id}/ntb",
    response_model=NtbResponseSchema,
    summary="Calculate Net Tangible Benefit",
    description="""
    Run the VA Net Tangible Benefit test (recoupment, rate reduction and
    payment reduction) and store the result, replacing any prior one.
    """,
    responses={
        422: {"model": ErrorResponseSchema, "description": "Current loan not on file"},
    },
)
async def calculate_ntb(
    application_id: UUID,
    service: Service,
) -> NtbResponseSchema:
    response = await service.calculate_ntb(application_id)
    return NtbResponseSchema(
        application_id=response.application_id,
        result=NtbResultSchema(
            **response.result.to_dict(),
            failed_tests=response.result.failed_tests(),
        ),
        explanation=response.explanation,
    )


@applications_router.post(
    "/{application_id}/eligibility",
    response_model=EligibilityResponseSchema,
    summary="Verify IRRRL Eligibility",
)
async def verify_eligibility(
    application_id: UUID,
    service: Service,
) -> EligibilityResponseSchema:
    response = await service.verify_eligibility(application_id)
    return EligibilityResponseSchema(
        application_id=response.application_id,
        **response.report.to_dict(),
    )


@applications_router.post(
    "/{application_id}/transitions",
    response_model=TransitionResponseSchema,
    summary="Change Application Status",
    responses={
        409: {"model": TransitionResponseSchema, "description": "Transition not allowed"},
    },
)
async def transition(
    application_id: UUID,
    request: TransitionRequestSchema,
    service: Service,
):
    response = await service.transition(
        application_id,
        TransitionRequest(
            target_status=request.target_status,
            actor=request.actor,
            note=request.note,
        ),
    )
    return _transition_response(response)


@applications_router.post(
    "/{application_id}/workflow/{step}",
    response_model=TransitionResponseSchema,
    summary="Run Workflow Step",
    description="""
    Run a named workflow step: start-ai-analysis, complete-ai-analysis,
    start-document-gathering, complete-document-gathering or
    prepare-for-underwriter.
    """,
    responses={
        409: {"model": TransitionResponseSchema, "description": "Step not allowed"},
    },
)
async def run_workflow_step(
    application_id: UUID,
    step: str,
    service: Service,
):
    response = await service.run_workflow_step(application_id, step)
    return _transition_response(response)


@applications_router.get(
    "/{application_id}/next-statuses",
    response_model=NextStatusesResponseSchema,
    summary="List Allowed Next Statuses",
)
async def next_statuses(
    application_id: UUID,
    service: Service,
) -> NextStatusesResponseSchema:
    application = await service.get_application(application_id)
    statuses = await service.next_statuses(application_id)
    return NextStatusesResponseSchema(
        application_id=application.application_id,
        status=application.status,
        next_statuses=[status.value for status in statuses],
        is_terminal=is_terminal(ApplicationStatus(application.status)),
    )


@applications_router.get(
    "/{application_id}/documents",
    response_model=DocumentsResponseSchema,
    summary="List Required Documents",
)
async def required_documents(
    application_id: UUID,
    service: Service,
) -> DocumentsResponseSchema:
    documents = await service.required_documents(application_id)
    return DocumentsResponseSchema(
        application_id=str(application_id),
        required_documents=[
            DocumentSchema(document_type=doc.value, display_name=doc.display_name)
            for doc in documents
        ],
    )


@applications_router.get(
    "/{application_id}/funding-fee",
    response_model=FundingFeeResponseSchema,
    summary="Calculate VA Funding Fee",
)
async def funding_fee(
    application_id: UUID,
    service: Service,
) -> FundingFeeResponseSchema:
    fee = await service.funding_fee(application_id)
    return FundingFeeResponseSchema(
        application_id=str(application_id),
        percentage=fee.percentage,
        amount=fee.amount,
        waived=fee.waived,
    )
