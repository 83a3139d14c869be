"""Application-related Pydantic schemas."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from irrrl_gateway.domain.entities import ApplicationType, LoanType


class CurrentLoanSchema(BaseModel):
    """The borrower's existing VA loan."""

    current_balance: Decimal = Field(
        ..., gt=0, max_digits=14, decimal_places=2, examples=["200000.00"]
    )
    interest_rate: Decimal = Field(
        ...,
        ge=0,
        le=100,
        max_digits=7,
        decimal_places=3,
        description="Annual rate in percent",
        examples=["6.5"],
    )
    original_term_months: int = Field(360, gt=0)
    remaining_term_months: int = Field(..., gt=0, examples=[330])
    monthly_principal_and_interest: Decimal = Field(
        ...,
        ge=0,
        max_digits=14,
        decimal_places=2,
        description="Actual P&I payment on the existing loan",
        examples=["1264.14"],
    )
    loan_type: LoanType = LoanType.FIXED_RATE
    monthly_property_tax: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    monthly_insurance: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    monthly_pmi: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    current_on_payments: bool = True
    late_payments_last_12_months: int = Field(0, ge=0)
    late_payments_over_30_days: int = Field(0, ge=0)
    last_late_payment_date: Optional[date] = None
    is_va_loan: bool = True
    loan_number: str = Field("", max_length=50)
    lender: str = Field("", max_length=255)

    @model_validator(mode="after")
    def check_remaining_term(self) -> "CurrentLoanSchema":
        if self.remaining_term_months > self.original_term_months:
            raise ValueError("remaining_term_months cannot exceed original_term_months")
        return self


class CreateApplicationSchema(BaseModel):
    """Schema for POST /v1/applications request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "application_type": "rate_and_term",
                    "first_name": "Jordan",
                    "last_name": "Rivera",
                    "email": "jordan.rivera@example.com",
                    "street_address": "12 Elm St",
                    "city": "Dayton",
                    "state": "OH",
                    "zip_code": "45402",
                    "currently_occupied": True,
                    "requested_amount": "200000",
                    "requested_rate": "6.0",
                    "requested_term_months": 360,
                    "total_loan_costs": "6000",
                    "current_loan": {
                        "current_balance": "200000",
                        "interest_rate": "7.0",
                        "remaining_term_months": 340,
                        "monthly_principal_and_interest": "1449.10",
                    },
                }
            ]
        }
    )

    application_type: ApplicationType = ApplicationType.RATE_AND_TERM
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field("", max_length=255)
    street_address: str = Field("", max_length=255)
    city: str = Field("", max_length=100)
    state: str = Field("", max_length=2)
    zip_code: str = Field("", max_length=10)
    currently_occupied: bool = False
    previously_occupied: bool = False
    has_disability_rating: bool = False
    disability_percentage: Optional[int] = Field(None, ge=0, le=100)
    requested_amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    requested_rate: Decimal = Field(..., ge=0, le=100, max_digits=7, decimal_places=3)
    requested_term_months: int = Field(..., gt=0, le=480)
    requested_loan_type: LoanType = LoanType.FIXED_RATE
    total_loan_costs: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    cash_out_amount: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    cash_out_purpose: Optional[str] = None
    current_loan: Optional[CurrentLoanSchema] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty or whitespace")
        return v.strip()


class StatusChangeSchema(BaseModel):
    from_status: str
    to_status: str
    changed_at: str
    changed_by: Optional[str] = None
    note: Optional[str] = None


class ApplicationResponseSchema(BaseModel):
    """Schema for an application in responses."""

    application_id: str
    application_number: str
    application_type: str
    status: str
    borrower_name: str
    requested_amount: Decimal
    requested_rate: Decimal
    requested_term_months: int
    total_loan_costs: Decimal
    eligibility_verified: bool
    passes_ntb: Optional[bool] = Field(None, description="Null until NTB is calculated")
    submitted_at: Optional[str] = None
    approved_at: Optional[str] = None
    decline_reason: Optional[str] = None
    status_history: List[StatusChangeSchema] = Field(default_factory=list)


class ApplicationListResponseSchema(BaseModel):
    status: str
    count: int
    applications: List[ApplicationResponseSchema]


class NextStatusesResponseSchema(BaseModel):
    application_id: str
    status: str
    next_statuses: List[str]
    is_terminal: bool


class DocumentSchema(BaseModel):
    document_type: str
    display_name: str


class DocumentsResponseSchema(BaseModel):
    application_id: str
    required_documents: List[DocumentSchema]


class FundingFeeResponseSchema(BaseModel):
    application_id: str
    percentage: Decimal
    amount: Decimal
    waived: bool
