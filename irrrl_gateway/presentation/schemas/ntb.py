"""Net Tangible Benefit Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class NtbResultSchema(BaseModel):
    """Schema for a Net Tangible Benefit result."""

    current_rate: Decimal
    current_monthly_payment: Decimal
    current_remaining_term_months: int
    new_rate: Decimal
    new_monthly_payment: Decimal
    new_term_months: int
    rate_reduction: Decimal
    monthly_savings: Decimal
    total_loan_costs: Decimal
    recoupment_months: Optional[int] = Field(
        None,
        description="Months to recoup costs; null when costs are never recouped",
    )
    break_even_months: Decimal
    lifetime_savings: Decimal
    total_interest_savings: Decimal
    term_reduction_months: int
    equity_growth_acceleration: Decimal
    meets_recoupment: bool
    meets_rate_reduction: bool
    meets_payment_reduction: bool
    passes_ntb: bool
    failed_tests: List[str]
    calculated_at: datetime
    calculated_by: str


class NtbResponseSchema(BaseModel):
    """Schema for POST /v1/applications/{id}/ntb response body."""

    application_id: str
    result: NtbResultSchema
    explanation: str
