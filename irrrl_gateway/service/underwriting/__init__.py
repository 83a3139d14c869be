"""
IRRRL Decision Engine: amortization math, Net Tangible Benefit,
eligibility verification and the application status workflow.
"""

from .settings import VAPolicySettings, va_policy
from .amortization import (
    monthly_payment,
    total_interest,
    recoupment_period,
    break_even_months,
)
from .ntb import calculate_ntb, explain_ntb
from .eligibility import verify_eligibility
from .fees import FundingFee, calculate_funding_fee, qualifies_for_fee_waiver
from .checklist import PolicyDocumentChecklist
from .workflow import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    TransitionResult,
    bypasses_manual_review,
    can_transition,
    valid_next_statuses,
    is_terminal,
    reachable_statuses,
    request_transition,
    start_ai_analysis,
    complete_ai_analysis,
    start_document_gathering,
    complete_document_gathering,
    prepare_for_underwriter,
    submit,
)

__all__ = [
    # Settings
    "VAPolicySettings",
    "va_policy",
    # Amortization
    "monthly_payment",
    "total_interest",
    "recoupment_period",
    "break_even_months",
    # Net Tangible Benefit
    "calculate_ntb",
    "explain_ntb",
    # Eligibility
    "verify_eligibility",
    # Funding Fee
    "FundingFee",
    "calculate_funding_fee",
    "qualifies_for_fee_waiver",
    # Documents
    "PolicyDocumentChecklist",
    # Workflow
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "TransitionResult",
    "bypasses_manual_review",
    "can_transition",
    "valid_next_statuses",
    "is_terminal",
    "reachable_statuses",
    "request_transition",
    "start_ai_analysis",
    "complete_ai_analysis",
    "start_document_gathering",
    "complete_document_gathering",
    "prepare_for_underwriter",
    "submit",
]
