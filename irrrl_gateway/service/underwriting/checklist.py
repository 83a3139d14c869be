"""
Required Document Checklist for IRRRL applications.

A rate-and-term IRRRL is a streamlined refinance with a short, fixed
checklist. Cash-out refinances add full income documentation, and large
cash-out amounts also require tax returns.
"""

from typing import List

from irrrl_gateway.domain.entities import Application, DocumentType
from irrrl_gateway.domain.interfaces import DocumentChecklistProvider

from .settings import VAPolicySettings, va_policy

STREAMLINE_DOCUMENTS = (
    DocumentType.VA_LOAN_STATEMENT,
    DocumentType.CERTIFICATE_OF_ELIGIBILITY,
    DocumentType.PHOTO_ID,
    DocumentType.HOMEOWNERS_INSURANCE,
    DocumentType.PROPERTY_TAX_INFO,
)

CASH_OUT_INCOME_DOCUMENTS = (
    DocumentType.PAY_STUB,
    DocumentType.W2,
    DocumentType.BANK_STATEMENT,
)


class PolicyDocumentChecklist(DocumentChecklistProvider):
    """Checklist derived from the application type and cash-out amount."""

    def __init__(self, settings: VAPolicySettings = va_policy):
        self._settings = settings

    def required_documents(self, application: Application) -> List[DocumentType]:
        docs = list(STREAMLINE_DOCUMENTS)

        if application.is_cash_out:
            docs.extend(CASH_OUT_INCOME_DOCUMENTS)
            if application.cash_out_amount > self._settings.tax_return_cash_out_threshold:
                docs.append(DocumentType.TAX_RETURN)

        return docs


def additional_documents(
    application: Application,
    checklist: DocumentChecklistProvider,
) -> List[DocumentType]:
    """Documents required beyond the streamlined IRRRL set."""
    return [
        doc
        for doc in checklist.required_documents(application)
        if doc not in STREAMLINE_DOCUMENTS
    ]
