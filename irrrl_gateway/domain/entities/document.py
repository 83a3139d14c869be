"""Document types used by the required-document checklist."""

from enum import Enum


class DocumentType(str, Enum):
    """Documents collected from the veteran during an IRRRL."""

    VA_LOAN_STATEMENT = "va_loan_statement"
    CERTIFICATE_OF_ELIGIBILITY = "certificate_of_eligibility"
    PHOTO_ID = "photo_id"
    HOMEOWNERS_INSURANCE = "homeowners_insurance"
    PROPERTY_TAX_INFO = "property_tax_info"

    # Cash-out income documentation
    PAY_STUB = "pay_stub"
    W2 = "w2"
    TAX_RETURN = "tax_return"
    BANK_STATEMENT = "bank_statement"
    APPRAISAL = "appraisal"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    DocumentType.VA_LOAN_STATEMENT: "Current VA Loan Statement",
    DocumentType.CERTIFICATE_OF_ELIGIBILITY: "Certificate of Eligibility (COE)",
    DocumentType.PHOTO_ID: "Photo ID",
    DocumentType.HOMEOWNERS_INSURANCE: "Homeowners Insurance Policy",
    DocumentType.PROPERTY_TAX_INFO: "Property Tax Information",
    DocumentType.PAY_STUB: "Recent Pay Stubs (Last 30 days)",
    DocumentType.W2: "W-2 Forms (Last 2 years)",
    DocumentType.TAX_RETURN: "Tax Returns (Last 2 years)",
    DocumentType.BANK_STATEMENT: "Bank Statements (Last 2 months)",
    DocumentType.APPRAISAL: "Property Appraisal",
}
