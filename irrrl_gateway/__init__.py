"""
IRRRL Gateway - VA Streamline Refinance Decision Service

A FastAPI-based service that evaluates VA Interest Rate Reduction
Refinance Loan applications: Net Tangible Benefit calculation,
eligibility verification, and the application status workflow.
"""

__version__ = "0.1.0"
