"""SQLAlchemy ORM models for IRRRL applications.

Timestamps are stored as naive UTC.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

MONEY = Numeric(14, 2)
RATE = Numeric(7, 3)
# Lifetime totals and ratios derived from MONEY inputs
TOTAL = Numeric(20, 2)


class Base(DeclarativeBase):
    pass


class ApplicationModel(Base):
    """Persisted IRRRL application with borrower, property and requested loan."""

    __tablename__ = "irrrl_applications"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    application_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    application_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Borrower
    borrower_first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    borrower_last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    borrower_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    has_disability_rating: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    disability_percentage: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Property
    street_address: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(2), nullable=False, default="")
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    currently_occupied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    previously_occupied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Requested loan
    requested_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    requested_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    requested_term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    requested_loan_type: Mapped[str] = mapped_column(String(50), nullable=False)
    cash_out_amount: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    cash_out_purpose: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_loan_costs: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    # Eligibility
    eligibility_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    eligibility_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Key dates
    created_at: Mapped[datetime] = mapped_column(
        DateTime(),
        nullable=False,
        default=datetime.utcnow,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    decline_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(), nullable=True)
    actual_closing_date: Mapped[datetime | None] = mapped_column(DateTime(), nullable=True)

    current_loan: Mapped["CurrentLoanModel | None"] = relationship(
        "CurrentLoanModel",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
    )
    ntb: Mapped["NetTangibleBenefitModel | None"] = relationship(
        "NetTangibleBenefitModel",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
    )
    status_history: Mapped[list["StatusHistoryModel"]] = relationship(
        "StatusHistoryModel",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="StatusHistoryModel.sequence",
    )


class CurrentLoanModel(Base):
    """Persisted snapshot of the borrower's existing loan."""

    __tablename__ = "irrrl_current_loans"

    application_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("irrrl_applications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    loan_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    lender: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    loan_type: Mapped[str] = mapped_column(String(50), nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    interest_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    original_term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    remaining_term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    monthly_principal_and_interest: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    monthly_property_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    monthly_insurance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    monthly_pmi: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    current_on_payments: Mapped[bool] = mapped_column(Boolean, nullable=False)
    late_payments_last_12_months: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    late_payments_over_30_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_late_payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_va_loan: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    application: Mapped["ApplicationModel"] = relationship(
        "ApplicationModel",
        back_populates="current_loan",
    )


class NetTangibleBenefitModel(Base):
    """Persisted latest Net Tangible Benefit result (one per application)."""

    __tablename__ = "irrrl_net_tangible_benefits"

    application_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("irrrl_applications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    current_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    current_monthly_payment: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    current_remaining_term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    new_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    new_monthly_payment: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    new_term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    rate_reduction: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    monthly_savings: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    total_loan_costs: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    recoupment_months: Mapped[int | None] = mapped_column(Integer, nullable=True)  # NULL = never
    break_even_months: Mapped[Decimal] = mapped_column(TOTAL, nullable=False)
    lifetime_savings: Mapped[Decimal] = mapped_column(TOTAL, nullable=False)
    total_interest_savings: Mapped[Decimal] = mapped_column(TOTAL, nullable=False)
    term_reduction_months: Mapped[int] = mapped_column(Integer, nullable=False)
    equity_growth_acceleration: Mapped[Decimal] = mapped_column(TOTAL, nullable=False)
    meets_recoupment: Mapped[bool] = mapped_column(Boolean, nullable=False)
    meets_rate_reduction: Mapped[bool] = mapped_column(Boolean, nullable=False)
    meets_payment_reduction: Mapped[bool] = mapped_column(Boolean, nullable=False)
    passes_ntb: Mapped[bool] = mapped_column(Boolean, nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    calculated_by: Mapped[str] = mapped_column(String(255), nullable=False)

    application: Mapped["ApplicationModel"] = relationship(
        "ApplicationModel",
        back_populates="ntb",
    )


class StatusHistoryModel(Base):
    """Append-only status transition audit record."""

    __tablename__ = "irrrl_status_history"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    application_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("irrrl_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    from_status: Mapped[str] = mapped_column(String(50), nullable=False)
    to_status: Mapped[str] = mapped_column(String(50), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    changed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    application: Mapped["ApplicationModel"] = relationship(
        "ApplicationModel",
        back_populates="status_history",
    )
