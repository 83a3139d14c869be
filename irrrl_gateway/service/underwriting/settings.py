"""
VA Policy Settings for the IRRRL decision engine.

This module contains the VA thresholds used by the Net Tangible Benefit
test, eligibility verification, funding fee and document checklist.
They default to current VA policy and can be overridden via environment
variables for testing or policy changes.

Environment variables use the VA_ prefix:
    VA_MAX_RECOUPMENT_MONTHS=36
    VA_MIN_RATE_REDUCTION_FIXED_TO_FIXED=0.5
    VA_MAX_CASH_OUT_WITHOUT_FULL_DOCS=6000

Usage:
    from irrrl_gateway.service.underwriting.settings import va_policy

    limit = va_policy.max_recoupment_months

    # Or create custom settings for testing
    custom = VAPolicySettings(max_recoupment_months=24)

The status transition table is not configurable; see workflow.py.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VAPolicySettings(BaseSettings):
    """
    Configurable VA IRRRL policy thresholds.

    All settings can be overridden via environment variables with VA_ prefix.
    Monetary values are in dollars, rates in percentage points.
    """

    model_config = SettingsConfigDict(
        env_prefix="VA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Net Tangible Benefit ===
    max_recoupment_months: int = Field(
        default=36,
        gt=0,
        description="Closing costs must be recouped within this many months",
    )
    min_rate_reduction_fixed_to_fixed: Decimal = Field(
        default=Decimal("0.5"),
        ge=0,
        description="Minimum rate drop in percentage points for fixed-to-fixed",
    )

    # === Payment History ===
    max_late_payments_30_days_last_12_months: int = Field(
        default=0,
        ge=0,
        description="30+ day late payments above this count disqualify",
    )
    late_payment_lookback_months: int = Field(
        default=6,
        ge=0,
        description="Any late payment within this many months disqualifies",
    )

    # === Cash-Out ===
    max_cash_out_without_full_docs: Decimal = Field(
        default=Decimal("6000"),
        ge=0,
        description="Cash-out above this needs full documentation (energy improvements ceiling)",
    )
    tax_return_cash_out_threshold: Decimal = Field(
        default=Decimal("50000"),
        ge=0,
        description="Cash-out above this also requires tax returns",
    )

    # === Funding Fee ===
    funding_fee_percentage: Decimal = Field(
        default=Decimal("0.5"),
        ge=0,
        le=100,
        description="IRRRL funding fee as a percentage of the new loan amount",
    )
    funding_fee_waiver_min_disability: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Disability rating (percent) at or above which the fee is waived",
    )


@lru_cache
def get_va_policy() -> VAPolicySettings:
    """Get cached VA policy settings instance."""
    return VAPolicySettings()


va_policy = get_va_policy()
