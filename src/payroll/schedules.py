"""Payroll schedules: bracket tables bundled with insurance rates.

This module centralizes the statutory values used by the payroll engine so
that bracket thresholds and rates are configuration rather than code.

Example:
    >>> from src.payroll.schedules import get_schedule
    >>> schedule = get_schedule("vn-2020")
    >>> print(schedule.rates.personal_relief)
    11000000
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.payroll.brackets import validate_brackets
from src.payroll.errors import PayrollConfigurationError
from src.payroll.models import InsuranceRateConfig, TaxBracket


class PayrollSchedule(BaseModel):
    """A complete payroll configuration for one jurisdiction and period.

    Validation runs the bracket table checks, so an instance always holds a
    contiguous, progressive table.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Registry key, e.g. 'vn-2020'")
    currency: str = Field(default="VND", description="Currency label for payslips")
    brackets: tuple[TaxBracket, ...] = Field(description="Progressive bracket table")
    rates: InsuranceRateConfig = Field(description="Insurance rates and reliefs")

    @model_validator(mode="after")
    def validate_bracket_table(self) -> PayrollSchedule:
        """Reject tables that are not contiguous and progressive."""
        validate_brackets(self.brackets)
        return self


# Monthly personal income tax brackets (VND), Law on PIT as amended
VN_PIT_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(lower_bound=Decimal("0"), upper_bound=Decimal("5000000"), rate=Decimal("0.05")),
    TaxBracket(lower_bound=Decimal("5000000"), upper_bound=Decimal("10000000"), rate=Decimal("0.10")),
    TaxBracket(lower_bound=Decimal("10000000"), upper_bound=Decimal("18000000"), rate=Decimal("0.15")),
    TaxBracket(lower_bound=Decimal("18000000"), upper_bound=Decimal("32000000"), rate=Decimal("0.20")),
    TaxBracket(lower_bound=Decimal("32000000"), upper_bound=Decimal("52000000"), rate=Decimal("0.25")),
    TaxBracket(lower_bound=Decimal("52000000"), upper_bound=Decimal("80000000"), rate=Decimal("0.30")),
    TaxBracket(lower_bound=Decimal("80000000"), upper_bound=None, rate=Decimal("0.35")),
)

# Employee contributions and family reliefs (Resolution 954/2020)
VN_INSURANCE_RATES = InsuranceRateConfig(
    social_insurance_rate=Decimal("0.08"),
    health_insurance_rate=Decimal("0.015"),
    unemployment_insurance_rate=Decimal("0.01"),
    personal_relief=Decimal("11000000"),
    dependent_relief=Decimal("4400000"),
)

VN_2020 = PayrollSchedule(
    name="vn-2020",
    currency="VND",
    brackets=VN_PIT_BRACKETS,
    rates=VN_INSURANCE_RATES,
)

# Registry of built-in schedules
PAYROLL_SCHEDULES: dict[str, PayrollSchedule] = {
    VN_2020.name: VN_2020,
}


def get_schedule(name: str) -> PayrollSchedule:
    """Get a built-in payroll schedule by name.

    Args:
        name: Registry key (case-insensitive), e.g. "vn-2020".

    Returns:
        PayrollSchedule for the requested name.

    Raises:
        PayrollConfigurationError: If no schedule is registered under the name.
    """
    key = name.strip().lower()
    if key not in PAYROLL_SCHEDULES:
        available = sorted(PAYROLL_SCHEDULES.keys())
        raise PayrollConfigurationError(
            f"No payroll schedule named {name!r}. Available schedules: {available}"
        )
    return PAYROLL_SCHEDULES[key]
