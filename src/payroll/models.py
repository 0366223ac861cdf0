"""Data models for payroll computation.

Configuration inputs are validated Pydantic models:
- TaxBracket: One progressive income band and its marginal rate
- InsuranceRateConfig: Statutory insurance rates and relief amounts

Computation results are frozen dataclasses, produced fresh on every call:
- TaxResult / BracketLine: Tax liability with per-bracket breakdown
- DeductionBreakdown: Itemized withholdings, reliefs and net salary
- GrossEstimate: Outcome of net-to-gross estimation

All monetary fields use Decimal for precision.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from src.payroll.money import ZERO, Money, to_money


# =============================================================================
# Configuration
# =============================================================================


class TaxBracket(BaseModel):
    """Single band of a progressive tax schedule.

    Income between ``lower_bound`` and ``upper_bound`` is taxed at ``rate``.
    An ``upper_bound`` of None marks the open-ended top bracket.
    """

    model_config = ConfigDict(frozen=True)

    lower_bound: Decimal = Field(description="Start of the band (inclusive)")
    upper_bound: Decimal | None = Field(
        default=None, description="End of the band, None for unbounded"
    )
    rate: Decimal = Field(description="Marginal rate as a fraction, e.g. 0.05")

    @field_validator("lower_bound", "upper_bound", "rate", mode="before")
    @classmethod
    def coerce_decimal(cls, v: object, info: ValidationInfo) -> object:
        """Convert numeric input to Decimal without passing through binary floats."""
        if v is None:
            return None
        return to_money(v, info.field_name)

    @field_validator("lower_bound")
    @classmethod
    def validate_lower_bound(cls, v: Decimal) -> Decimal:
        """Lower bound cannot be negative."""
        if v < ZERO:
            raise ValueError(f"lower_bound must be >= 0, got {v}")
        return v

    @field_validator("rate")
    @classmethod
    def validate_rate(cls, v: Decimal) -> Decimal:
        """Rate must satisfy 0 <= rate < 1."""
        if v < ZERO or v >= Decimal("1"):
            raise ValueError(f"rate must be 0 <= rate < 1, got {v}")
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> TaxBracket:
        """Upper bound must lie above lower bound."""
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ValueError(
                f"upper_bound ({self.upper_bound}) must exceed lower_bound ({self.lower_bound})"
            )
        return self

    @property
    def is_unbounded(self) -> bool:
        """Whether this is the open-ended top bracket."""
        return self.upper_bound is None


class InsuranceRateConfig(BaseModel):
    """Employee insurance contribution rates and tax relief amounts."""

    model_config = ConfigDict(frozen=True)

    social_insurance_rate: Decimal = Field(description="Social insurance rate")
    health_insurance_rate: Decimal = Field(description="Health insurance rate")
    unemployment_insurance_rate: Decimal = Field(
        description="Unemployment insurance rate"
    )
    personal_relief: Decimal = Field(description="Fixed relief for the taxpayer")
    dependent_relief: Decimal = Field(description="Relief per registered dependent")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_decimal(cls, v: object, info: ValidationInfo) -> object:
        """Convert numeric input to Decimal without passing through binary floats."""
        return to_money(v, info.field_name)

    @field_validator(
        "social_insurance_rate", "health_insurance_rate", "unemployment_insurance_rate"
    )
    @classmethod
    def validate_rate(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        """Each rate must satisfy 0 <= rate < 1."""
        if v < ZERO or v >= Decimal("1"):
            raise ValueError(f"{info.field_name} must be 0 <= rate < 1, got {v}")
        return v

    @field_validator("personal_relief", "dependent_relief")
    @classmethod
    def validate_relief(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        """Relief amounts cannot be negative."""
        if v < ZERO:
            raise ValueError(f"{info.field_name} must be >= 0, got {v}")
        return v

    @model_validator(mode="after")
    def validate_total_rate(self) -> InsuranceRateConfig:
        """Combined insurance must leave part of each unit of gross pay."""
        if self.total_insurance_rate >= Decimal("1"):
            raise ValueError(
                f"Combined insurance rate must be < 1, got {self.total_insurance_rate}"
            )
        return self

    @property
    def total_insurance_rate(self) -> Decimal:
        """Sum of social, health and unemployment rates."""
        return (
            self.social_insurance_rate
            + self.health_insurance_rate
            + self.unemployment_insurance_rate
        )


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class BracketLine:
    """Portion of taxable income falling in one bracket.

    Attributes:
        bracket: The bracket this line belongs to.
        taxed_amount: Income taxed at the bracket rate.
        tax: taxed_amount * rate.
    """

    bracket: TaxBracket
    taxed_amount: Money
    tax: Money


@dataclass(frozen=True)
class TaxResult:
    """Result of tax calculation.

    Attributes:
        taxable_income: Income the schedule was applied to.
        tax: Total tax liability (exact, unrounded).
        lines: Per-bracket breakdown, only brackets holding income.
        effective_rate: tax / taxable_income, 0 when income is 0.
    """

    taxable_income: Money
    tax: Money
    lines: tuple[BracketLine, ...]
    effective_rate: Decimal


@dataclass(frozen=True)
class DeductionBreakdown:
    """Itemized gross-to-net computation.

    Reliefs lower taxable income but are not withheld; only insurance and
    tax separate gross from net.

    Attributes:
        gross_salary: Gross salary after clamping.
        social_insurance: Social insurance withholding.
        health_insurance: Health insurance withholding.
        unemployment_insurance: Unemployment insurance withholding.
        personal_relief: Personal relief applied to taxable income.
        dependent_relief: Dependent relief applied to taxable income.
        tax: Personal income tax.
        taxable_income: Income the tax schedule was applied to.
        net_salary: Take-home pay.
        clamped_inputs: Names of inputs that were floored to zero.
    """

    gross_salary: Money
    social_insurance: Money
    health_insurance: Money
    unemployment_insurance: Money
    personal_relief: Money
    dependent_relief: Money
    tax: Money
    taxable_income: Money
    net_salary: Money
    clamped_inputs: tuple[str, ...] = ()

    @property
    def total_insurance(self) -> Money:
        """Sum of the three insurance withholdings."""
        return self.social_insurance + self.health_insurance + self.unemployment_insurance

    @property
    def total_relief(self) -> Money:
        """Personal plus dependent relief."""
        return self.personal_relief + self.dependent_relief

    @property
    def total_deductions(self) -> Money:
        """Amount actually withheld from gross (insurance + tax)."""
        return self.total_insurance + self.tax


@dataclass(frozen=True)
class GrossEstimate:
    """Outcome of estimating gross salary from a target net salary.

    Attributes:
        target_net: Net salary that was asked for.
        gross_salary: Best gross estimate reached.
        net_salary: Net salary produced by gross_salary.
        iterations: Number of net computations performed.
        converged: Whether net_salary landed within tolerance of target_net.
    """

    target_net: Money
    gross_salary: Money
    net_salary: Money
    iterations: int
    converged: bool

    @property
    def difference(self) -> Money:
        """Remaining gap between target and achieved net salary."""
        return self.target_net - self.net_salary
