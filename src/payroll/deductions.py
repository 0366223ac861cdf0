"""Gross-to-net salary computation.

Derives the three statutory insurance withholdings and the personal and
dependent reliefs from a gross salary, applies the progressive tax schedule to
the resulting taxable income and returns an itemized breakdown.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.core.logging import get_logger
from src.payroll.brackets import compute_tax
from src.payroll.models import DeductionBreakdown, InsuranceRateConfig, TaxBracket
from src.payroll.money import ZERO, MoneyLike, quantize_money, to_money

logger = get_logger(__name__)


def compute_net(
    gross_salary: MoneyLike,
    dependents: int,
    rates: InsuranceRateConfig,
    brackets: Sequence[TaxBracket],
) -> DeductionBreakdown:
    """Compute net salary and itemized deductions from gross salary.

    Gross salary is first rounded to the currency unit, so sub-unit amounts
    never leak into net pay. Negative gross salary or dependent count is
    floored to zero instead of rejected; the floored inputs are listed in
    ``clamped_inputs``.

    Insurance withholdings and tax are rounded to the currency unit and net
    salary is derived by subtraction, so
    ``net_salary + total_insurance + tax == gross_salary`` exactly.

    Args:
        gross_salary: Gross salary for the period.
        dependents: Number of registered dependents.
        rates: Insurance rates and relief amounts.
        brackets: Progressive bracket table.

    Returns:
        DeductionBreakdown for the period.

    Raises:
        InvalidAmountError: If gross salary is not a number or is too large
            to round to the currency unit.
        PayrollConfigurationError: If the bracket table is malformed.

    Example:
        >>> result = compute_net(Decimal("50000000"), 0, VN_INSURANCE_RATES, VN_PIT_BRACKETS)
        >>> result.net_salary
        Decimal('39562500')
    """
    gross = quantize_money(to_money(gross_salary, "gross_salary"), field_name="gross_salary")
    clamped: list[str] = []

    if gross < ZERO:
        clamped.append("gross_salary")
    if dependents < 0:
        clamped.append("dependents")

    if clamped:
        logger.warning(
            "payroll_input_clamped",
            fields=clamped,
            gross_salary=gross,
            dependents=dependents,
        )
        gross = max(ZERO, gross)
        dependents = max(0, dependents)

    social = quantize_money(gross * rates.social_insurance_rate)
    health = quantize_money(gross * rates.health_insurance_rate)
    unemployment = quantize_money(gross * rates.unemployment_insurance_rate)
    total_insurance = social + health + unemployment

    personal_relief = rates.personal_relief
    dependent_relief = dependents * rates.dependent_relief
    total_relief = personal_relief + dependent_relief

    taxable_income = max(ZERO, gross - total_insurance - total_relief)
    tax = quantize_money(compute_tax(taxable_income, brackets))

    net_salary = max(ZERO, gross - total_insurance - tax)

    return DeductionBreakdown(
        gross_salary=gross,
        social_insurance=social,
        health_insurance=health,
        unemployment_insurance=unemployment,
        personal_relief=personal_relief,
        dependent_relief=dependent_relief,
        tax=tax,
        taxable_income=taxable_income,
        net_salary=net_salary,
        clamped_inputs=tuple(clamped),
    )
