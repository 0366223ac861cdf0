"""Progressive tax evaluation over a configured bracket table.

This module provides pure functions for:
- Validating a bracket table (contiguous, sorted, progressive)
- Computing tax liability from taxable income
- Producing a per-bracket breakdown for payslip display

Tax is exact; rounding to the currency unit happens in the deduction step.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.payroll.errors import InvalidAmountError, PayrollConfigurationError
from src.payroll.models import BracketLine, TaxBracket, TaxResult
from src.payroll.money import ZERO, Money, MoneyLike, to_money


def validate_brackets(brackets: Sequence[TaxBracket]) -> None:
    """Check that a bracket table describes a progressive schedule.

    Args:
        brackets: Brackets ordered from lowest to highest.

    Raises:
        PayrollConfigurationError: If the table is empty, does not start at 0,
            has gaps, overlaps or misordering, has no single trailing
            unbounded bracket, or rates are not strictly increasing.
    """
    if not brackets:
        raise PayrollConfigurationError(
            "Bracket table is empty", errors=["At least one bracket is required"]
        )

    errors: list[str] = []

    if brackets[0].lower_bound != ZERO:
        errors.append(
            f"Bracket 0 must start at 0, starts at {brackets[0].lower_bound}"
        )

    for index, bracket in enumerate(brackets):
        is_last = index == len(brackets) - 1
        if bracket.is_unbounded and not is_last:
            errors.append(f"Bracket {index} is unbounded but is not the last bracket")
        if is_last and not bracket.is_unbounded:
            errors.append(f"Last bracket {index} must be unbounded")

        if index == 0:
            continue

        previous = brackets[index - 1]
        if previous.upper_bound is not None and bracket.lower_bound != previous.upper_bound:
            errors.append(
                f"Bracket {index} starts at {bracket.lower_bound}, "
                f"expected {previous.upper_bound}"
            )
        if bracket.rate <= previous.rate:
            errors.append(
                f"Bracket {index} rate {bracket.rate} must exceed previous rate "
                f"{previous.rate}"
            )

    if errors:
        raise PayrollConfigurationError(
            f"Invalid bracket table: {errors[0]}", errors=errors
        )


def calculate_tax(taxable_income: MoneyLike, brackets: Sequence[TaxBracket]) -> TaxResult:
    """Calculate tax liability with a per-bracket breakdown.

    For each bracket the taxed amount is
    ``max(0, min(income, upper_bound) - lower_bound)``; the loop stops at the
    first bracket starting at or above the income.

    Args:
        taxable_income: Income after insurance and reliefs (>= 0).
        brackets: Progressive bracket table.

    Returns:
        TaxResult with tax, breakdown lines and effective rate.

    Raises:
        InvalidAmountError: If taxable income is negative or not a number.
        PayrollConfigurationError: If the bracket table is malformed.

    Example:
        >>> result = calculate_tax(Decimal("10000000"), VN_PIT_BRACKETS)
        >>> result.tax
        Decimal('750000.00')
    """
    income = to_money(taxable_income, "taxable_income")
    if income < ZERO:
        raise InvalidAmountError(f"taxable_income must be >= 0, got {income}")

    validate_brackets(brackets)

    tax = ZERO
    lines: list[BracketLine] = []

    for bracket in brackets:
        if income <= bracket.lower_bound:
            break

        if bracket.upper_bound is None:
            top = income
        else:
            top = min(income, bracket.upper_bound)

        taxed_amount = max(ZERO, top - bracket.lower_bound)
        tax_in_bracket = taxed_amount * bracket.rate
        tax += tax_in_bracket
        lines.append(
            BracketLine(bracket=bracket, taxed_amount=taxed_amount, tax=tax_in_bracket)
        )

    if income > ZERO:
        effective_rate = tax / income
    else:
        effective_rate = ZERO

    return TaxResult(
        taxable_income=income,
        tax=tax,
        lines=tuple(lines),
        effective_rate=effective_rate,
    )


def compute_tax(taxable_income: MoneyLike, brackets: Sequence[TaxBracket]) -> Money:
    """Compute tax liability for taxable income under a progressive schedule.

    Args:
        taxable_income: Income after insurance and reliefs (>= 0).
        brackets: Progressive bracket table.

    Returns:
        Exact tax amount.
    """
    return calculate_tax(taxable_income, brackets).tax

