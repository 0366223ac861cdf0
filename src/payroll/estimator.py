"""Net-to-gross salary estimation.

Net salary is continuous and non-decreasing in gross salary with slope in
(0, 1): every extra unit of gross pay adds less than one unit of net pay.
The estimator therefore refines its guess by adding the remaining shortfall
to gross pay, ``gross += target - net``, which contracts towards the
solution at a geometric rate. With the built-in schedule the slope never
drops below about 0.58, so each step removes at least 58% of the gap.

The iteration cap bounds latency for configurations whose marginal rates
approach 100%. Running out of iterations is not an error: the closest
estimate reached is returned with ``converged=False``.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from src.core.logging import get_logger
from src.payroll.deductions import compute_net
from src.payroll.errors import InvalidAmountError
from src.payroll.models import GrossEstimate, InsuranceRateConfig, TaxBracket
from src.payroll.money import ZERO, Money, MoneyLike, quantize_money, to_money

logger = get_logger(__name__)

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = Decimal("1000")


def estimate_gross_detailed(
    target_net: MoneyLike,
    dependents: int,
    rates: InsuranceRateConfig,
    brackets: Sequence[TaxBracket],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: MoneyLike = DEFAULT_TOLERANCE,
) -> GrossEstimate:
    """Estimate the gross salary producing a target net salary.

    Args:
        target_net: Desired take-home pay.
        dependents: Number of registered dependents.
        rates: Insurance rates and relief amounts.
        brackets: Progressive bracket table.
        max_iterations: Maximum number of net computations.
        tolerance: Accepted absolute gap between target and computed net.

    Returns:
        GrossEstimate with the best gross found and convergence details.

    Raises:
        InvalidAmountError: If max_iterations < 1, tolerance <= 0 or the
            target is not a usable amount.
        PayrollConfigurationError: If the bracket table is malformed.
    """
    target = quantize_money(to_money(target_net, "target_net"), field_name="target_net")
    tolerance = to_money(tolerance, "tolerance")
    if max_iterations < 1:
        raise InvalidAmountError(f"max_iterations must be >= 1, got {max_iterations}")
    if tolerance <= ZERO:
        raise InvalidAmountError(f"tolerance must be > 0, got {tolerance}")

    if target <= ZERO:
        if target < ZERO:
            logger.warning(
                "payroll_input_clamped", fields=["target_net"], target_net=target
            )
        return GrossEstimate(
            target_net=target,
            gross_salary=ZERO,
            net_salary=ZERO,
            iterations=0,
            converged=abs(target) < tolerance,
        )

    if dependents < 0:
        logger.warning("payroll_input_clamped", fields=["dependents"], dependents=dependents)
        dependents = 0

    gross = target
    best_gross = gross
    best_net = ZERO
    best_gap: Money | None = None

    for iteration in range(1, max_iterations + 1):
        net = compute_net(gross, dependents, rates, brackets).net_salary
        difference = target - net
        gap = abs(difference)

        if best_gap is None or gap < best_gap:
            best_gross, best_net, best_gap = gross, net, gap

        if gap < tolerance:
            logger.debug(
                "gross_estimate_converged",
                target_net=target,
                gross_salary=gross,
                iterations=iteration,
            )
            return GrossEstimate(
                target_net=target,
                gross_salary=gross,
                net_salary=net,
                iterations=iteration,
                converged=True,
            )

        gross = max(ZERO, gross + difference)

    logger.warning(
        "gross_estimate_not_converged",
        target_net=target,
        gross_salary=best_gross,
        net_salary=best_net,
        iterations=max_iterations,
        tolerance=tolerance,
    )
    return GrossEstimate(
        target_net=target,
        gross_salary=best_gross,
        net_salary=best_net,
        iterations=max_iterations,
        converged=False,
    )


def estimate_gross(
    target_net: MoneyLike,
    dependents: int,
    rates: InsuranceRateConfig,
    brackets: Sequence[TaxBracket],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: MoneyLike = DEFAULT_TOLERANCE,
) -> Money:
    """Estimate gross salary from a target net salary.

    Treat the result as approximate when the schedule converges slowly; see
    estimate_gross_detailed for the convergence flag.
    """
    return estimate_gross_detailed(
        target_net,
        dependents,
        rates,
        brackets,
        max_iterations=max_iterations,
        tolerance=tolerance,
    ).gross_salary
