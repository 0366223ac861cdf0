"""Payroll calculator bound to one schedule.

Callers that compute many payslips against the same configuration use this
instead of passing the bracket table and rates on every call.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from src.core.config import Settings, settings
from src.core.logging import get_logger, payroll_run_context
from src.payroll.brackets import calculate_tax
from src.payroll.deductions import compute_net
from src.payroll.estimator import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, estimate_gross_detailed
from src.payroll.loader import get_configured_schedule
from src.payroll.models import DeductionBreakdown, GrossEstimate, TaxResult
from src.payroll.money import ZERO, MoneyLike
from src.payroll.schedules import PayrollSchedule

logger = get_logger(__name__)


@dataclass(frozen=True)
class PayrollCalculator:
    """Gross/net computations against a fixed schedule.

    Attributes:
        schedule: Brackets, insurance rates and reliefs to apply.
        max_iterations: Iteration cap for net-to-gross estimation.
        tolerance: Accepted gap when estimating gross from net.
    """

    schedule: PayrollSchedule
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: Decimal = DEFAULT_TOLERANCE

    @classmethod
    def from_settings(cls, app_settings: Settings | None = None) -> PayrollCalculator:
        """Create a calculator from application settings.

        Raises:
            PayrollConfigurationError: If the configured schedule is invalid.
        """
        app_settings = app_settings or settings
        return cls(
            schedule=get_configured_schedule(app_settings),
            max_iterations=app_settings.estimator_max_iterations,
            tolerance=app_settings.estimator_tolerance,
        )

    def tax(self, taxable_income: MoneyLike) -> TaxResult:
        """Tax with per-bracket breakdown."""
        return calculate_tax(taxable_income, self.schedule.brackets)

    def net(self, gross_salary: MoneyLike, dependents: int = 0) -> DeductionBreakdown:
        """Itemized gross-to-net computation."""
        return compute_net(
            gross_salary, dependents, self.schedule.rates, self.schedule.brackets
        )

    def gross(self, target_net: MoneyLike, dependents: int = 0) -> GrossEstimate:
        """Estimate the gross salary producing target_net."""
        return estimate_gross_detailed(
            target_net,
            dependents,
            self.schedule.rates,
            self.schedule.brackets,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
        )

    def run_payroll(
        self,
        payslips: Iterable[tuple[MoneyLike, int]],
        run_id: str | None = None,
        caller: str | None = None,
    ) -> list[DeductionBreakdown]:
        """Compute a batch of payslips as one correlated payroll run.

        Every log event emitted while the batch runs, including clamping
        warnings, carries the run id.

        Args:
            payslips: (gross_salary, dependents) pairs.
            run_id: Run identifier; a random one is generated when omitted.
            caller: Optional name of the component driving the run.

        Returns:
            One breakdown per payslip, in input order.
        """
        run_id = run_id or uuid.uuid4().hex
        with payroll_run_context(run_id, caller):
            logger.info("payroll_run_started", schedule=self.schedule.name)
            results = [
                self.net(gross_salary, dependents)
                for gross_salary, dependents in payslips
            ]
            logger.info(
                "payroll_run_completed",
                schedule=self.schedule.name,
                payslips=len(results),
                total_net=sum((r.net_salary for r in results), ZERO),
            )
        return results
