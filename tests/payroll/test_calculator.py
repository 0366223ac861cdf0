"""Tests for the schedule-bound payroll calculator."""

from decimal import Decimal
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from src.core.config import Settings
from src.core.logging import caller_ctx, payroll_run_id_ctx
from src.payroll import (
    InvalidAmountError,
    PayrollCalculator,
    PayrollConfigurationError,
    compute_net,
)
from src.payroll.schedules import VN_2020


class TestPayrollCalculator:
    """Tests for PayrollCalculator."""

    def test_net_uses_schedule(self) -> None:
        """net() matches compute_net with the bound schedule."""
        calculator = PayrollCalculator(schedule=VN_2020)
        expected = compute_net(Decimal("50000000"), 1, VN_2020.rates, VN_2020.brackets)
        assert calculator.net(Decimal("50000000"), dependents=1) == expected

    def test_tax_breakdown(self) -> None:
        """tax() exposes per-bracket lines."""
        result = PayrollCalculator(schedule=VN_2020).tax(Decimal("10000000"))
        assert result.tax == Decimal("750000")
        assert len(result.lines) == 2

    def test_gross_round_trip(self) -> None:
        """gross() inverts net() within tolerance."""
        calculator = PayrollCalculator(schedule=VN_2020)
        estimate = calculator.gross(Decimal("30000000"), dependents=2)

        assert estimate.converged is True
        net = calculator.net(estimate.gross_salary, dependents=2).net_salary
        assert abs(net - Decimal("30000000")) < calculator.tolerance

    def test_from_settings_defaults(self) -> None:
        """Default settings select the built-in schedule and estimator limits."""
        calculator = PayrollCalculator.from_settings(Settings())

        assert calculator.schedule is VN_2020
        assert calculator.max_iterations == 100
        assert calculator.tolerance == Decimal("1000")

    def test_from_settings_env(self, monkeypatch, tmp_path: Path) -> None:
        """Estimator limits and schedule file come from the environment."""
        path = tmp_path / "schedule.yaml"
        path.write_text(
            """
name: single-band
brackets:
  - {lower_bound: 0, upper_bound: null, rate: "0.1"}
rates:
  social_insurance_rate: "0"
  health_insurance_rate: "0"
  unemployment_insurance_rate: "0"
  personal_relief: 0
  dependent_relief: 0
"""
        )
        monkeypatch.setenv("PAYROLL_SCHEDULE_PATH", str(path))
        monkeypatch.setenv("ESTIMATOR_MAX_ITERATIONS", "25")
        monkeypatch.setenv("ESTIMATOR_TOLERANCE", "10")

        calculator = PayrollCalculator.from_settings(Settings())

        assert calculator.schedule.name == "single-band"
        assert calculator.max_iterations == 25
        assert calculator.tolerance == Decimal("10")
        assert calculator.net(Decimal("1000")).net_salary == Decimal("900")

    def test_from_settings_bad_schedule(self) -> None:
        """Misconfiguration fails at construction."""
        with pytest.raises(PayrollConfigurationError):
            PayrollCalculator.from_settings(Settings(payroll_schedule="unknown"))


class TestPayrollRun:
    """Tests for batch payroll runs."""

    def test_results_in_input_order(self) -> None:
        """Each payslip gets its own breakdown."""
        calculator = PayrollCalculator(schedule=VN_2020)
        results = calculator.run_payroll(
            [(Decimal("50000000"), 0), (Decimal("10000000"), 0), (Decimal("50000000"), 2)]
        )

        assert [r.net_salary for r in results] == [
            Decimal("39562500"),
            Decimal("8950000"),
            Decimal("41410000"),
        ]

    def test_run_id_bound_while_computing(self, monkeypatch) -> None:
        """Every payslip is computed inside the run's logging context."""
        seen: list[tuple[str | None, str | None]] = []
        original_net = PayrollCalculator.net

        def recording_net(self, gross_salary, dependents=0):
            seen.append((payroll_run_id_ctx.get(), caller_ctx.get()))
            return original_net(self, gross_salary, dependents)

        monkeypatch.setattr(PayrollCalculator, "net", recording_net)
        PayrollCalculator(schedule=VN_2020).run_payroll(
            [(Decimal("20000000"), 0), (Decimal("30000000"), 1)],
            run_id="run-2024-06",
            caller="payslip-generator",
        )

        assert seen == [("run-2024-06", "payslip-generator")] * 2
        assert payroll_run_id_ctx.get() is None
        assert caller_ctx.get() is None

    def test_run_logged(self) -> None:
        """Start and completion events carry the batch totals."""
        with capture_logs() as logs:
            PayrollCalculator(schedule=VN_2020).run_payroll(
                [(Decimal("50000000"), 0), (Decimal("10000000"), 0)]
            )

        events = {log["event"]: log for log in logs}
        assert "payroll_run_started" in events
        completed = events["payroll_run_completed"]
        assert completed["payslips"] == 2
        assert completed["total_net"] == Decimal("48512500")

    def test_context_reset_after_failure(self) -> None:
        """A failing payslip does not leak the run id."""
        calculator = PayrollCalculator(schedule=VN_2020)
        with pytest.raises(InvalidAmountError):
            calculator.run_payroll([(Decimal("1e30"), 0)], run_id="run-broken")
        assert payroll_run_id_ctx.get() is None
