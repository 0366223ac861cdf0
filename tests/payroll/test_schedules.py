"""Tests for built-in schedules and the YAML schedule loader."""

from decimal import Decimal
from pathlib import Path

import pytest

from src.core.config import Settings
from src.payroll.errors import PayrollConfigurationError
from src.payroll.loader import (
    get_configured_schedule,
    load_schedule_from_dict,
    load_schedule_from_yaml,
)
from src.payroll.schedules import PAYROLL_SCHEDULES, VN_2020, PayrollSchedule, get_schedule


VALID_SCHEDULE_YAML = """
name: test-flat
currency: VND
brackets:
  - lower_bound: 0
    upper_bound: 1000000
    rate: "0.05"
  - lower_bound: 1000000
    upper_bound: 3000000
    rate: "0.10"
  - lower_bound: 3000000
    upper_bound: null
    rate: 0.2
rates:
  social_insurance_rate: "0.08"
  health_insurance_rate: "0.015"
  unemployment_insurance_rate: "0.01"
  personal_relief: 2000000
  dependent_relief: 1000000
"""


def _write(tmp_path: Path, text: str, name: str = "schedule.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


class TestBuiltinSchedules:
    """Tests for the schedule registry."""

    def test_vn_2020_values(self) -> None:
        """Built-in schedule carries the seven-band table and 10.5% insurance."""
        assert len(VN_2020.brackets) == 7
        assert VN_2020.brackets[-1].upper_bound is None
        assert VN_2020.brackets[-1].rate == Decimal("0.35")
        assert VN_2020.rates.total_insurance_rate == Decimal("0.105")
        assert VN_2020.rates.personal_relief == Decimal("11000000")
        assert VN_2020.rates.dependent_relief == Decimal("4400000")
        assert VN_2020.currency == "VND"

    def test_get_schedule(self) -> None:
        """Lookup is case-insensitive."""
        assert get_schedule("VN-2020") is VN_2020

    def test_get_unknown_schedule(self) -> None:
        """Unknown names list what is available."""
        with pytest.raises(PayrollConfigurationError) as exc_info:
            get_schedule("fr-2024")
        assert "vn-2020" in str(exc_info.value)

    def test_registry_keys_match_names(self) -> None:
        """Every registered schedule is stored under its own name."""
        for name, schedule in PAYROLL_SCHEDULES.items():
            assert schedule.name == name

    def test_schedule_rejects_malformed_table(self) -> None:
        """An invalid table cannot be bundled into a schedule."""
        with pytest.raises(PayrollConfigurationError):
            PayrollSchedule(
                name="broken",
                brackets=VN_2020.brackets[:-1],
                rates=VN_2020.rates,
            )


class TestLoadScheduleFromYaml:
    """Tests for load_schedule_from_yaml."""

    def test_load_valid_schedule(self, tmp_path: Path) -> None:
        """A well-formed file yields a validated schedule."""
        schedule = load_schedule_from_yaml(_write(tmp_path, VALID_SCHEDULE_YAML))

        assert schedule.name == "test-flat"
        assert len(schedule.brackets) == 3
        assert schedule.brackets[1].rate == Decimal("0.10")
        assert schedule.brackets[2].rate == Decimal("0.2")
        assert schedule.brackets[2].is_unbounded
        assert schedule.rates.personal_relief == Decimal("2000000")

    def test_file_not_found(self, tmp_path: Path) -> None:
        """Missing files raise a configuration error."""
        with pytest.raises(PayrollConfigurationError) as exc_info:
            load_schedule_from_yaml(tmp_path / "missing.yaml")
        assert "not found" in str(exc_info.value).lower()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML reports the path."""
        path = _write(tmp_path, "{ invalid yaml : : : }")
        with pytest.raises(PayrollConfigurationError) as exc_info:
            load_schedule_from_yaml(path)
        assert exc_info.value.path == path

    def test_empty_file(self, tmp_path: Path) -> None:
        """Empty files are rejected."""
        with pytest.raises(PayrollConfigurationError, match="Empty"):
            load_schedule_from_yaml(_write(tmp_path, ""))

    def test_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is rejected."""
        with pytest.raises(PayrollConfigurationError, match="mapping"):
            load_schedule_from_yaml(_write(tmp_path, "- 1\n- 2\n"))

    def test_invalid_bracket_field(self, tmp_path: Path) -> None:
        """Field-level errors are collected with their location."""
        text = VALID_SCHEDULE_YAML.replace('rate: "0.05"', 'rate: "1.5"')
        path = _write(tmp_path, text)

        with pytest.raises(PayrollConfigurationError) as exc_info:
            load_schedule_from_yaml(path)

        assert exc_info.value.path == path
        assert any(error.startswith("brackets.0.rate") for error in exc_info.value.errors)

    def test_gap_in_table(self, tmp_path: Path) -> None:
        """Table-level errors carry the file path too."""
        text = VALID_SCHEDULE_YAML.replace(
            "lower_bound: 3000000", "lower_bound: 3500000"
        )
        path = _write(tmp_path, text)

        with pytest.raises(PayrollConfigurationError) as exc_info:
            load_schedule_from_yaml(path)

        assert exc_info.value.path == path
        assert "expected 3000000" in exc_info.value.errors[0]

    def test_missing_rates_section(self) -> None:
        """Schedules need rates as well as brackets."""
        with pytest.raises(PayrollConfigurationError, match="rates"):
            load_schedule_from_dict(
                {"name": "x", "brackets": [{"lower_bound": 0, "rate": "0.1"}]}
            )


class TestGetConfiguredSchedule:
    """Tests for settings-driven schedule selection."""

    def test_defaults_to_builtin(self) -> None:
        """Without a path the named built-in schedule is used."""
        assert get_configured_schedule(Settings()) is VN_2020

    def test_path_takes_precedence(self, tmp_path: Path) -> None:
        """A configured file overrides the built-in name."""
        path = _write(tmp_path, VALID_SCHEDULE_YAML)
        cfg = Settings(payroll_schedule="vn-2020", payroll_schedule_path=str(path))
        assert get_configured_schedule(cfg).name == "test-flat"

    def test_unknown_builtin(self) -> None:
        """A bad schedule name is a configuration error."""
        with pytest.raises(PayrollConfigurationError):
            get_configured_schedule(Settings(payroll_schedule="nowhere"))
