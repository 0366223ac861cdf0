"""Payroll schedule loader with YAML parsing and validation.

Schedules can be supplied as YAML files so bracket thresholds and rates change
without code edits:

    name: vn-2020
    currency: VND
    brackets:
      - {lower_bound: 0, upper_bound: 5000000, rate: "0.05"}
      - {lower_bound: 5000000, upper_bound: null, rate: "0.10"}
    rates:
      social_insurance_rate: "0.08"
      health_insurance_rate: "0.015"
      unemployment_insurance_rate: "0.01"
      personal_relief: 11000000
      dependent_relief: 4400000
"""

from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML

from src.core.config import Settings, settings
from src.core.logging import get_logger
from src.payroll.errors import PayrollConfigurationError
from src.payroll.schedules import PayrollSchedule, get_schedule

logger = get_logger(__name__)


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file and return its contents as a dictionary.

    Raises:
        PayrollConfigurationError: If the file cannot be read or parsed
    """
    yaml = YAML()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except FileNotFoundError:
        raise PayrollConfigurationError(f"Schedule file not found: {path}", path=path)
    except Exception as e:
        raise PayrollConfigurationError(f"Failed to parse YAML: {e}", path=path)

    if data is None:
        raise PayrollConfigurationError("Empty schedule file", path=path)

    if not isinstance(data, dict):
        raise PayrollConfigurationError(
            f"Schedule file must be a YAML mapping, got {type(data).__name__}",
            path=path,
        )

    return dict(data)


def load_schedule_from_dict(
    data: dict[str, Any], path: Path | None = None
) -> PayrollSchedule:
    """Build a payroll schedule from a dictionary.

    Args:
        data: Dictionary with name, currency, brackets and rates
        path: Optional path for error reporting

    Returns:
        Validated PayrollSchedule

    Raises:
        PayrollConfigurationError: If validation fails
    """
    try:
        return PayrollSchedule.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise PayrollConfigurationError(
            f"Invalid payroll schedule: {errors[0]}", path=path, errors=errors
        )
    except PayrollConfigurationError as e:
        raise PayrollConfigurationError(str(e), path=path, errors=e.errors)


def load_schedule_from_yaml(path: str | Path) -> PayrollSchedule:
    """Load a payroll schedule from a YAML file path.

    Raises:
        PayrollConfigurationError: If the file cannot be loaded or validation fails
    """
    path = Path(path)
    data = _parse_yaml(path)
    schedule = load_schedule_from_dict(data, path=path)
    logger.info(
        "payroll_schedule_loaded",
        schedule=schedule.name,
        path=str(path),
        brackets=len(schedule.brackets),
    )
    return schedule


def get_configured_schedule(app_settings: Settings | None = None) -> PayrollSchedule:
    """Resolve the schedule selected by application settings.

    PAYROLL_SCHEDULE_PATH takes precedence over the built-in PAYROLL_SCHEDULE.
    """
    app_settings = app_settings or settings
    if app_settings.payroll_schedule_path:
        return load_schedule_from_yaml(app_settings.payroll_schedule_path)
    return get_schedule(app_settings.payroll_schedule)
