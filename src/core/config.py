"""Application configuration using Pydantic Settings."""

from decimal import Decimal
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMATS = ("json", "console")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Payroll schedule
    payroll_schedule: str = "vn-2020"
    """Name of the built-in payroll schedule used when no file is configured."""

    payroll_schedule_path: str | None = None
    """Optional YAML file holding a custom bracket table and insurance rates."""

    # Gross estimator
    estimator_max_iterations: int = Field(default=100, ge=1)
    """Iteration cap for net-to-gross estimation."""

    estimator_tolerance: Decimal = Field(default=Decimal("1000"), gt=0)
    """Accepted gap between target and computed net salary, in currency units."""

    @field_validator("log_format", mode="before")
    @classmethod
    def parse_log_format(cls, value: object) -> str | None:
        """Normalize log format, treating blank values as unset."""
        if value is None:
            return None
        text = str(value).strip().lower()
        if not text:
            return None
        if text not in LOG_FORMATS:
            raise ValueError(
                f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {value!r}."
            )
        return text


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    root_error = str(exc)
    suggestions = [
        "Allowed values for LOG_FORMAT are: json, console.",
        "ESTIMATOR_MAX_ITERATIONS must be a positive integer.",
        "ESTIMATOR_TOLERANCE must be a positive amount.",
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {root_error}\n"
        + "\n".join(suggestions)
    ) from exc
