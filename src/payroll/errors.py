"""Exceptions raised by the payroll engine."""

from pathlib import Path


class PayrollConfigurationError(Exception):
    """Raised when a bracket table, rate set or schedule source is malformed.

    Indicates a setup defect rather than a runtime condition; the engine never
    recovers from it.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        errors: list[str] | None = None,
    ):
        """Initialize PayrollConfigurationError.

        Args:
            message: Human-readable error message
            path: Path to the schedule file, when loaded from disk
            errors: List of specific validation errors
        """
        self.path = path
        self.errors = errors or []
        super().__init__(message)


class InvalidAmountError(ValueError):
    """Raised for numeric input that cannot be normalized by clamping."""
