"""Payroll computation engine: progressive tax, deductions and net-to-gross."""

from src.payroll.brackets import calculate_tax, compute_tax, validate_brackets
from src.payroll.calculator import PayrollCalculator
from src.payroll.deductions import compute_net
from src.payroll.errors import InvalidAmountError, PayrollConfigurationError
from src.payroll.estimator import estimate_gross, estimate_gross_detailed
from src.payroll.loader import (
    get_configured_schedule,
    load_schedule_from_dict,
    load_schedule_from_yaml,
)
from src.payroll.models import (
    BracketLine,
    DeductionBreakdown,
    GrossEstimate,
    InsuranceRateConfig,
    TaxBracket,
    TaxResult,
)
from src.payroll.money import Money, to_money
from src.payroll.schedules import (
    PAYROLL_SCHEDULES,
    VN_2020,
    VN_INSURANCE_RATES,
    VN_PIT_BRACKETS,
    PayrollSchedule,
    get_schedule,
)

__all__ = [
    "BracketLine",
    "DeductionBreakdown",
    "GrossEstimate",
    "InsuranceRateConfig",
    "InvalidAmountError",
    "Money",
    "PAYROLL_SCHEDULES",
    "PayrollCalculator",
    "PayrollConfigurationError",
    "PayrollSchedule",
    "TaxBracket",
    "TaxResult",
    "VN_2020",
    "VN_INSURANCE_RATES",
    "VN_PIT_BRACKETS",
    "calculate_tax",
    "compute_net",
    "compute_tax",
    "estimate_gross",
    "estimate_gross_detailed",
    "get_configured_schedule",
    "get_schedule",
    "load_schedule_from_dict",
    "load_schedule_from_yaml",
    "to_money",
    "validate_brackets",
]
