"""Pytest configuration and shared fixtures for tests."""

from decimal import Decimal

import pytest

from src.payroll.models import InsuranceRateConfig, TaxBracket
from src.payroll.schedules import VN_2020, PayrollSchedule


@pytest.fixture
def brackets() -> tuple[TaxBracket, ...]:
    """Seven-band monthly PIT table (0-5M at 5% up to 80M+ at 35%)."""
    return VN_2020.brackets


@pytest.fixture
def rates() -> InsuranceRateConfig:
    """8% / 1.5% / 1% insurance, 11M personal and 4.4M dependent relief."""
    return VN_2020.rates


@pytest.fixture
def schedule() -> PayrollSchedule:
    """Built-in schedule bundling brackets and rates."""
    return VN_2020


@pytest.fixture
def two_band_brackets() -> tuple[TaxBracket, ...]:
    """Small table for hand-checked arithmetic."""
    return (
        TaxBracket(lower_bound=Decimal("0"), upper_bound=Decimal("1000"), rate=Decimal("0.10")),
        TaxBracket(lower_bound=Decimal("1000"), upper_bound=None, rate=Decimal("0.20")),
    )
