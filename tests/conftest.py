"""Shared test fixtures — default 2024-25 rule set and sample lease requests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from novated_lease.config import (
    FinanceConfig,
    FringeBenefitConfig,
    LeaseRequest,
    QuoteConfig,
    RunningCostConfig,
    TaxConfig,
)
from novated_lease.config.duty import DutyConfig
from novated_lease.finance.lenders import LenderRateRegistry


@pytest.fixture
def quote_config() -> QuoteConfig:
    return QuoteConfig()


@pytest.fixture
def tax_config() -> TaxConfig:
    return TaxConfig()


@pytest.fixture
def duty_config() -> DutyConfig:
    return DutyConfig()


@pytest.fixture
def finance_config() -> FinanceConfig:
    return FinanceConfig()


@pytest.fixture
def running_cost_config() -> RunningCostConfig:
    return RunningCostConfig()


@pytest.fixture
def fringe_benefit_config() -> FringeBenefitConfig:
    return FringeBenefitConfig()


@pytest.fixture
def registry(quote_config) -> LenderRateRegistry:
    return LenderRateRegistry.from_config(quote_config.lenders)


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_request():
    """Factory: a typical VIC sedan lease with any field overridden."""

    def _make(**overrides) -> LeaseRequest:
        fields = dict(
            vehicle_price=55_000,
            body_style="Midsize Cars Sedan",
            make="Toyota",
            model="Camry",
            year=2024,
            engine_size_litres=2.5,
            fuel_type="hybrid",
            jurisdiction="VIC",
            term_years=3,
            annual_distance_km=15_000,
            annual_income=90_000,
        )
        fields.update(overrides)
        return LeaseRequest(**fields)

    return _make
