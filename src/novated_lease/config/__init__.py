"""Configuration models — request input and static rate tables."""

from novated_lease.config.request import (
    FringeBenefitMethod,
    Jurisdiction,
    LeaseRequest,
    PayFrequency,
    build_lease_request,
)
from novated_lease.config.tax import TaxBand, TaxConfig
from novated_lease.config.duty import DutyConfig, JurisdictionRules
from novated_lease.config.finance import FinanceConfig
from novated_lease.config.vehicle import RunningCostConfig, VehicleClass
from novated_lease.config.fringe_benefit import FringeBenefitConfig
from novated_lease.config.lenders import LenderConfig
from novated_lease.config.quote import QuoteConfig, load_quote_config

__all__ = [
    "FringeBenefitMethod",
    "Jurisdiction",
    "LeaseRequest",
    "PayFrequency",
    "build_lease_request",
    "TaxBand",
    "TaxConfig",
    "DutyConfig",
    "JurisdictionRules",
    "FinanceConfig",
    "RunningCostConfig",
    "VehicleClass",
    "FringeBenefitConfig",
    "LenderConfig",
    "QuoteConfig",
    "load_quote_config",
]
