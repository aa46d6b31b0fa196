"""Top-level configuration — bundles every static rate table."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from novated_lease.config.duty import DutyConfig
from novated_lease.config.finance import FinanceConfig
from novated_lease.config.fringe_benefit import FringeBenefitConfig
from novated_lease.config.lenders import LenderConfig
from novated_lease.config.tax import TaxConfig
from novated_lease.config.vehicle import RunningCostConfig
from novated_lease.errors import ConfigurationInconsistency

logger = logging.getLogger(__name__)


class QuoteConfig(BaseModel):
    """Complete rule set for one regime.  Swapped by a human when regulation changes."""

    name: str = Field(default="AU 2024-25", description="Human label for this rule set")
    tax: TaxConfig = Field(default_factory=TaxConfig)
    duty: DutyConfig = Field(default_factory=DutyConfig)
    finance: FinanceConfig = Field(default_factory=FinanceConfig)
    running_costs: RunningCostConfig = Field(default_factory=RunningCostConfig)
    fringe_benefit: FringeBenefitConfig = Field(default_factory=FringeBenefitConfig)
    lenders: LenderConfig = Field(default_factory=LenderConfig)


def load_quote_config(path: str | Path) -> QuoteConfig:
    """Load a YAML rule set.  Missing sections fall back to defaults.

    Raises
    ------
    ConfigurationInconsistency
        If the file is not a mapping or any table fails validation.  The
        ``table`` attribute names the first failing section.
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationInconsistency(
            f"{path} must contain a mapping of tables", table=str(path),
        )

    try:
        config = QuoteConfig(**data)
    except ValidationError as exc:
        first = exc.errors()[0]
        table = str(first["loc"][0]) if first["loc"] else str(path)
        raise ConfigurationInconsistency(
            f"Invalid rate table in {path}: {first['msg']}",
            table=table,
            key=".".join(str(p) for p in first["loc"][1:]) or None,
        ) from exc

    logger.info("Loaded rule set '%s' from %s", config.name, path)
    return config
