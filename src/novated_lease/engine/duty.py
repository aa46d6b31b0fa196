"""Jurisdiction duty engine.

Each jurisdiction prices duty through a pluggable strategy built from its
rule set:

  FlatRateDuty         rate(price band) × price
  TieredExcessDuty     base + rate × (price − threshold)
  EmissionConcession   wraps either of the above for zero-emission vehicles

Strategies are pure functions of (price, is_zero_emission).  Registration
is a separate lookup by jurisdiction that accepts the price so future
rule sets can band it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from novated_lease.config.duty import (
    DutyConfig,
    DutySchedule,
    EmissionConcession,
    JurisdictionRules,
)
from novated_lease.config.request import Jurisdiction
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError
from novated_lease.models.results import DutyAssessment


# ═══════════════════════════════════════════════════════════════════════════
# Strategies
# ═══════════════════════════════════════════════════════════════════════════

class DutyStrategy(ABC):
    """Duty payable for a vehicle of a given price."""

    @abstractmethod
    def duty(self, price: float, is_zero_emission: bool = False) -> float:
        ...

    def explain(self, price: float, is_zero_emission: bool) -> tuple[bool, str]:
        """(concession applied?, explanation) for this price."""
        return False, "Standard duty schedule"


class FlatRateDuty(DutyStrategy):
    """Percentage of the whole price; the rate is chosen by price band."""

    def __init__(self, schedule: DutySchedule):
        self.bands = schedule.bands

    def duty(self, price: float, is_zero_emission: bool = False) -> float:
        for band in self.bands:
            if band.up_to is None or price <= band.up_to:
                return max(price, 0.0) * band.rate
        return 0.0


class TieredExcessDuty(DutyStrategy):
    """Progressive bands: fixed base plus a marginal rate on the excess."""

    def __init__(self, schedule: DutySchedule):
        self.bands = schedule.bands

    def duty(self, price: float, is_zero_emission: bool = False) -> float:
        for band in self.bands:
            if band.up_to is None or price <= band.up_to:
                return band.base + max(price - band.threshold, 0.0) * band.rate
        return 0.0


class EmissionConcessionDuty(DutyStrategy):
    """Applies a zero-emission concession on top of a base strategy.

    Every mode yields duty ≤ the base duty, so a zero-emission vehicle
    never pays more than the same vehicle with the flag off.
    """

    def __init__(self, base: DutyStrategy, concession: EmissionConcession):
        self.base = base
        self.concession = concession

    def duty(self, price: float, is_zero_emission: bool = False) -> float:
        standard = self.base.duty(price)
        if not is_zero_emission:
            return standard

        c = self.concession
        if c.mode == "exempt_below_threshold":
            return 0.0 if price <= c.threshold else standard
        if c.mode == "excess_above_threshold":
            if price <= c.threshold or price <= 0:
                return 0.0
            return standard * (price - c.threshold) / price
        # percentage_reduction
        return standard * (1.0 - c.reduction_pct)

    def explain(self, price: float, is_zero_emission: bool) -> tuple[bool, str]:
        c = self.concession
        label = c.label or "Zero-emission concession"
        if not is_zero_emission:
            return False, f"Standard duty schedule ({label} requires a zero-emission vehicle)"

        if c.mode == "exempt_below_threshold":
            if price <= c.threshold:
                return True, f"{label}: exempt at or below ${c.threshold:,.0f}"
            return False, f"Standard duty schedule: price exceeds ${c.threshold:,.0f} {label} cap"
        if c.mode == "excess_above_threshold":
            return True, f"{label}: duty charged only on value above ${c.threshold:,.0f}"
        return True, f"{label}: duty reduced by {c.reduction_pct:.0%}"


def build_strategy(rules: JurisdictionRules) -> DutyStrategy:
    """Construct the duty strategy described by one jurisdiction's rules."""
    if rules.duty.shape == "tiered_excess":
        strategy: DutyStrategy = TieredExcessDuty(rules.duty)
    else:
        strategy = FlatRateDuty(rules.duty)

    if rules.concession is not None:
        strategy = EmissionConcessionDuty(strategy, rules.concession)
    return strategy


# ═══════════════════════════════════════════════════════════════════════════
# Public entry points
# ═══════════════════════════════════════════════════════════════════════════

def _rules_for(jurisdiction: Jurisdiction | str, config: DutyConfig) -> tuple[Jurisdiction, JurisdictionRules]:
    try:
        code = Jurisdiction(jurisdiction)
    except ValueError as exc:
        raise QuoteValidationError(f"Unknown jurisdiction code '{jurisdiction}'") from exc

    rules = config.jurisdictions.get(code)
    if rules is None:
        raise ConfigurationInconsistency(
            f"No duty rules configured for {code.value}",
            table="duty.jurisdictions", key=code.value,
        )
    return code, rules


def registration_fee(jurisdiction: Jurisdiction | str, price: float, config: DutyConfig) -> float:
    """Annual registration for ``jurisdiction``.  Flat unless price bands are configured."""
    _, rules = _rules_for(jurisdiction, config)
    for band in rules.registration_bands:
        if band.up_to is None or price <= band.up_to:
            return band.fee
    return rules.registration_fee


def assess_duty(
    jurisdiction: Jurisdiction | str,
    price: float,
    is_zero_emission: bool,
    config: DutyConfig,
) -> DutyAssessment:
    """Duty + registration for one vehicle.

    Raises
    ------
    QuoteValidationError
        Jurisdiction code is not recognised or price is not positive.
    ConfigurationInconsistency
        Code is valid but the rule set has no entry for it.
    """
    if price <= 0:
        raise QuoteValidationError(f"Vehicle price must be positive, got {price}")

    code, rules = _rules_for(jurisdiction, config)
    strategy = build_strategy(rules)

    duty = strategy.duty(price, is_zero_emission)
    applied, explanation = strategy.explain(price, is_zero_emission)

    return DutyAssessment(
        jurisdiction=code,
        vehicle_price=round(price, 2),
        duty=round(max(duty, 0.0), 2),
        registration_fee=round(registration_fee(code, price, config), 2),
        concession_applied=applied,
        concession_explanation=explanation,
    )
