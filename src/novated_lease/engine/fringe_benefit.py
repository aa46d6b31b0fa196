"""Fringe benefit & tax allocator.

Splits the annual lease cost into pre-tax and post-tax portions under
one of three policies (first match wins):

  1. zero-emission exemption   ZE vehicle at or below the LCT threshold
  2. contribution method       post-tax = statutory_rate × (price − duty − rego)
  3. operating-cost method     pre-tax = business-use share of the cost

FBT liability = max(0, taxable_value − employee_contribution) × gross_up × fbt_rate.
Under both methods the post-tax contribution equals the taxable value, so
a correctly structured lease carries no liability.
"""

from __future__ import annotations

from novated_lease.config.fringe_benefit import FringeBenefitConfig
from novated_lease.config.request import FringeBenefitMethod, PayFrequency
from novated_lease.config.tax import TaxConfig
from novated_lease.engine.tax import tax_saving
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError
from novated_lease.models.results import FringeBenefitAllocation


def _fbt_liability(taxable_value: float, contribution: float, config: FringeBenefitConfig) -> float:
    return max(taxable_value - contribution, 0.0) * config.gross_up_rate * config.fbt_rate


def allocate(
    total_annual_cost: float,
    method: FringeBenefitMethod,
    is_zero_emission: bool,
    vehicle_price: float,
    duty_plus_rego: float,
    business_use_percent: float | None,
    income: float,
    pay_frequency: PayFrequency,
    config: FringeBenefitConfig,
    tax_config: TaxConfig,
) -> FringeBenefitAllocation:
    """Allocate the annual cost and compute the tax effect.

    Raises
    ------
    QuoteValidationError
        Operating-cost method without a business-use percentage.
    ConfigurationInconsistency
        Statutory contribution exceeds the total annual cost.
    """
    total = round(total_annual_cost, 2)
    base_value = vehicle_price - duty_plus_rego

    if is_zero_emission and vehicle_price <= config.ev_exemption_threshold:
        # ── 1. Zero-emission exemption: all pre-tax, still reportable ──
        policy = "zero_emission_exemption"
        pre_tax = total
        contribution = 0.0
        taxable_value = 0.0
        reportable = total

    elif method is FringeBenefitMethod.CONTRIBUTION:
        # ── 2. Contribution method ─────────────────────────────────────
        policy = "contribution_method"
        taxable_value = base_value * config.statutory_rate
        contribution = taxable_value
        pre_tax = round(total - contribution, 2)
        if pre_tax < 0:
            raise ConfigurationInconsistency(
                f"Statutory contribution {contribution:,.2f} exceeds total annual cost {total:,.2f}",
                table="fringe_benefit.statutory_rate", key=config.statutory_rate,
            )
        reportable = 0.0

    else:
        # ── 3. Operating-cost method ───────────────────────────────────
        if business_use_percent is None:
            raise QuoteValidationError("business_use_percent is required for the operating-cost method")
        if not 0 <= business_use_percent <= 100:
            raise QuoteValidationError(
                f"business_use_percent must be between 0 and 100, got {business_use_percent}"
            )
        policy = "operating_cost_method"
        pre_tax = round(total * business_use_percent / 100, 2)
        taxable_value = total - pre_tax
        contribution = taxable_value
        reportable = contribution

    post_tax = round(total - pre_tax, 2)
    liability = _fbt_liability(taxable_value, contribution, config)

    # ── Tax effect ─────────────────────────────────────────────────────
    income_saving = tax_saving(income, pre_tax, tax_config)
    # levy applies only to the part of the deduction covered by income
    levy_saving = min(pre_tax, max(income, 0.0)) * tax_config.levy_rate
    total_saving = income_saving + levy_saving
    net_annual = total - total_saving
    periods = pay_frequency.periods_per_year

    return FringeBenefitAllocation(
        policy=policy,
        method=method,
        total_annual_cost=total,
        pre_tax_amount=pre_tax,
        post_tax_amount=post_tax,
        employee_contribution=round(contribution, 2),
        base_value=round(base_value, 2),
        taxable_value=round(taxable_value, 2),
        reportable_benefit=round(reportable, 2),
        fbt_liability=round(liability, 2),
        business_use_percent=business_use_percent if policy == "operating_cost_method" else None,
        income_tax_saving=round(income_saving, 2),
        levy_saving=round(levy_saving, 2),
        total_tax_saving=round(total_saving, 2),
        net_annual_cost=round(net_annual, 2),
        pay_periods_per_year=periods,
        periodic_deduction=round(net_annual / periods, 2),
    )
