"""Quote orchestrator — composes every engine into one immutable ``Quote``.

Each request follows this sequence:
  duty + registration → rate (lender or term table) → finance schedule
  → all-up rate → running costs → total annual cost
  → fringe-benefit allocation → purchase comparison → advice

Entry point: ``generate_quote(request, config, registry)``.  The only
shared state touched is the lender registry, read through a snapshot.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from novated_lease.config.quote import QuoteConfig
from novated_lease.config.request import LeaseRequest
from novated_lease.engine.advice import affordability_warnings, recommend
from novated_lease.engine.duty import assess_duty
from novated_lease.engine.fringe_benefit import allocate
from novated_lease.engine.running_costs import estimate_running_costs
from novated_lease.engine.tax import marginal_rate
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError
from novated_lease.finance.effective_rate import solve_effective_rate
from novated_lease.finance.lenders import LenderRateRegistry
from novated_lease.finance.schedule import build_schedule
from novated_lease.models.results import PurchaseComparison, Quote, QuoteSummary

logger = logging.getLogger(__name__)


def quote_reference(now: datetime) -> str:
    """``Q-YYYYMMDD-XXXXXX`` — date plus a random suffix."""
    return f"Q-{now:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


def _nominal_rate(
    request: LeaseRequest,
    config: QuoteConfig,
    registry: LenderRateRegistry | None,
) -> float:
    if request.lender_id is not None:
        if registry is None:
            raise QuoteValidationError(
                f"Lender '{request.lender_id}' requested but no lender registry is available"
            )
        return registry.rate_for(request.lender_id)

    rate = config.finance.term_rates.get(request.term_years)
    if rate is None:
        raise ConfigurationInconsistency(
            f"No term rate configured for a {request.term_years}-year term",
            table="finance.term_rates", key=request.term_years,
        )
    return rate


def generate_quote(
    request: LeaseRequest,
    config: QuoteConfig | None = None,
    registry: LenderRateRegistry | None = None,
    now: datetime | None = None,
) -> Quote:
    """Price one lease end to end.

    Raises
    ------
    QuoteValidationError
        Input out of range (surfaced to the caller as-is).
    ConfigurationInconsistency
        A rate table cannot serve this request.
    """
    config = config or QuoteConfig()
    now = now or datetime.now(timezone.utc)
    fin = config.finance

    # ── 1. Government charges ──────────────────────────────────────────
    duty = assess_duty(
        request.jurisdiction, request.vehicle_price, request.is_zero_emission, config.duty,
    )

    # ── 2. Finance ─────────────────────────────────────────────────────
    rate = _nominal_rate(request, config, registry)
    schedule = build_schedule(
        request.vehicle_price, duty.duty, duty.registration_fee, request.term_years, rate, fin,
    )
    all_up = solve_effective_rate(
        schedule.naf,
        schedule.monthly_payment,
        schedule.balloon,
        schedule.repayment_months,
        deferral_months=schedule.deferral_months,
        upper_bound=fin.solver_upper_monthly_rate,
        tolerance=fin.solver_tolerance,
        max_iterations=fin.solver_max_iterations,
    )

    # ── 3. Running costs ───────────────────────────────────────────────
    running = estimate_running_costs(
        body_style=request.body_style,
        make=request.make,
        engine_size_litres=request.engine_size_litres,
        fuel_type=request.fuel_type,
        annual_distance_km=request.annual_distance_km,
        is_zero_emission=request.is_zero_emission,
        vehicle_value=request.vehicle_price,
        config=config.running_costs,
        registration_fee=duty.registration_fee,
    )

    annual_finance = schedule.monthly_payment * 12
    total_annual = annual_finance + running.total

    # ── 4. Fringe benefit & tax ────────────────────────────────────────
    allocation = allocate(
        total_annual_cost=total_annual,
        method=request.fbt_method,
        is_zero_emission=request.is_zero_emission,
        vehicle_price=request.vehicle_price,
        duty_plus_rego=duty.government_charges,
        business_use_percent=request.business_use_percent,
        income=request.annual_income,
        pay_frequency=request.pay_frequency,
        config=config.fringe_benefit,
        tax_config=config.tax,
    )

    # ── 5. Comparison with an after-tax purchase ───────────────────────
    term_months = request.term_years * 12
    after_tax_monthly = request.vehicle_price / term_months + running.total / 12
    novated_monthly = allocation.net_annual_cost / 12
    monthly_saving = after_tax_monthly - novated_monthly
    saving_over_term = monthly_saving * term_months

    comparison = PurchaseComparison(
        after_tax_purchase_monthly=round(after_tax_monthly, 2),
        novated_lease_monthly=round(novated_monthly, 2),
        monthly_saving=round(monthly_saving, 2),
        saving_over_term=round(saving_over_term, 2),
        saving_pct=round(monthly_saving / after_tax_monthly * 100, 2) if after_tax_monthly > 0 else 0.0,
    )

    summary = QuoteSummary(
        total_cost_of_ownership=round(total_annual * request.term_years, 2),
        total_tax_savings=round(allocation.total_tax_saving * request.term_years, 2),
        total_net_cost=round(allocation.net_annual_cost * request.term_years, 2),
        effective_vehicle_cost=round(
            request.vehicle_price - allocation.total_tax_saving * request.term_years, 2,
        ),
    )

    # ── 6. Assemble ────────────────────────────────────────────────────
    quote = Quote(
        reference=quote_reference(now),
        created_at=now,
        request=request,
        rule_set=config.name,
        vehicle_class=running.vehicle_class,
        duty=duty,
        finance=schedule,
        all_up_rate=all_up,
        lender_id=request.lender_id,
        running_costs=running,
        annual_finance_cost=round(annual_finance, 2),
        total_annual_cost=allocation.total_annual_cost,
        fringe_benefit=allocation,
        marginal_tax_rate=marginal_rate(request.annual_income, config.tax),
        periodic_out_of_pocket=allocation.periodic_deduction,
        comparison=comparison,
        summary=summary,
        warnings=affordability_warnings(request),
        recommendations=recommend(request, saving_over_term, all_up.annual_rate_pct, allocation.policy),
    )

    logger.info(
        "Quote generated",
        extra={
            "quote_reference": quote.reference,
            "jurisdiction": request.jurisdiction.value,
            "term_years": request.term_years,
            "policy": allocation.policy,
            "monthly_payment": schedule.monthly_payment,
            "all_up_rate_pct": all_up.annual_rate_pct,
        },
    )
    return quote
