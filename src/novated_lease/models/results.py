"""Result types — the contract between engine, finance, API and collaborators.

Every model here is a frozen value object owned by the call that produced
it.  A re-quote produces a new ``Quote``; nothing is edited in place.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from novated_lease.config.request import FringeBenefitMethod, Jurisdiction, LeaseRequest
from novated_lease.config.vehicle import VehicleClass


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ═══════════════════════════════════════════════════════════════════════════
# Government charges
# ═══════════════════════════════════════════════════════════════════════════

class DutyAssessment(_Frozen):
    """Transfer duty and registration for one vehicle in one jurisdiction."""

    jurisdiction: Jurisdiction
    vehicle_price: float
    duty: float
    registration_fee: float
    concession_applied: bool = False
    concession_explanation: str = ""
    """Why the duty differs from the standard schedule, or why it does not."""

    @property
    def government_charges(self) -> float:
        """Duty + registration — deducted from price for the FBT base value."""
        return round(self.duty + self.registration_fee, 2)


# ═══════════════════════════════════════════════════════════════════════════
# Finance
# ═══════════════════════════════════════════════════════════════════════════

class AmortizationRow(_Frozen):
    month: int
    opening_balance: float
    interest: float
    principal: float
    payment: float
    """Zero during the deferral period (interest capitalises)."""
    closing_balance: float


class FinanceSchedule(_Frozen):
    """Amortized lease finance.

    Key identities:
      naf = gst_exclusive_cost + non_claimable_gst + duty + registration_fee + establishment_fee
      amount_financed = naf + brokerage
      deferred_principal = amount_financed × (1+r)^deferral_months
      closing balance after the last repayment = balloon
    """

    vehicle_price: float
    gst_exclusive_cost: float
    claimable_gst: float
    non_claimable_gst: float
    duty: float
    registration_fee: float
    establishment_fee: float

    naf: float
    """Net amount financed, before brokerage."""
    brokerage: float
    amount_financed: float
    deferred_principal: float

    balloon_fraction: float
    balloon: float
    monthly_payment: float

    term_months: int
    deferral_months: int
    repayment_months: int
    annual_rate: float
    """Nominal annual rate (0.073 = 7.30%)."""

    total_repayments: float
    """monthly_payment × repayment_months + balloon."""
    total_interest: float
    """total_repayments − amount_financed."""

    rows: list[AmortizationRow] = []


class EffectiveRateResult(_Frozen):
    """Outcome of the all-up rate bisection."""

    annual_rate_pct: float
    """Annualised nominal rate in percent (monthly × 12 × 100)."""
    monthly_rate: float
    iterations: int
    converged: bool
    """False when the iteration budget ran out before the bracket closed."""
    at_boundary: bool = False
    """True when no rate in range reproduces the payment."""


class RateChange(_Frozen):
    lender_id: str
    previous_rate: float | None
    new_rate: float
    reason: str
    changed_at: datetime


class LenderQuote(_Frozen):
    """One lender's schedule for an otherwise identical lease."""

    lender_id: str
    nominal_rate: float
    schedule: FinanceSchedule
    all_up_rate: EffectiveRateResult
    total_cost: float
    """Payments over the term + balloon."""


# ═══════════════════════════════════════════════════════════════════════════
# Running costs & tax
# ═══════════════════════════════════════════════════════════════════════════

class RunningCostProfile(_Frozen):
    """Annual operating costs.  All values ≥ 0."""

    vehicle_class: VehicleClass
    is_zero_emission: bool
    service: float
    tyres: float
    energy: float
    """Fuel for combustion vehicles, electricity for zero-emission vehicles."""
    energy_cost_per_km: float
    insurance: float
    registration: float
    management_fee: float
    total: float


class FringeBenefitAllocation(_Frozen):
    """Pre-tax / post-tax split of the annual cost and its tax effect.

    Invariant: pre_tax_amount + post_tax_amount == total_annual_cost (±1 cent).
    """

    policy: str
    """'zero_emission_exemption', 'contribution_method' or 'operating_cost_method'."""
    method: FringeBenefitMethod
    total_annual_cost: float
    pre_tax_amount: float
    post_tax_amount: float
    employee_contribution: float
    base_value: float
    taxable_value: float
    reportable_benefit: float
    fbt_liability: float
    business_use_percent: float | None = None

    income_tax_saving: float
    levy_saving: float
    total_tax_saving: float
    net_annual_cost: float
    pay_periods_per_year: int
    periodic_deduction: float


# ═══════════════════════════════════════════════════════════════════════════
# Quote
# ═══════════════════════════════════════════════════════════════════════════

class PurchaseComparison(_Frozen):
    """Novated lease vs buying outright from after-tax salary (monthly terms)."""

    after_tax_purchase_monthly: float
    novated_lease_monthly: float
    monthly_saving: float
    saving_over_term: float
    saving_pct: float


class QuoteSummary(_Frozen):
    total_cost_of_ownership: float
    total_tax_savings: float
    total_net_cost: float
    effective_vehicle_cost: float


class Recommendation(_Frozen):
    kind: str
    priority: str
    title: str
    message: str


class Quote(_Frozen):
    """Fully reconciled quote for one ``LeaseRequest``.  Never mutated."""

    reference: str
    created_at: datetime
    request: LeaseRequest
    rule_set: str

    vehicle_class: VehicleClass
    duty: DutyAssessment
    finance: FinanceSchedule
    all_up_rate: EffectiveRateResult
    lender_id: str | None = None
    running_costs: RunningCostProfile

    annual_finance_cost: float
    total_annual_cost: float
    fringe_benefit: FringeBenefitAllocation
    marginal_tax_rate: float

    periodic_out_of_pocket: float
    """Net cost per pay period after tax savings."""

    comparison: PurchaseComparison
    summary: QuoteSummary
    warnings: list[str] = []
    recommendations: list[Recommendation] = []

    image_reference: str | None = None
    """Scene image URL, attached after generation by ``model_copy``."""
