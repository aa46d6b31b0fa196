"""Finance schedule engine.

Builds the lease finance from the drive-away price:

  base         = price − duty − registration
  gst          = base − base / (1 + gst_rate)
  claimable    = min(gst, gst_cap × gst_rate)
  NAF          = base_ex_gst + (gst − claimable) + duty + registration + establishment_fee
  amount_fin   = NAF × (1 + brokerage_rate)
  principal    = amount_fin × (1 + r)^deferral
  balloon      = NAF × balloon_fraction[term]
  payment      = (principal·r − balloon·r / (1+r)^n) / (1 − (1+r)^−n),  n = term − deferral
"""

from __future__ import annotations

from novated_lease.config.finance import FinanceConfig
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError
from novated_lease.models.results import AmortizationRow, FinanceSchedule


def level_payment(principal: float, monthly_rate: float, balloon: float, repayments: int) -> float:
    """Level monthly payment that amortises ``principal`` down to ``balloon``.

    ``monthly_rate`` must be > 0; the zero-rate limit is handled by callers
    that need it.
    """
    factor = (1 + monthly_rate) ** repayments
    return (principal * monthly_rate - balloon * monthly_rate / factor) / (1 - 1 / factor)


def _amortization_rows(
    amount_financed: float,
    monthly_rate: float,
    deferral_months: int,
    repayment_months: int,
    payment: float,
) -> list[AmortizationRow]:
    rows: list[AmortizationRow] = []
    balance = amount_financed

    for m in range(1, deferral_months + repayment_months + 1):
        interest = balance * monthly_rate
        if m <= deferral_months:
            # Deferral: no payment, interest capitalises
            paid = 0.0
            principal = -interest
        else:
            paid = payment
            principal = payment - interest
        closing = balance - principal

        rows.append(AmortizationRow(
            month=m,
            opening_balance=round(balance, 2),
            interest=round(interest, 2),
            principal=round(principal, 2),
            payment=round(paid, 2),
            closing_balance=round(closing, 2),
        ))
        balance = closing

    return rows


def build_schedule(
    price: float,
    duty: float,
    registration_fee: float,
    term_years: int,
    annual_rate: float,
    config: FinanceConfig,
) -> FinanceSchedule:
    """Build the amortized lease finance for one vehicle.

    Parameters
    ----------
    price : float
        Drive-away price, including duty, registration and GST.
    duty, registration_fee : float
        Government charges from the duty engine.
    term_years : int
        Lease term; must have an entry in ``config.balloon_fractions``.
    annual_rate : float
        Nominal annual rate (0.073 = 7.30%).  Must be > 0.

    Raises
    ------
    QuoteValidationError
        Non-positive rate or price, a price that does not exceed duty plus
        registration, or a deferral that leaves no repayments.
    ConfigurationInconsistency
        ``term_years`` has no balloon fraction.
    """
    if price <= 0:
        raise QuoteValidationError(f"Vehicle price must be positive, got {price}")
    if annual_rate <= 0:
        raise QuoteValidationError(f"Annual rate must be positive, got {annual_rate}")
    if price <= duty + registration_fee:
        raise QuoteValidationError(
            f"Vehicle price {price:,.2f} must exceed duty plus registration {duty + registration_fee:,.2f}"
        )

    fraction = config.balloon_fractions.get(term_years)
    if fraction is None:
        raise ConfigurationInconsistency(
            f"No balloon fraction configured for a {term_years}-year term",
            table="finance.balloon_fractions", key=term_years,
        )

    term_months = term_years * 12
    deferral = config.deferral_months
    repayments = term_months - deferral
    if repayments <= 0:
        raise QuoteValidationError(
            f"Deferral of {deferral} months leaves no repayments in a {term_months}-month term"
        )

    monthly_rate = annual_rate / 12

    # ── Net amount financed ────────────────────────────────────────────
    base_vehicle = price - duty - registration_fee
    gst_exclusive = base_vehicle / (1 + config.gst_rate)
    gst = base_vehicle - gst_exclusive
    claimable_gst = min(gst, config.gst_cap * config.gst_rate)
    non_claimable_gst = gst - claimable_gst

    naf = gst_exclusive + non_claimable_gst + duty + registration_fee + config.establishment_fee

    # ── Brokerage, deferral, balloon ───────────────────────────────────
    brokerage = naf * config.brokerage_rate
    amount_financed = naf + brokerage
    deferred_principal = amount_financed * (1 + monthly_rate) ** deferral
    balloon = naf * fraction

    payment = level_payment(deferred_principal, monthly_rate, balloon, repayments)

    total_repayments = payment * repayments + balloon
    rows = _amortization_rows(amount_financed, monthly_rate, deferral, repayments, payment)

    return FinanceSchedule(
        vehicle_price=round(price, 2),
        gst_exclusive_cost=round(gst_exclusive, 2),
        claimable_gst=round(claimable_gst, 2),
        non_claimable_gst=round(non_claimable_gst, 2),
        duty=round(duty, 2),
        registration_fee=round(registration_fee, 2),
        establishment_fee=round(config.establishment_fee, 2),
        naf=round(naf, 2),
        brokerage=round(brokerage, 2),
        amount_financed=round(amount_financed, 2),
        deferred_principal=round(deferred_principal, 2),
        balloon_fraction=fraction,
        balloon=round(balloon, 2),
        monthly_payment=round(payment, 2),
        term_months=term_months,
        deferral_months=deferral,
        repayment_months=repayments,
        annual_rate=annual_rate,
        total_repayments=round(total_repayments, 2),
        total_interest=round(total_repayments - amount_financed, 2),
        rows=rows,
    )
