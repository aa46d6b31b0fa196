"""Effective ("all-up") rate solver.

Inverts the finance schedule's annuity formula by bisection over the
monthly rate.  The implied payment rises with the rate, so the bracket
moves toward whichever half still straddles the known payment.

The loop is bounded by ``max_iterations`` regardless of input; a payment
no rate in ``[0, upper_bound]`` can reproduce returns the nearest bound
with ``at_boundary=True``.
"""

from __future__ import annotations

import logging

from novated_lease.finance.schedule import level_payment
from novated_lease.models.results import EffectiveRateResult

logger = logging.getLogger(__name__)


def implied_payment(
    principal: float,
    monthly_rate: float,
    balloon: float,
    repayments: int,
    deferral_months: int = 0,
) -> float:
    """Payment the schedule engine would produce at ``monthly_rate``."""
    if monthly_rate <= 0:
        return (principal - balloon) / repayments
    deferred = principal * (1 + monthly_rate) ** deferral_months
    return level_payment(deferred, monthly_rate, balloon, repayments)


def solve_effective_rate(
    principal: float,
    known_payment: float,
    balloon: float,
    term_months: int,
    deferral_months: int = 0,
    upper_bound: float = 0.05,
    tolerance: float = 1e-5,
    max_iterations: int = 100,
) -> EffectiveRateResult:
    """Annualised rate reconciling principal, balloon and payment.

    Parameters
    ----------
    principal : float
        Amount advanced at settlement.  Pass NAF for the all-up rate (so
        brokerage shows up as cost), or the amount financed to recover the
        nominal rate.
    known_payment : float
        Level monthly repayment.
    balloon : float
        Residual due after the last repayment.
    term_months : int
        Number of repayments.
    deferral_months : int
        Months between settlement and the first repayment.
    """
    if term_months <= 0:
        return EffectiveRateResult(
            annual_rate_pct=0.0, monthly_rate=0.0, iterations=0, converged=False, at_boundary=True,
        )

    def _implied(r: float) -> float:
        return implied_payment(principal, r, balloon, term_months, deferral_months)

    low, high = 0.0, upper_bound

    # ── Infeasible payments → boundary ─────────────────────────────────
    if known_payment <= _implied(low):
        return EffectiveRateResult(
            annual_rate_pct=0.0, monthly_rate=0.0, iterations=0, converged=True, at_boundary=True,
        )
    if known_payment >= _implied(high):
        logger.warning(
            "Payment %.2f exceeds the implied payment at the %.2f%%/month ceiling",
            known_payment, upper_bound * 100,
        )
        return EffectiveRateResult(
            annual_rate_pct=round(high * 12 * 100, 2), monthly_rate=high,
            iterations=0, converged=True, at_boundary=True,
        )

    # ── Bisection ──────────────────────────────────────────────────────
    iterations = 0
    while high - low > tolerance and iterations < max_iterations:
        mid = (low + high) / 2
        if _implied(mid) > known_payment:
            high = mid
        else:
            low = mid
        iterations += 1

    converged = high - low <= tolerance
    if not converged:
        logger.warning(
            "All-up rate bisection stopped after %d iterations with bracket %.2e",
            iterations, high - low,
        )

    monthly = (low + high) / 2
    return EffectiveRateResult(
        annual_rate_pct=round(monthly * 12 * 100, 2),
        monthly_rate=monthly,
        iterations=iterations,
        converged=converged,
    )
