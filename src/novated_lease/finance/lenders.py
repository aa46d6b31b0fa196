"""Lender rate registry & comparator.

The registry is the only shared mutable state in the engine.  One lock
serialises updates against snapshots, so a comparison never sees a
half-applied rate change.  Comparison itself works on the snapshot
outside the lock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from novated_lease.config.finance import FinanceConfig
from novated_lease.config.lenders import LenderConfig
from novated_lease.errors import QuoteValidationError
from novated_lease.finance.effective_rate import solve_effective_rate
from novated_lease.finance.schedule import build_schedule
from novated_lease.models.results import LenderQuote, RateChange

logger = logging.getLogger(__name__)

MAX_LENDER_RATE = 0.5


class LenderRateRegistry:
    """Current per-lender rates plus an append-only change history."""

    def __init__(self, rates: dict[str, float]):
        for lender, rate in rates.items():
            _check_rate(lender, rate)
        self._lock = threading.Lock()
        self._rates: dict[str, float] = dict(rates)
        self._history: list[RateChange] = []

    @classmethod
    def from_config(cls, config: LenderConfig) -> "LenderRateRegistry":
        return cls(config.rates)

    # ── Reads ─────────────────────────────────────────────────────────

    def current_rates(self) -> dict[str, float]:
        with self._lock:
            return dict(self._rates)

    def rate_for(self, lender_id: str) -> float:
        with self._lock:
            if lender_id not in self._rates:
                raise QuoteValidationError(f"Unknown lender '{lender_id}'")
            return self._rates[lender_id]

    def history(self) -> list[RateChange]:
        with self._lock:
            return list(self._history)

    def best_lender(self) -> tuple[str, float] | None:
        """Lowest-rate lender (ties broken by id), or None when empty."""
        with self._lock:
            if not self._rates:
                return None
            lender = min(self._rates, key=lambda k: (self._rates[k], k))
            return lender, self._rates[lender]

    # ── Mutation ──────────────────────────────────────────────────────

    def update_rate(self, lender_id: str, new_rate: float, reason: str = "") -> RateChange:
        """Replace a lender's rate and record the change.

        Raises
        ------
        QuoteValidationError
            Unknown lender or rate outside (0, 0.5].
        """
        _check_rate(lender_id, new_rate)
        with self._lock:
            if lender_id not in self._rates:
                raise QuoteValidationError(f"Unknown lender '{lender_id}'")
            change = RateChange(
                lender_id=lender_id,
                previous_rate=self._rates[lender_id],
                new_rate=new_rate,
                reason=reason,
                changed_at=datetime.now(timezone.utc),
            )
            self._rates[lender_id] = new_rate
            self._history.append(change)

        logger.info(
            "Lender rate updated",
            extra={
                "lender_id": lender_id,
                "previous_rate": change.previous_rate,
                "new_rate": new_rate,
                "reason": reason,
            },
        )
        return change


def _check_rate(lender_id: str, rate: float) -> None:
    if not 0 < rate <= MAX_LENDER_RATE:
        raise QuoteValidationError(
            f"Rate for lender '{lender_id}' must be in (0, {MAX_LENDER_RATE}], got {rate}"
        )


def compare_lenders(
    registry: LenderRateRegistry,
    price: float,
    duty: float,
    registration_fee: float,
    term_years: int,
    config: FinanceConfig,
) -> list[LenderQuote]:
    """One schedule per registered lender, cheapest payment first.

    Ties on payment are broken by lender id so the order is deterministic.
    """
    rates = registry.current_rates()

    quotes: list[LenderQuote] = []
    for lender_id, rate in rates.items():
        schedule = build_schedule(price, duty, registration_fee, term_years, rate, config)
        all_up = solve_effective_rate(
            schedule.naf,
            schedule.monthly_payment,
            schedule.balloon,
            schedule.repayment_months,
            deferral_months=schedule.deferral_months,
            upper_bound=config.solver_upper_monthly_rate,
            tolerance=config.solver_tolerance,
            max_iterations=config.solver_max_iterations,
        )
        quotes.append(LenderQuote(
            lender_id=lender_id,
            nominal_rate=rate,
            schedule=schedule,
            all_up_rate=all_up,
            total_cost=schedule.total_repayments,
        ))

    quotes.sort(key=lambda q: (q.schedule.monthly_payment, q.lender_id))
    return quotes
