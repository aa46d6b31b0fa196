"""Finance — lease schedule, all-up rate solver and lender comparison."""

from novated_lease.finance.schedule import build_schedule, level_payment
from novated_lease.finance.effective_rate import implied_payment, solve_effective_rate
from novated_lease.finance.lenders import LenderRateRegistry, compare_lenders

__all__ = [
    "build_schedule",
    "level_payment",
    "implied_payment",
    "solve_effective_rate",
    "LenderRateRegistry",
    "compare_lenders",
]
