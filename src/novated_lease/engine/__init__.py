"""Engine — tax, duty, running costs, fringe benefits and the quote pipeline."""

from novated_lease.engine.tax import annual_tax, marginal_rate, tax_saving
from novated_lease.engine.duty import assess_duty, registration_fee
from novated_lease.engine.running_costs import classify_vehicle, estimate_running_costs
from novated_lease.engine.fringe_benefit import allocate
from novated_lease.engine.orchestrator import generate_quote

__all__ = [
    "annual_tax",
    "marginal_rate",
    "tax_saving",
    "assess_duty",
    "registration_fee",
    "classify_vehicle",
    "estimate_running_costs",
    "allocate",
    "generate_quote",
]
