"""Affordability warnings and quote recommendations."""

from __future__ import annotations

from novated_lease.config.request import LeaseRequest
from novated_lease.models.results import Recommendation

HIGH_DISTANCE_WARNING_KM = 25_000
HIGH_DISTANCE_ADVICE_KM = 20_000
HIGH_ALL_UP_RATE_PCT = 10.0
STRONG_SAVINGS_OVER_TERM = 10_000


def affordability_warnings(request: LeaseRequest) -> list[str]:
    """Soft warnings that do not block the quote."""
    warnings: list[str] = []
    if request.vehicle_price > request.annual_income * 1.5:
        warnings.append("Vehicle price is more than 1.5x annual salary - may affect loan approval")
    if request.annual_distance_km > HIGH_DISTANCE_WARNING_KM:
        warnings.append("High annual kilometres may result in higher running costs")
    if request.annual_income < 50_000 and request.vehicle_price > 40_000:
        warnings.append("Consider a lower-priced vehicle for better affordability")
    return warnings


def recommend(
    request: LeaseRequest,
    saving_over_term: float,
    all_up_rate_pct: float,
    policy: str,
) -> list[Recommendation]:
    """Quote recommendations.  ``policy`` is the fringe benefit policy the allocator applied."""
    recommendations: list[Recommendation] = []

    if saving_over_term > STRONG_SAVINGS_OVER_TERM:
        recommendations.append(Recommendation(
            kind="savings",
            priority="high",
            title="Excellent tax savings",
            message=(
                f"This novated lease saves ${saving_over_term:,.0f} over {request.term_years} "
                f"years compared to an after-tax purchase."
            ),
        ))

    if all_up_rate_pct > HIGH_ALL_UP_RATE_PCT:
        recommendations.append(Recommendation(
            kind="warning",
            priority="medium",
            title="Consider a shorter term",
            message="The all-up rate is above market rates. Consider a shorter term or a larger deposit.",
        ))

    if policy == "zero_emission_exemption":
        recommendations.append(Recommendation(
            kind="benefit",
            priority="high",
            title="Zero-emission vehicle benefits",
            message="Eligible zero-emission vehicles are exempt from FBT, so the whole lease can be paid pre-tax.",
        ))

    if request.annual_distance_km > HIGH_DISTANCE_ADVICE_KM:
        recommendations.append(Recommendation(
            kind="advice",
            priority="medium",
            title="High mileage considerations",
            message="With high annual mileage, consider a more fuel-efficient or hybrid vehicle.",
        ))

    if request.term_years >= 4 and request.vehicle_price < 30_000:
        recommendations.append(Recommendation(
            kind="advice",
            priority="low",
            title="Consider a shorter term",
            message="For lower-value vehicles, shorter lease terms often provide better value.",
        ))

    return recommendations
