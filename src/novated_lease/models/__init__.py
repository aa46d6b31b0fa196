"""Result models — quote output contracts."""

from novated_lease.models.results import (
    AmortizationRow,
    DutyAssessment,
    EffectiveRateResult,
    FinanceSchedule,
    FringeBenefitAllocation,
    LenderQuote,
    PurchaseComparison,
    Quote,
    QuoteSummary,
    RateChange,
    Recommendation,
    RunningCostProfile,
)

__all__ = [
    "AmortizationRow",
    "DutyAssessment",
    "EffectiveRateResult",
    "FinanceSchedule",
    "FringeBenefitAllocation",
    "LenderQuote",
    "PurchaseComparison",
    "Quote",
    "QuoteSummary",
    "RateChange",
    "Recommendation",
    "RunningCostProfile",
]
