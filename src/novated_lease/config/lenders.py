"""Lender rate table — seeds the rate registry at startup."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class LenderConfig(BaseModel):
    """Current nominal annual rate per lender id."""

    rates: dict[str, float] = Field(
        default_factory=lambda: {"macquarie": 0.0650, "westpac": 0.0695, "anz": 0.0740},
        description="Nominal annual rate by lender id (0.065 = 6.50%).",
    )

    @field_validator("rates")
    @classmethod
    def _rates_in_range(cls, v: dict[str, float]) -> dict[str, float]:
        for lender, rate in v.items():
            if not 0 < rate <= 0.5:
                raise ValueError(f"rate for lender '{lender}' must be in (0, 0.5]")
        return v
