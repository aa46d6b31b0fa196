"""Financial configuration — lease finance and solver inputs."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class FinanceConfig(BaseModel):
    """GST treatment, fees, residuals, term rates and solver bounds.

    These inputs drive the finance schedule, the all-up rate solver and
    the lender comparison.  All fields carry the 2024-25 defaults so a
    bare ``FinanceConfig()`` prices a standard lease.
    """

    # --- GST ---
    gst_rate: float = Field(default=0.10, ge=0, le=0.5, description="GST rate on the vehicle")
    gst_cap: float = Field(
        default=63_340.0, gt=0,
        description="Car limit (ex-GST). Claimable GST is capped at gst_cap × gst_rate; "
                    "the excess is financed.",
    )

    # --- Fees ---
    establishment_fee: float = Field(default=500.0, ge=0, description="Lender establishment fee ($)")
    brokerage_rate: float = Field(default=0.02, ge=0, le=0.10, description="Brokerage as a share of NAF")
    deferral_months: int = Field(
        default=1, ge=0, le=12,
        description="Months after settlement before the first repayment. Interest accrues.",
    )

    # --- Residuals & rates ---
    balloon_fractions: dict[int, float] = Field(
        default_factory=lambda: {1: 0.6563, 2: 0.5625, 3: 0.4688, 4: 0.3750, 5: 0.2813},
        description="Minimum residual as a share of NAF, keyed by term in years.",
    )
    term_rates: dict[int, float] = Field(
        default_factory=lambda: {1: 0.1000, 2: 0.0865, 3: 0.0739, 4: 0.0735, 5: 0.0730},
        description="Nominal annual rate by term when no lender is selected. "
                    "Shorter terms carry higher rates.",
    )

    # --- Effective rate solver ---
    solver_upper_monthly_rate: float = Field(
        default=0.05, gt=0, le=0.5,
        description="Upper bracket for the all-up rate bisection (monthly). "
                    "0.05 = 60% p.a. nominal.",
    )
    solver_tolerance: float = Field(default=1e-5, gt=0, description="Bracket width at which bisection stops")
    solver_max_iterations: int = Field(default=100, ge=1, le=10_000, description="Bisection iteration budget")

    @field_validator("balloon_fractions")
    @classmethod
    def _fractions_in_range(cls, v: dict[int, float]) -> dict[int, float]:
        for term, fraction in v.items():
            if not 0 <= fraction < 1:
                raise ValueError(f"balloon fraction for {term}-year term must be in [0, 1)")
        return v

    @field_validator("term_rates")
    @classmethod
    def _rates_positive(cls, v: dict[int, float]) -> dict[int, float]:
        for term, rate in v.items():
            if not 0 < rate <= 0.5:
                raise ValueError(f"term rate for {term}-year term must be in (0, 0.5]")
        return v
