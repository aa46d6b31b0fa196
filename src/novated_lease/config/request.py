"""Lease request — the validated input to one quote."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from novated_lease.errors import QuoteValidationError


class Jurisdiction(str, Enum):
    """State or territory whose duty and registration rules apply."""

    VIC = "VIC"
    NSW = "NSW"
    QLD = "QLD"
    SA = "SA"
    WA = "WA"
    TAS = "TAS"
    ACT = "ACT"
    NT = "NT"


class FringeBenefitMethod(str, Enum):
    """Fringe-benefit election for the lease."""

    CONTRIBUTION = "contribution_method"
    OPERATING_COST = "operating_cost_method"


class PayFrequency(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"

    @property
    def periods_per_year(self) -> int:
        return {"weekly": 52, "fortnightly": 26, "monthly": 12}[self.value]


class LeaseRequest(BaseModel):
    """Everything the engine needs to price one lease.

    Constructed once at the boundary and never mutated.  Unknown fields are
    rejected so that loosely-typed form payloads cannot leak into the engine.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # --- Vehicle ---
    vehicle_price: float = Field(gt=0, description="Drive-away price incl. GST and on-road costs ($)")
    is_zero_emission: bool = Field(default=False, description="Battery-electric or hydrogen fuel-cell vehicle")
    body_style: str = Field(default="sedan", description="Catalog body style, e.g. 'Small Sport Utility Vehicles'")
    make: str | None = Field(default=None, description="Manufacturer, used for luxury / EV-native classing")
    model: str | None = Field(default=None, description="Model name (display and image prompts only)")
    year: int | None = Field(default=None, ge=1950, le=2100, description="Model year")
    engine_size_litres: float = Field(default=2.0, ge=0, le=8.0, description="Engine displacement (L); 0 for EVs")
    fuel_type: str = Field(default="petrol", description="petrol, diesel, hybrid, lpg or electric")

    # --- Lease ---
    jurisdiction: Jurisdiction = Field(description="Registration state / territory")
    term_years: int = Field(ge=1, le=5, description="Lease term in whole years")
    annual_distance_km: float = Field(gt=0, description="Expected kilometres per year")
    lender_id: str | None = Field(
        default=None,
        description="Quote at this registered lender's rate. "
                    "None = use the term-rate table.",
    )

    # --- Employee / tax ---
    annual_income: float = Field(ge=0, description="Gross annual salary ($)")
    fbt_method: FringeBenefitMethod = Field(
        default=FringeBenefitMethod.CONTRIBUTION,
        description="Fringe-benefit election",
    )
    business_use_percent: float | None = Field(
        default=None, ge=0, le=100,
        description="Declared business use (%). Required for the operating-cost method.",
    )
    pay_frequency: PayFrequency = Field(default=PayFrequency.MONTHLY, description="Payroll cycle")

    @model_validator(mode="after")
    def _business_use_required_for_operating_cost(self) -> "LeaseRequest":
        if self.fbt_method is FringeBenefitMethod.OPERATING_COST and self.business_use_percent is None:
            raise ValueError("business_use_percent is required for the operating-cost method")
        return self


def build_lease_request(data: dict[str, Any]) -> LeaseRequest:
    """Validate a raw payload into a ``LeaseRequest``.

    Raises
    ------
    QuoteValidationError
        With one message per offending field.
    """
    try:
        return LeaseRequest(**data)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise QuoteValidationError("Invalid lease request", errors) from exc
