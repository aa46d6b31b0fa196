"""Fringe benefits tax configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FringeBenefitConfig(BaseModel):
    """FBT thresholds and rates (2024-25)."""

    ev_exemption_threshold: float = Field(
        default=84_916.0, gt=0,
        description="Luxury car tax threshold for fuel-efficient vehicles. Zero-emission "
                    "vehicles at or below it are FBT exempt (benefit still reportable).",
    )
    statutory_rate: float = Field(
        default=0.20, ge=0, le=1.0,
        description="Statutory fraction of the base value that forms the annual taxable value.",
    )
    fbt_rate: float = Field(default=0.47, ge=0, le=1.0, description="FBT rate on the grossed-up value")
    gross_up_rate: float = Field(
        default=2.0802, ge=1.0,
        description="Type 1 gross-up (GST-creditable benefits).",
    )
