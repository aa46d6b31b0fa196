"""Jurisdiction duty and registration rule set."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from novated_lease.config.request import Jurisdiction


class DutyBand(BaseModel):
    """One price band of a duty schedule.

    For ``flat`` schedules the band's rate applies to the whole price.
    For ``tiered_excess`` schedules the duty is
    ``base + rate × (price − threshold)``.
    """

    up_to: float | None = Field(default=None, description="Band ceiling (inclusive); None = no ceiling")
    rate: float = Field(ge=0, le=0.25, description="Duty rate for this band")
    threshold: float = Field(default=0.0, ge=0, description="Excess is measured above this value (tiered only)")
    base: float = Field(default=0.0, ge=0, description="Fixed duty at the threshold (tiered only)")


class DutySchedule(BaseModel):
    """Base duty schedule for one jurisdiction."""

    shape: Literal["flat", "tiered_excess"] = Field(
        default="flat",
        description="'flat' = banded percentage of the whole price; "
                    "'tiered_excess' = progressive base + rate on excess.",
    )
    bands: list[DutyBand] = Field(min_length=1)

    @model_validator(mode="after")
    def _ordered(self) -> "DutySchedule":
        ceilings = [b.up_to for b in self.bands]
        if ceilings[-1] is not None:
            raise ValueError("last duty band must have no ceiling")
        bounded = [c for c in ceilings[:-1] if c is not None]
        if len(bounded) != len(ceilings) - 1 or bounded != sorted(bounded):
            raise ValueError("duty band ceilings must be ascending and only the last may be open")
        return self


class EmissionConcession(BaseModel):
    """Duty relief for zero-emission vehicles.

    Modes:
      - ``exempt_below_threshold``: no duty at or below ``threshold``, full duty above.
      - ``excess_above_threshold``: duty charged only on the share of the
        price above ``threshold``.
      - ``percentage_reduction``: duty reduced by ``reduction_pct``.
    """

    mode: Literal["exempt_below_threshold", "excess_above_threshold", "percentage_reduction"]
    threshold: float = Field(default=0.0, ge=0)
    reduction_pct: float = Field(default=0.0, ge=0, le=1.0)
    label: str = Field(default="", description="Human-readable name of the concession")


class RegistrationBand(BaseModel):
    up_to: float | None = Field(default=None, description="Vehicle price ceiling; None = no ceiling")
    fee: float = Field(ge=0)


class JurisdictionRules(BaseModel):
    """Duty + registration rules for one state or territory."""

    duty: DutySchedule
    concession: EmissionConcession | None = None
    registration_fee: float = Field(ge=0, description="Annual registration incl. compulsory third party ($)")
    registration_bands: list[RegistrationBand] = Field(
        default_factory=list,
        description="Optional price-banded registration. Empty = flat registration_fee.",
    )


def _default_jurisdictions() -> dict[Jurisdiction, JurisdictionRules]:
    return {
        Jurisdiction.VIC: JurisdictionRules(
            duty=DutySchedule(shape="flat", bands=[
                DutyBand(up_to=59_999.99, rate=0.033),
                DutyBand(rate=0.042),
            ]),
            registration_fee=900,
        ),
        Jurisdiction.NSW: JurisdictionRules(
            duty=DutySchedule(shape="tiered_excess", bands=[
                DutyBand(up_to=45_000, rate=0.03),
                DutyBand(rate=0.05, threshold=45_000, base=1_350),
            ]),
            concession=EmissionConcession(
                mode="exempt_below_threshold", threshold=78_000,
                label="NSW zero-emission vehicle duty exemption",
            ),
            registration_fee=950,
        ),
        Jurisdiction.QLD: JurisdictionRules(
            duty=DutySchedule(shape="flat", bands=[DutyBand(rate=0.03)]),
            concession=EmissionConcession(
                mode="percentage_reduction", reduction_pct=1 / 3,
                label="QLD low-emission duty rate",
            ),
            registration_fee=850,
        ),
        Jurisdiction.SA: JurisdictionRules(
            duty=DutySchedule(shape="tiered_excess", bands=[
                DutyBand(up_to=1_000, rate=0.0),
                DutyBand(up_to=20_000, rate=0.04, threshold=1_000, base=60),
                DutyBand(rate=0.06, threshold=20_000, base=820),
            ]),
            registration_fee=800,
        ),
        Jurisdiction.WA: JurisdictionRules(
            duty=DutySchedule(shape="flat", bands=[
                DutyBand(up_to=25_000, rate=0.0275),
                DutyBand(up_to=50_000, rate=0.0285),
                DutyBand(rate=0.065),
            ]),
            registration_fee=850,
        ),
        Jurisdiction.TAS: JurisdictionRules(
            duty=DutySchedule(shape="flat", bands=[
                DutyBand(up_to=600, rate=0.03),
                DutyBand(rate=0.04),
            ]),
            concession=EmissionConcession(
                mode="excess_above_threshold", threshold=50_000,
                label="TAS zero-emission duty waiver up to $50,000",
            ),
            registration_fee=750,
        ),
        Jurisdiction.ACT: JurisdictionRules(
            duty=DutySchedule(shape="tiered_excess", bands=[
                DutyBand(up_to=45_000, rate=0.03),
                DutyBand(rate=0.05, threshold=45_000, base=1_350),
            ]),
            concession=EmissionConcession(
                mode="percentage_reduction", reduction_pct=1.0,
                label="ACT zero-emission duty exemption",
            ),
            registration_fee=830,
        ),
        Jurisdiction.NT: JurisdictionRules(
            duty=DutySchedule(shape="flat", bands=[DutyBand(rate=0.03)]),
            registration_fee=790,
        ),
    }


class DutyConfig(BaseModel):
    """Duty and registration rules keyed by jurisdiction code."""

    jurisdictions: dict[Jurisdiction, JurisdictionRules] = Field(default_factory=_default_jurisdictions)
