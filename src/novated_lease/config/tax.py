"""Income tax configuration — resident marginal bands and levy."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class TaxBand(BaseModel):
    """One marginal band.  ``upper_bound=None`` means unbounded."""

    lower_bound: float = Field(ge=0, description="First dollar taxed at this band's rate")
    upper_bound: float | None = Field(default=None, description="Last dollar in the band; None = no ceiling")
    rate: float = Field(ge=0, le=1.0, description="Marginal rate on each dollar in the band")
    base_tax: float = Field(default=0.0, ge=0, description="Tax accrued on all income below this band")


def _default_bands() -> list[TaxBand]:
    # 2024-25 resident rates
    return [
        TaxBand(lower_bound=0, upper_bound=18_200, rate=0.0, base_tax=0),
        TaxBand(lower_bound=18_201, upper_bound=45_000, rate=0.16, base_tax=0),
        TaxBand(lower_bound=45_001, upper_bound=135_000, rate=0.30, base_tax=4_288),
        TaxBand(lower_bound=135_001, upper_bound=190_000, rate=0.37, base_tax=31_288),
        TaxBand(lower_bound=190_001, upper_bound=None, rate=0.45, base_tax=51_638),
    ]


class TaxConfig(BaseModel):
    """Progressive income tax table plus the flat levy.

    Bands must be ordered, start at zero, be contiguous
    (``lower[i] == upper[i-1] + smallest_unit``), end unbounded, and carry
    base amounts that match the tax accrued at the top of the previous band.
    """

    bands: list[TaxBand] = Field(default_factory=_default_bands)
    smallest_unit: float = Field(default=1.0, gt=0, description="Currency step between adjacent bands ($)")
    levy_rate: float = Field(
        default=0.02, ge=0, le=0.10,
        description="Flat levy on taxable income (Medicare levy); saved on every pre-tax dollar.",
    )

    @model_validator(mode="after")
    def _check_bands(self) -> "TaxConfig":
        bands = self.bands
        if not bands:
            raise ValueError("tax table must contain at least one band")
        if bands[0].lower_bound != 0:
            raise ValueError("first tax band must start at 0")
        if bands[-1].upper_bound is not None:
            raise ValueError("last tax band must be unbounded")

        for prev, band in zip(bands, bands[1:]):
            if prev.upper_bound is None:
                raise ValueError("only the last tax band may be unbounded")
            if abs(band.lower_bound - (prev.upper_bound + self.smallest_unit)) > 1e-9:
                raise ValueError(
                    f"tax band starting at {band.lower_bound} is not contiguous "
                    f"with band ending at {prev.upper_bound}"
                )
            prev_threshold = max(prev.lower_bound - self.smallest_unit, 0.0)
            accrued = prev.base_tax + (prev.upper_bound - prev_threshold) * prev.rate
            if abs(band.base_tax - accrued) > self.smallest_unit:
                raise ValueError(
                    f"tax band starting at {band.lower_bound} has base {band.base_tax}, "
                    f"expected {accrued:.2f}"
                )
        return self

    @property
    def top_rate(self) -> float:
        return max(b.rate for b in self.bands)
