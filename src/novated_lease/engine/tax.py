"""Tax bracket engine.

Pure arithmetic over a progressive band table:
  tax(income)   = base_tax + (min(income, upper) − threshold) × rate
  saving(i, d)  = tax(i) − tax(max(0, i − d))

where ``threshold`` is the amount the band's rate is charged above
(the previous band's ceiling, e.g. "30c for each $1 over $45,000").
"""

from __future__ import annotations

from novated_lease.config.tax import TaxBand, TaxConfig


def _threshold(band: TaxBand, config: TaxConfig) -> float:
    return max(band.lower_bound - config.smallest_unit, 0.0)


def _band_for(income: float, config: TaxConfig) -> TaxBand:
    # For whole-dollar incomes this is the highest band whose lower bound
    # is <= income; cents between two bands fall into the upper one so the
    # tax curve stays continuous.
    band = config.bands[0]
    for candidate in config.bands[1:]:
        if _threshold(candidate, config) < income:
            band = candidate
        else:
            break
    return band


def annual_tax(income: float, config: TaxConfig) -> float:
    """Income tax payable on ``income`` (negative income is clamped to 0)."""
    income = max(0.0, income)
    band = _band_for(income, config)
    top = income if band.upper_bound is None else min(income, band.upper_bound)
    return band.base_tax + max(top - _threshold(band, config), 0.0) * band.rate


def tax_saving(income: float, deductible_amount: float, config: TaxConfig) -> float:
    """Income tax saved by deducting ``deductible_amount`` from ``income`` pre-tax.

    Non-decreasing in ``deductible_amount`` and never more than
    ``deductible_amount × top marginal rate``.
    """
    income = max(0.0, income)
    deductible_amount = max(0.0, deductible_amount)
    return annual_tax(income, config) - annual_tax(max(0.0, income - deductible_amount), config)


def marginal_rate(income: float, config: TaxConfig) -> float:
    """Marginal rate applying to the last dollar of ``income``."""
    return _band_for(max(0.0, income), config).rate
