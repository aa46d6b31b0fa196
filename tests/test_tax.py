"""Tests for the tax bracket engine."""

import pytest
from pydantic import ValidationError

from novated_lease.config.tax import TaxBand, TaxConfig
from novated_lease.engine.tax import annual_tax, marginal_rate, tax_saving


class TestAnnualTax:
    def test_tax_free_threshold(self, tax_config):
        assert annual_tax(0, tax_config) == 0
        assert annual_tax(18_200, tax_config) == 0

    def test_band_boundaries_match_published_bases(self, tax_config):
        assert annual_tax(45_000, tax_config) == pytest.approx(4_288)
        assert annual_tax(135_000, tax_config) == pytest.approx(31_288)
        assert annual_tax(190_000, tax_config) == pytest.approx(51_638)

    def test_top_band(self, tax_config):
        # 51,638 + 45c for each $1 over 190,000
        assert annual_tax(200_000, tax_config) == pytest.approx(56_138)

    def test_negative_income_clamped(self, tax_config):
        assert annual_tax(-5_000, tax_config) == 0

    def test_continuous_across_cents_between_bands(self, tax_config):
        assert annual_tax(45_000.5, tax_config) == pytest.approx(4_288.15)
        assert annual_tax(18_200.5, tax_config) == pytest.approx(0.08)


class TestTaxSaving:
    def test_manual_band_computation(self, tax_config):
        # 80,000 → 14,788; 70,000 → 11,788
        assert tax_saving(80_000, 10_000, tax_config) == pytest.approx(3_000)

    def test_saving_spanning_two_bands(self, tax_config):
        # 50,000 → 5,788; 40,000 → 3,488
        assert tax_saving(50_000, 10_000, tax_config) == pytest.approx(2_300)

    def test_deduction_larger_than_income(self, tax_config):
        assert tax_saving(30_000, 50_000, tax_config) == pytest.approx(annual_tax(30_000, tax_config))

    def test_negative_deduction_is_zero(self, tax_config):
        assert tax_saving(80_000, -1_000, tax_config) == 0

    @pytest.mark.parametrize("income", [0, 18_200, 30_000, 45_000, 90_000, 150_000, 250_000])
    def test_monotonic_in_deduction(self, tax_config, income):
        savings = [tax_saving(income, d, tax_config) for d in range(0, 60_001, 2_500)]
        assert all(b >= a - 1e-9 for a, b in zip(savings, savings[1:]))

    @pytest.mark.parametrize("income", [20_000, 45_001, 135_000.5, 190_000, 400_000])
    @pytest.mark.parametrize("deduction", [0.01, 1, 999.99, 12_345, 80_000])
    def test_bounded_by_top_rate(self, tax_config, income, deduction):
        assert tax_saving(income, deduction, tax_config) <= deduction * tax_config.top_rate + 1e-6


class TestMarginalRate:
    def test_rates_by_income(self, tax_config):
        assert marginal_rate(10_000, tax_config) == 0.0
        assert marginal_rate(18_200, tax_config) == 0.0
        assert marginal_rate(18_200.5, tax_config) == 0.16
        assert marginal_rate(80_000, tax_config) == 0.30
        assert marginal_rate(150_000, tax_config) == 0.37
        assert marginal_rate(500_000, tax_config) == 0.45


class TestTaxConfigValidation:
    def test_top_rate(self, tax_config):
        assert tax_config.top_rate == 0.45

    def test_gap_between_bands_rejected(self):
        with pytest.raises(ValidationError):
            TaxConfig(bands=[
                TaxBand(lower_bound=0, upper_bound=18_200, rate=0),
                TaxBand(lower_bound=20_000, rate=0.16),
            ])

    def test_wrong_base_tax_rejected(self):
        with pytest.raises(ValidationError):
            TaxConfig(bands=[
                TaxBand(lower_bound=0, upper_bound=18_200, rate=0),
                TaxBand(lower_bound=18_201, upper_bound=45_000, rate=0.16, base_tax=0),
                TaxBand(lower_bound=45_001, rate=0.30, base_tax=5_092),
            ])

    def test_bounded_last_band_rejected(self):
        with pytest.raises(ValidationError):
            TaxConfig(bands=[TaxBand(lower_bound=0, upper_bound=100_000, rate=0.2)])

    def test_single_flat_band(self):
        config = TaxConfig(bands=[TaxBand(lower_bound=0, rate=0.2)])
        assert annual_tax(50_000, config) == pytest.approx(10_000)
        assert tax_saving(50_000, 5_000, config) == pytest.approx(1_000)
