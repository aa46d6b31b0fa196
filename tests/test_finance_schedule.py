"""Tests for the finance schedule engine."""

import pytest

from novated_lease.config.finance import FinanceConfig
from novated_lease.finance.schedule import build_schedule, level_payment
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError


def _vic_schedule(config, price=55_000, term_years=3, rate=0.0739):
    duty = price * 0.033 if price < 60_000 else price * 0.042
    return build_schedule(price, duty, 900, term_years, rate, config)


class TestLevelPayment:
    def test_no_balloon_matches_annuity(self):
        # $10,000 over 12 months at 1%/month
        assert level_payment(10_000, 0.01, 0, 12) == pytest.approx(888.49, abs=0.01)

    def test_balloon_lowers_payment(self):
        assert level_payment(10_000, 0.01, 5_000, 12) < level_payment(10_000, 0.01, 0, 12)


class TestBuildSchedule:
    def test_naf_identity(self, finance_config):
        s = _vic_schedule(finance_config)
        expected = s.gst_exclusive_cost + s.non_claimable_gst + s.duty + s.registration_fee + s.establishment_fee
        assert s.naf == pytest.approx(expected, abs=0.03)

    def test_gst_below_cap_fully_claimable(self, finance_config):
        s = _vic_schedule(finance_config)
        assert s.non_claimable_gst == 0
        assert s.claimable_gst == pytest.approx((55_000 - 1_815 - 900) / 11, abs=0.01)

    def test_gst_above_cap_is_financed(self, finance_config):
        s = _vic_schedule(finance_config, price=120_000)
        assert s.claimable_gst == pytest.approx(6_334)
        assert s.non_claimable_gst > 0

    def test_brokerage_and_amount_financed(self, finance_config):
        s = _vic_schedule(finance_config)
        assert s.brokerage == pytest.approx(s.naf * 0.02, abs=0.01)
        assert s.amount_financed == pytest.approx(s.naf + s.brokerage, abs=0.02)

    def test_balloon_from_term_table(self, finance_config):
        for term, fraction in finance_config.balloon_fractions.items():
            s = _vic_schedule(finance_config, term_years=term)
            assert s.balloon_fraction == fraction
            assert s.balloon == pytest.approx(s.naf * fraction, abs=0.01)

    def test_deferral_months(self, finance_config):
        s = _vic_schedule(finance_config)
        assert s.term_months == 36
        assert s.deferral_months == 1
        assert s.repayment_months == 35
        assert s.deferred_principal == pytest.approx(s.amount_financed * (1 + 0.0739 / 12), abs=0.02)

    def test_amortization_rows(self, finance_config):
        s = _vic_schedule(finance_config)
        assert len(s.rows) == 36
        first = s.rows[0]
        assert first.payment == 0
        assert first.closing_balance > first.opening_balance  # interest capitalised
        assert all(r.payment == pytest.approx(s.monthly_payment, abs=0.01) for r in s.rows[1:])
        assert s.rows[-1].closing_balance == pytest.approx(s.balloon, abs=0.05)

    def test_totals(self, finance_config):
        s = _vic_schedule(finance_config)
        assert s.total_repayments == pytest.approx(s.monthly_payment * 35 + s.balloon, abs=1.0)
        assert s.total_interest == pytest.approx(s.total_repayments - s.amount_financed, abs=0.02)
        assert s.total_interest > 0

    def test_higher_rate_higher_payment(self, finance_config):
        low = _vic_schedule(finance_config, rate=0.05)
        high = _vic_schedule(finance_config, rate=0.09)
        assert high.monthly_payment > low.monthly_payment

    def test_no_deferral(self):
        config = FinanceConfig(deferral_months=0)
        s = _vic_schedule(config)
        assert s.repayment_months == 36
        assert s.deferred_principal == s.amount_financed
        assert s.rows[0].payment > 0


class TestErrors:
    def test_zero_rate(self, finance_config):
        with pytest.raises(QuoteValidationError):
            _vic_schedule(finance_config, rate=0)

    def test_negative_rate(self, finance_config):
        with pytest.raises(QuoteValidationError):
            _vic_schedule(finance_config, rate=-0.01)

    def test_non_positive_price(self, finance_config):
        with pytest.raises(QuoteValidationError):
            build_schedule(0, 0, 0, 3, 0.07, finance_config)

    @pytest.mark.parametrize("price", [500, 916.5])
    def test_price_not_above_government_charges(self, finance_config, price):
        with pytest.raises(QuoteValidationError):
            build_schedule(price, 16.5, 900, 3, 0.0739, finance_config)

    def test_price_just_above_government_charges(self, finance_config):
        schedule = build_schedule(917.5, 16.5, 900, 3, 0.0739, finance_config)
        assert schedule.gst_exclusive_cost >= 0
        assert schedule.claimable_gst >= 0

    def test_missing_balloon_fraction(self):
        config = FinanceConfig(balloon_fractions={1: 0.6563})
        with pytest.raises(ConfigurationInconsistency) as exc_info:
            _vic_schedule(config, term_years=3)
        assert exc_info.value.table == "finance.balloon_fractions"
        assert exc_info.value.key == 3

    def test_deferral_consumes_term(self):
        config = FinanceConfig(deferral_months=12)
        with pytest.raises(QuoteValidationError):
            _vic_schedule(config, term_years=1)
