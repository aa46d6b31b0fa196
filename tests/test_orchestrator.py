"""Tests for the quote orchestrator — end-to-end pricing of one lease."""

import re

import pytest
from pydantic import ValidationError

from novated_lease.config import QuoteConfig
from novated_lease.config.finance import FinanceConfig
from novated_lease.engine.orchestrator import generate_quote, quote_reference
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError


class TestQuoteAssembly:
    def test_reference_format(self, quote_config, make_request, now):
        quote = generate_quote(make_request(), quote_config, now=now)
        assert re.fullmatch(r"Q-20250314-[0-9A-F]{6}", quote.reference)
        assert quote.created_at == now

    def test_references_are_unique(self, now):
        assert len({quote_reference(now) for _ in range(50)}) == 50

    def test_components_reconcile(self, quote_config, make_request, now):
        quote = generate_quote(make_request(), quote_config, now=now)
        assert quote.duty.duty == pytest.approx(1_815)
        assert quote.finance.duty == quote.duty.duty
        assert quote.running_costs.registration == quote.duty.registration_fee
        assert quote.annual_finance_cost == pytest.approx(quote.finance.monthly_payment * 12, abs=0.01)
        assert quote.total_annual_cost == pytest.approx(
            quote.annual_finance_cost + quote.running_costs.total, abs=0.01,
        )
        assert quote.periodic_out_of_pocket == quote.fringe_benefit.periodic_deduction

    def test_term_rate_used_without_lender(self, quote_config, make_request, now):
        quote = generate_quote(make_request(term_years=4), quote_config, now=now)
        assert quote.finance.annual_rate == 0.0735
        assert quote.lender_id is None

    def test_all_up_rate_exceeds_nominal(self, quote_config, make_request, now):
        quote = generate_quote(make_request(), quote_config, now=now)
        assert quote.all_up_rate.converged
        assert quote.all_up_rate.annual_rate_pct > quote.finance.annual_rate * 100

    def test_marginal_rate(self, quote_config, make_request, now):
        assert generate_quote(make_request(), quote_config, now=now).marginal_tax_rate == 0.30

    def test_rule_set_and_class(self, quote_config, make_request, now):
        quote = generate_quote(make_request(body_style="Small Sport Utility Vehicles"), quote_config, now=now)
        assert quote.rule_set == "AU 2024-25"
        assert quote.vehicle_class.value == "SUV"

    def test_quote_is_immutable(self, quote_config, make_request, now):
        quote = generate_quote(make_request(), quote_config, now=now)
        with pytest.raises(ValidationError):
            quote.total_annual_cost = 0

    def test_default_config(self, make_request):
        assert generate_quote(make_request()).rule_set == "AU 2024-25"


class TestComparisonAndSummary:
    def test_after_tax_purchase(self, quote_config, make_request, now):
        quote = generate_quote(make_request(), quote_config, now=now)
        expected = 55_000 / 36 + quote.running_costs.total / 12
        assert quote.comparison.after_tax_purchase_monthly == pytest.approx(expected, abs=0.01)
        assert quote.comparison.novated_lease_monthly == pytest.approx(
            quote.fringe_benefit.net_annual_cost / 12, abs=0.01,
        )

    def test_summary_over_term(self, quote_config, make_request, now):
        quote = generate_quote(make_request(), quote_config, now=now)
        assert quote.summary.total_cost_of_ownership == pytest.approx(quote.total_annual_cost * 3, abs=0.05)
        assert quote.summary.total_tax_savings == pytest.approx(
            quote.fringe_benefit.total_tax_saving * 3, abs=0.05,
        )


class TestLenderRates:
    def test_lender_rate_used(self, quote_config, registry, make_request, now):
        quote = generate_quote(make_request(lender_id="macquarie"), quote_config, registry, now=now)
        assert quote.finance.annual_rate == 0.065
        assert quote.lender_id == "macquarie"

    def test_lender_without_registry(self, quote_config, make_request, now):
        with pytest.raises(QuoteValidationError):
            generate_quote(make_request(lender_id="macquarie"), quote_config, now=now)

    def test_unknown_lender(self, quote_config, registry, make_request, now):
        with pytest.raises(QuoteValidationError):
            generate_quote(make_request(lender_id="nab"), quote_config, registry, now=now)


class TestConfigurationErrors:
    def test_missing_term_rate(self, make_request, now):
        config = QuoteConfig(finance=FinanceConfig(term_rates={1: 0.10}))
        with pytest.raises(ConfigurationInconsistency) as exc_info:
            generate_quote(make_request(term_years=3), config, now=now)
        assert exc_info.value.table == "finance.term_rates"
        assert exc_info.value.key == 3


class TestAdvice:
    def test_affordability_warnings(self, quote_config, make_request, now):
        quote = generate_quote(
            make_request(vehicle_price=80_000, annual_income=40_000, annual_distance_km=30_000),
            quote_config, now=now,
        )
        assert len(quote.warnings) == 3
        assert any("1.5x" in w for w in quote.warnings)
        assert any("kilometres" in w for w in quote.warnings)
        assert any("lower-priced" in w for w in quote.warnings)

    def test_no_warnings_for_typical_lease(self, quote_config, make_request, now):
        assert generate_quote(make_request(), quote_config, now=now).warnings == []

    def test_zero_emission_recommendation(self, quote_config, make_request, now):
        quote = generate_quote(
            make_request(is_zero_emission=True, engine_size_litres=0, fuel_type="electric"),
            quote_config, now=now,
        )
        assert "Zero-emission vehicle benefits" in [r.title for r in quote.recommendations]

    def test_zero_emission_above_threshold_not_recommended(self, quote_config, make_request, now):
        quote = generate_quote(
            make_request(vehicle_price=90_000, is_zero_emission=True, engine_size_litres=0, fuel_type="electric"),
            quote_config, now=now,
        )
        assert quote.fringe_benefit.policy == "contribution_method"
        assert "Zero-emission vehicle benefits" not in [r.title for r in quote.recommendations]

    def test_high_mileage_recommendation(self, quote_config, make_request, now):
        quote = generate_quote(make_request(annual_distance_km=22_000), quote_config, now=now)
        assert "High mileage considerations" in [r.title for r in quote.recommendations]
        assert quote.warnings == []

    def test_short_term_for_cheap_vehicle(self, quote_config, make_request, now):
        quote = generate_quote(make_request(vehicle_price=25_000, term_years=5), quote_config, now=now)
        assert any(r.priority == "low" for r in quote.recommendations)
