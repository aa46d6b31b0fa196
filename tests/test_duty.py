"""Tests for the jurisdiction duty engine."""

import pytest

from novated_lease.config.duty import (
    DutyBand,
    DutyConfig,
    DutySchedule,
    EmissionConcession,
    JurisdictionRules,
    RegistrationBand,
)
from novated_lease.config.request import Jurisdiction
from novated_lease.engine.duty import (
    EmissionConcessionDuty,
    FlatRateDuty,
    TieredExcessDuty,
    assess_duty,
    build_strategy,
    registration_fee,
)
from novated_lease.errors import ConfigurationInconsistency, QuoteValidationError


class TestStandardSchedules:
    def test_vic_flat_bands(self, duty_config):
        assert assess_duty("VIC", 50_000, False, duty_config).duty == pytest.approx(1_650)
        assert assess_duty("VIC", 59_999.99, False, duty_config).duty == pytest.approx(1_980.00, abs=0.01)
        assert assess_duty("VIC", 60_000, False, duty_config).duty == pytest.approx(2_520)

    def test_wa_middle_band(self, duty_config):
        assert assess_duty(Jurisdiction.WA, 40_000, False, duty_config).duty == pytest.approx(1_140)

    def test_nsw_tiered_excess(self, duty_config):
        assert assess_duty("NSW", 30_000, False, duty_config).duty == pytest.approx(900)
        assert assess_duty("NSW", 60_000, False, duty_config).duty == pytest.approx(2_100)

    def test_sa_tiers_are_continuous(self, duty_config):
        assert assess_duty("SA", 20_000, False, duty_config).duty == pytest.approx(820)
        assert assess_duty("SA", 20_001, False, duty_config).duty == pytest.approx(820.06)
        assert assess_duty("SA", 30_000, False, duty_config).duty == pytest.approx(1_420)

    def test_registration_included(self, duty_config):
        result = assess_duty("VIC", 50_000, False, duty_config)
        assert result.registration_fee == 900
        assert result.government_charges == pytest.approx(2_550)
        assert not result.concession_applied


class TestZeroEmissionConcessions:
    def test_nsw_exempt_below_threshold(self, duty_config):
        result = assess_duty("NSW", 60_000, True, duty_config)
        assert result.duty == 0
        assert result.concession_applied

    def test_nsw_full_duty_above_threshold(self, duty_config):
        result = assess_duty("NSW", 80_000, True, duty_config)
        assert result.duty == pytest.approx(3_100)
        assert not result.concession_applied
        assert "exceeds" in result.concession_explanation

    def test_qld_percentage_reduction(self, duty_config):
        assert assess_duty("QLD", 30_000, True, duty_config).duty == pytest.approx(600)

    def test_tas_charges_only_excess_share(self, duty_config):
        assert assess_duty("TAS", 75_000, True, duty_config).duty == pytest.approx(1_000)
        assert assess_duty("TAS", 40_000, True, duty_config).duty == 0

    def test_act_full_exemption(self, duty_config):
        assert assess_duty("ACT", 90_000, True, duty_config).duty == 0

    def test_concession_needs_zero_emission(self, duty_config):
        result = assess_duty("ACT", 90_000, False, duty_config)
        assert result.duty > 0
        assert not result.concession_applied

    @pytest.mark.parametrize("code", [j.value for j in Jurisdiction])
    @pytest.mark.parametrize("price", [500, 15_000, 45_000, 59_999.99, 78_000, 120_000, 250_000])
    def test_never_negative_and_ze_never_dearer(self, duty_config, code, price):
        standard = assess_duty(code, price, False, duty_config)
        zero_emission = assess_duty(code, price, True, duty_config)
        assert standard.duty >= 0
        assert zero_emission.duty >= 0
        assert zero_emission.duty <= standard.duty


class TestStrategies:
    def test_build_strategy_shapes(self, duty_config):
        assert isinstance(build_strategy(duty_config.jurisdictions[Jurisdiction.VIC]), FlatRateDuty)
        assert isinstance(build_strategy(duty_config.jurisdictions[Jurisdiction.SA]), TieredExcessDuty)
        assert isinstance(build_strategy(duty_config.jurisdictions[Jurisdiction.NSW]), EmissionConcessionDuty)

    def test_concession_wraps_base(self):
        base = FlatRateDuty(DutySchedule(bands=[DutyBand(rate=0.05)]))
        wrapped = EmissionConcessionDuty(
            base, EmissionConcession(mode="percentage_reduction", reduction_pct=0.5),
        )
        assert wrapped.duty(10_000, is_zero_emission=False) == pytest.approx(500)
        assert wrapped.duty(10_000, is_zero_emission=True) == pytest.approx(250)


class TestErrors:
    def test_unknown_jurisdiction_code(self, duty_config):
        with pytest.raises(QuoteValidationError):
            assess_duty("XX", 50_000, False, duty_config)

    def test_jurisdiction_missing_from_rule_set(self, duty_config):
        partial = DutyConfig(jurisdictions={Jurisdiction.VIC: duty_config.jurisdictions[Jurisdiction.VIC]})
        with pytest.raises(ConfigurationInconsistency) as exc_info:
            assess_duty("NT", 50_000, False, partial)
        assert exc_info.value.table == "duty.jurisdictions"
        assert exc_info.value.key == "NT"

    def test_non_positive_price(self, duty_config):
        with pytest.raises(QuoteValidationError):
            assess_duty("VIC", 0, False, duty_config)


class TestRegistration:
    def test_flat_fee(self, duty_config):
        assert registration_fee("NT", 50_000, duty_config) == 790

    def test_banded_fee(self):
        rules = JurisdictionRules(
            duty=DutySchedule(bands=[DutyBand(rate=0.03)]),
            registration_fee=800,
            registration_bands=[RegistrationBand(up_to=50_000, fee=700), RegistrationBand(fee=1_100)],
        )
        config = DutyConfig(jurisdictions={Jurisdiction.NT: rules})
        assert registration_fee("NT", 40_000, config) == 700
        assert registration_fee("NT", 80_000, config) == 1_100
