"""Tests for the running cost estimator."""

import pytest

from novated_lease.config.vehicle import VehicleClass
from novated_lease.engine.running_costs import classify_vehicle, estimate_running_costs
from novated_lease.errors import QuoteValidationError


def _estimate(config, **overrides):
    fields = dict(
        body_style="sedan",
        make=None,
        engine_size_litres=2.0,
        fuel_type="petrol",
        annual_distance_km=15_000,
        is_zero_emission=False,
        vehicle_value=50_000,
        config=config,
    )
    fields.update(overrides)
    return estimate_running_costs(**fields)


class TestClassification:
    @pytest.mark.parametrize("body, expected", [
        ("Small Sport Utility Vehicles", VehicleClass.SUV),
        ("Crossover", VehicleClass.SUV),
        ("Standard Pickup Trucks", VehicleClass.UTE),
        ("Hatchback", VehicleClass.HATCH),
        ("Compact Cars", VehicleClass.HATCH),
        ("Minivan", VehicleClass.VAN),
        ("Passenger Vans", VehicleClass.VAN),
        ("Two Seaters", VehicleClass.LARGE_UTE),
        ("Small Station Wagons", VehicleClass.SEDAN),
        ("Sedan", VehicleClass.SEDAN),
        ("Hovercraft", VehicleClass.SEDAN),
        ("", VehicleClass.SEDAN),
    ])
    def test_body_styles(self, running_cost_config, body, expected):
        assert classify_vehicle(body, None, running_cost_config) == expected

    def test_luxury_make_overrides_body(self, running_cost_config):
        assert classify_vehicle("Small Sport Utility Vehicles", "BMW", running_cost_config) == VehicleClass.LUXURY

    def test_ev_native_make(self, running_cost_config):
        assert classify_vehicle("Sedan", "Tesla", running_cost_config) == VehicleClass.EV


class TestEstimate:
    def test_petrol_sedan_breakdown(self, running_cost_config):
        rc = _estimate(running_cost_config)
        assert rc.vehicle_class == VehicleClass.SEDAN
        assert rc.service == pytest.approx(480)
        assert rc.tyres == pytest.approx(90)
        assert rc.energy == pytest.approx(2_550)  # 150 × 8.5 L × $2.00
        assert rc.insurance == pytest.approx(1_900)
        assert rc.registration == pytest.approx(900)
        assert rc.management_fee == pytest.approx(264)
        assert rc.total == pytest.approx(6_184)

    def test_zero_emission_sedan(self, running_cost_config):
        rc = _estimate(running_cost_config, is_zero_emission=True, engine_size_litres=0, fuel_type="electric")
        assert rc.service == pytest.approx(408)
        assert rc.tyres == pytest.approx(76.5)
        assert rc.energy == pytest.approx(630)  # 150 × 15 kWh × $0.28
        assert rc.total == pytest.approx(4_178.5)

    def test_fuel_type_factor(self, running_cost_config):
        petrol = _estimate(running_cost_config)
        hybrid = _estimate(running_cost_config, fuel_type="Hybrid")
        assert hybrid.energy == pytest.approx(petrol.energy * 0.6)

    def test_unknown_fuel_falls_back_to_petrol(self, running_cost_config):
        assert _estimate(running_cost_config, fuel_type="steam").energy == _estimate(running_cost_config).energy

    def test_large_engine_uses_top_of_curve(self, running_cost_config):
        rc = _estimate(running_cost_config, engine_size_litres=5.0)
        assert rc.energy == pytest.approx(150 * 12.0 * 2.0)

    def test_insurance_band_and_loading(self, running_cost_config):
        rc = _estimate(running_cost_config, make="Porsche", vehicle_value=150_000)
        assert rc.vehicle_class == VehicleClass.LUXURY
        assert rc.insurance == pytest.approx(2_600 * 1.25)

    def test_jurisdiction_registration_used(self, running_cost_config):
        assert _estimate(running_cost_config, registration_fee=750).registration == 750

    def test_costs_scale_with_distance(self, running_cost_config):
        short = _estimate(running_cost_config, annual_distance_km=10_000)
        long = _estimate(running_cost_config, annual_distance_km=30_000)
        assert long.energy == pytest.approx(short.energy * 3)
        assert long.insurance == short.insurance

    def test_all_components_non_negative(self, running_cost_config):
        rc = _estimate(running_cost_config, annual_distance_km=1)
        for value in (rc.service, rc.tyres, rc.energy, rc.insurance, rc.registration, rc.management_fee):
            assert value >= 0


class TestValidation:
    def test_zero_distance(self, running_cost_config):
        with pytest.raises(QuoteValidationError):
            _estimate(running_cost_config, annual_distance_km=0)

    def test_engine_too_large(self, running_cost_config):
        with pytest.raises(QuoteValidationError):
            _estimate(running_cost_config, engine_size_litres=9.0)

    def test_negative_engine(self, running_cost_config):
        with pytest.raises(QuoteValidationError):
            _estimate(running_cost_config, engine_size_litres=-1)
