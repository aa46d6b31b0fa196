"""Vehicle running-cost configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class VehicleClass(str, Enum):
    SEDAN = "SEDAN"
    HATCH = "HATCH"
    SUV = "SUV"
    UTE = "UTE"
    LARGE_UTE = "LARGE_UTE"
    VAN = "VAN"
    LUXURY = "LUXURY"
    EV = "EV"


class VehicleClassCosts(BaseModel):
    """Per-class cost multipliers relative to a mid-size sedan."""

    service_multiplier: float = Field(default=1.0, ge=0)
    tyre_multiplier: float = Field(default=1.0, ge=0)
    energy_multiplier: float = Field(default=1.0, ge=0)
    insurance_loading: float = Field(default=1.0, ge=0, description="Multiplier on the banded premium")
    kwh_per_100km: float = Field(default=16.0, ge=0, description="Consumption when zero-emission")


class FuelType(BaseModel):
    price_per_litre: float = Field(ge=0, description="Pump price ($/L)")
    consumption_factor: float = Field(default=1.0, ge=0, description="Multiplier on the engine-size curve")


class ConsumptionStep(BaseModel):
    """Engines smaller than ``below_litres`` use ``litres_per_100km``."""

    below_litres: float | None = Field(default=None, description="None = every larger engine")
    litres_per_100km: float = Field(ge=0)


class InsuranceBand(BaseModel):
    up_to: float | None = Field(default=None, description="Vehicle value ceiling; None = no ceiling")
    premium: float = Field(ge=0)


def _default_class_costs() -> dict[VehicleClass, VehicleClassCosts]:
    return {
        VehicleClass.SEDAN: VehicleClassCosts(kwh_per_100km=15.0),
        VehicleClass.HATCH: VehicleClassCosts(
            service_multiplier=0.90, tyre_multiplier=0.90, energy_multiplier=0.90, kwh_per_100km=14.0,
        ),
        VehicleClass.SUV: VehicleClassCosts(
            service_multiplier=0.95, tyre_multiplier=0.95, energy_multiplier=0.95, kwh_per_100km=18.0,
        ),
        VehicleClass.UTE: VehicleClassCosts(kwh_per_100km=22.0),
        VehicleClass.LARGE_UTE: VehicleClassCosts(
            service_multiplier=1.15, tyre_multiplier=1.15, energy_multiplier=1.15,
            insurance_loading=1.15, kwh_per_100km=24.0,
        ),
        VehicleClass.VAN: VehicleClassCosts(
            service_multiplier=1.05, tyre_multiplier=1.10, energy_multiplier=1.05, kwh_per_100km=21.0,
        ),
        VehicleClass.LUXURY: VehicleClassCosts(
            service_multiplier=1.40, tyre_multiplier=1.30, energy_multiplier=1.05,
            insurance_loading=1.25, kwh_per_100km=18.0,
        ),
        VehicleClass.EV: VehicleClassCosts(
            service_multiplier=0.85, tyre_multiplier=0.85, energy_multiplier=0.85,
            insurance_loading=1.05, kwh_per_100km=15.0,
        ),
    }


def _default_class_phrases() -> dict[VehicleClass, list[str]]:
    # Checked in insertion order; first match wins.  More specific phrases
    # ("sport utility", "pickup") must precede generic ones ("wagon").
    return {
        VehicleClass.SUV: ["sport utility", "suv", "crossover", "4wd"],
        VehicleClass.UTE: ["pickup", "ute", "cab chassis"],
        VehicleClass.VAN: ["minivan", "van", "people mover"],
        VehicleClass.LARGE_UTE: ["coupe", "convertible", "roadster", "two seater"],
        VehicleClass.HATCH: ["hatch", "compact", "subcompact", "mini"],
        VehicleClass.SEDAN: ["sedan", "wagon", "liftback"],
    }


class RunningCostConfig(BaseModel):
    """Service, tyre, energy, insurance and registration assumptions."""

    # --- Servicing & tyres ---
    service_interval_km: float = Field(default=15_000.0, gt=0)
    cost_per_service: float = Field(default=480.0, ge=0)
    tyre_life_km: float = Field(default=50_000.0, gt=0)
    tyre_set_cost: float = Field(default=300.0, ge=0)
    zero_emission_service_factor: float = Field(
        default=0.85, ge=0,
        description="Extra service/tyre multiplier for zero-emission drivetrains",
    )

    # --- Energy ---
    electricity_price_per_kwh: float = Field(default=0.28, ge=0, description="Home-charging tariff ($/kWh)")
    fuel_types: dict[str, FuelType] = Field(
        default_factory=lambda: {
            "petrol": FuelType(price_per_litre=2.00),
            "diesel": FuelType(price_per_litre=2.10, consumption_factor=0.90),
            "hybrid": FuelType(price_per_litre=2.00, consumption_factor=0.60),
            "lpg": FuelType(price_per_litre=1.00, consumption_factor=1.25),
        },
    )
    default_fuel_type: str = Field(default="petrol", description="Used when fuel type is unknown")
    consumption_curve: list[ConsumptionStep] = Field(
        default_factory=lambda: [
            ConsumptionStep(below_litres=1.5, litres_per_100km=6.5),
            ConsumptionStep(below_litres=2.0, litres_per_100km=7.5),
            ConsumptionStep(below_litres=3.0, litres_per_100km=8.5),
            ConsumptionStep(below_litres=4.0, litres_per_100km=10.0),
            ConsumptionStep(litres_per_100km=12.0),
        ],
    )

    # --- Fixed costs ---
    insurance_bands: list[InsuranceBand] = Field(
        default_factory=lambda: [
            InsuranceBand(up_to=100_000, premium=1_900.0),
            InsuranceBand(premium=2_600.0),
        ],
    )
    default_registration_fee: float = Field(default=900.0, ge=0, description="Used when no jurisdiction fee is supplied")
    management_fee_annual: float = Field(default=264.0, ge=0, description="Salary packaging fee ($20 + GST monthly)")

    # --- Classification ---
    class_costs: dict[VehicleClass, VehicleClassCosts] = Field(default_factory=_default_class_costs)
    class_phrases: dict[VehicleClass, list[str]] = Field(default_factory=_default_class_phrases)
    default_class: VehicleClass = Field(default=VehicleClass.SEDAN)
    luxury_makes: list[str] = Field(
        default_factory=lambda: ["porsche", "mercedes", "bmw", "audi", "lexus", "land rover", "maserati", "jaguar"],
    )
    ev_native_makes: list[str] = Field(default_factory=lambda: ["tesla", "polestar", "byd", "rivian", "zeekr"])
