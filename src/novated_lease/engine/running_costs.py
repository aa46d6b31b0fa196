"""Running cost estimator.

Steps:
  1. classify body style (and make) into a vehicle class
  2. look up per-class multipliers
  3. consumption: kWh/100km for zero-emission, engine-size curve otherwise
  4. distance-driven costs:
       service = km / service_interval × cost_per_service × service_mult
       tyres   = km / tyre_life × tyre_set_cost × tyre_mult
       energy  = km / 100 × consumption × unit_price × energy_mult
  5. fixed costs: banded insurance × class loading, registration, packaging fee
"""

from __future__ import annotations

from novated_lease.config.vehicle import RunningCostConfig, VehicleClass
from novated_lease.errors import QuoteValidationError
from novated_lease.models.results import RunningCostProfile

MAX_ENGINE_SIZE_LITRES = 8.0


def classify_vehicle(body_style: str | None, make: str | None, config: RunningCostConfig) -> VehicleClass:
    """Map a catalog body style (and optional make) to a vehicle class.

    Luxury and EV-native makes take priority over body style.  Body styles
    are matched case-insensitively by substring; unmatched styles fall back
    to ``config.default_class``.
    """
    make_key = (make or "").strip().lower()
    if make_key:
        if any(m in make_key for m in config.luxury_makes):
            return VehicleClass.LUXURY
        if any(m in make_key for m in config.ev_native_makes):
            return VehicleClass.EV

    body = (body_style or "").strip().lower()
    if body:
        for vehicle_class, phrases in config.class_phrases.items():
            if any(phrase in body for phrase in phrases):
                return vehicle_class
    return config.default_class


def _litres_per_100km(engine_size_litres: float, config: RunningCostConfig) -> float:
    for step in config.consumption_curve:
        if step.below_litres is None or engine_size_litres < step.below_litres:
            return step.litres_per_100km
    return config.consumption_curve[-1].litres_per_100km


def _insurance_premium(vehicle_value: float, config: RunningCostConfig) -> float:
    for band in config.insurance_bands:
        if band.up_to is None or vehicle_value <= band.up_to:
            return band.premium
    return config.insurance_bands[-1].premium if config.insurance_bands else 0.0


def estimate_running_costs(
    body_style: str | None,
    make: str | None,
    engine_size_litres: float,
    fuel_type: str | None,
    annual_distance_km: float,
    is_zero_emission: bool,
    vehicle_value: float,
    config: RunningCostConfig,
    registration_fee: float | None = None,
) -> RunningCostProfile:
    """Project annual running costs for one vehicle.

    Parameters
    ----------
    registration_fee : float | None
        Jurisdiction registration from the duty engine.  None falls back
        to ``config.default_registration_fee``.

    Raises
    ------
    QuoteValidationError
        Distance ≤ 0 or engine size outside [0, 8] litres.
    """
    if annual_distance_km <= 0:
        raise QuoteValidationError(f"Annual distance must be positive, got {annual_distance_km}")
    if not 0 <= engine_size_litres <= MAX_ENGINE_SIZE_LITRES:
        raise QuoteValidationError(
            f"Engine size must be between 0 and {MAX_ENGINE_SIZE_LITRES:g} litres, got {engine_size_litres}"
        )

    vehicle_class = classify_vehicle(body_style, make, config)
    costs = config.class_costs.get(vehicle_class) or config.class_costs[config.default_class]

    km = annual_distance_km

    # ── Servicing & tyres ──────────────────────────────────────────────
    drivetrain_factor = config.zero_emission_service_factor if is_zero_emission else 1.0
    service = (km / config.service_interval_km) * config.cost_per_service * costs.service_multiplier * drivetrain_factor
    tyres = (km / config.tyre_life_km) * config.tyre_set_cost * costs.tyre_multiplier * drivetrain_factor

    # ── Energy ─────────────────────────────────────────────────────────
    if is_zero_emission:
        consumption = costs.kwh_per_100km
        unit_price = config.electricity_price_per_kwh
    else:
        fuel_key = (fuel_type or "").strip().lower()
        fuel = config.fuel_types.get(fuel_key) or config.fuel_types[config.default_fuel_type]
        consumption = _litres_per_100km(engine_size_litres, config) * fuel.consumption_factor
        unit_price = fuel.price_per_litre
    energy = (km / 100) * consumption * unit_price * costs.energy_multiplier

    # ── Fixed costs ────────────────────────────────────────────────────
    insurance = _insurance_premium(vehicle_value, config) * costs.insurance_loading
    registration = config.default_registration_fee if registration_fee is None else registration_fee
    management_fee = config.management_fee_annual

    total = service + tyres + energy + insurance + registration + management_fee

    return RunningCostProfile(
        vehicle_class=vehicle_class,
        is_zero_emission=is_zero_emission,
        service=round(service, 2),
        tyres=round(tyres, 2),
        energy=round(energy, 2),
        energy_cost_per_km=round(energy / km, 4),
        insurance=round(insurance, 2),
        registration=round(registration, 2),
        management_fee=round(management_fee, 2),
        total=round(total, 2),
    )
