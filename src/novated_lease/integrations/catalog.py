"""Vehicle catalog — fills vehicle attributes the caller left out."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class VehicleRecord(BaseModel):
    """One catalog entry, keyed by make / model / year."""

    make: str
    model: str
    year: int
    body_style: str = ""
    engine_type: str = Field(default="", description="e.g. 'gas', 'hybrid', 'electric'")
    engine_size: float | None = Field(default=None, ge=0, description="Displacement (L)")
    fuel_type: str = "petrol"

    @property
    def is_electric(self) -> bool:
        return "electric" in self.engine_type.lower()


class VehicleCatalog(Protocol):
    def lookup(self, make: str, model: str, year: int) -> VehicleRecord | None: ...


class StaticVehicleCatalog:
    """In-memory catalog.  Matching is case-insensitive on make and model."""

    def __init__(self, records: list[VehicleRecord]):
        self._records = list(records)

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticVehicleCatalog":
        with open(path) as f:
            raw = json.load(f)
        catalog = cls([VehicleRecord(**r) for r in raw])
        logger.info("Loaded %d vehicles from %s", len(catalog._records), path)
        return catalog

    def makes(self) -> list[str]:
        return sorted({r.make for r in self._records})

    def models(self, make: str) -> list[str]:
        return sorted({r.model for r in self._records if r.make.lower() == make.lower()})

    def years(self, make: str, model: str) -> list[int]:
        """Newest first."""
        return sorted(
            {r.year for r in self._records
             if r.make.lower() == make.lower() and r.model.lower() == model.lower()},
            reverse=True,
        )

    def lookup(self, make: str, model: str, year: int) -> VehicleRecord | None:
        for r in self._records:
            if (r.make.lower() == make.lower()
                    and r.model.lower() == model.lower()
                    and r.year == int(year)):
                return r
        return None


def apply_catalog(data: dict[str, Any], catalog: VehicleCatalog) -> dict[str, Any]:
    """Return a copy of ``data`` with catalog attributes filled in.

    Only fields absent from ``data`` are filled; anything the caller
    supplied wins.  A miss (or no make/model/year) returns the copy untouched.
    """
    merged = dict(data)
    make, model, year = data.get("make"), data.get("model"), data.get("year")
    if not (make and model and year):
        return merged

    record = catalog.lookup(make, model, year)
    if record is None:
        logger.debug("No catalog entry for %s %s %s", year, make, model)
        return merged

    filled = {
        "body_style": record.body_style or None,
        "engine_size_litres": 0.0 if record.is_electric else record.engine_size,
        "fuel_type": "electric" if record.is_electric else record.fuel_type.lower(),
        "is_zero_emission": record.is_electric,
    }
    for key, value in filled.items():
        if key not in merged and value is not None:
            merged[key] = value
    return merged
