"""Scope 2 electricity estimate from whichever proxies are available.

Four independent ways to get annual kWh:

  - provided:     the organisation's own meter/bill figure
  - per_revenue:  revenue (value added) × kWh per currency unit
  - per_employee: headcount × kWh per employee
  - area:         floor area × kWh/m² benchmark for the building type

Each method only appears when its inputs are present and non-zero. One is
selected (automatic priority, or a locked choice), multiplied by the resolved
grid factor, and scored by ``confidence.score_confidence``. Every available
method is also priced under the same grid factor for side-by-side comparison.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .confidence import score_confidence
from .models import (
    CountryGrid,
    GridFactor,
    NationalGrid,
    RegionalGrid,
    ScenarioRow,
    Scope2Defaults,
    Scope2Estimate,
    Scope2Inputs,
    Scope2Result,
)
from .utils import to_number, to_optional_number

logger = logging.getLogger(__name__)

PROVIDED = "provided"
PER_REVENUE = "per_revenue"
PER_EMPLOYEE = "per_employee"
AREA = "area"

# Display/comparison order
METHOD_ORDER = (PROVIDED, PER_REVENUE, PER_EMPLOYEE, AREA)
# Automatic selection; provided only wins when no intensity method is available
AUTO_PRIORITY = (PER_REVENUE, PER_EMPLOYEE, AREA, PROVIDED)

FALLBACK_COUNTRY = "Global"
DEFAULT_KWH_PER_EMPLOYEE = 5000.0


# -----------------------
# Grid factor
# -----------------------
def resolve_grid_factor(
    grids: Mapping[str, CountryGrid],
    country: str,
    region: Optional[str] = None,
) -> GridFactor:
    """Pick the grid factor for a country, refined by region where supported."""
    grid = grids.get(country)
    if grid is None:
        grid = grids.get(FALLBACK_COUNTRY)
        if grid is None:
            logger.warning("No grid factor for '%s' and no '%s' fallback", country, FALLBACK_COUNTRY)
            return GridFactor(ef=0.0, source=f"{country} (no grid factor)")
        logger.debug("Unknown country '%s', using %s grid factor", country, grid.name)

    if isinstance(grid, RegionalGrid):
        region_ef = to_optional_number(grid.regions.get(region)) if region else None
        if region_ef is not None:
            return GridFactor(
                ef=region_ef,
                source=f"{grid.name} • {region}",
                note=grid.note,
                region=region,
                supports_regions=True,
            )
        return GridFactor(ef=to_number(grid.ef), source=grid.name, note=grid.note, supports_regions=True)

    if isinstance(grid, NationalGrid):
        return GridFactor(ef=to_number(grid.ef), source=grid.name, note=grid.note)

    raise TypeError(f"Unsupported grid entry for '{country}': {type(grid).__name__}")


# -----------------------
# Intensities
# -----------------------
def effective_kwh_per_employee(inputs: Scope2Inputs, defaults: Scope2Defaults) -> float:
    if inputs.use_overrides:
        return to_number(inputs.override_kwh_per_employee)
    fallback = to_number(defaults.fallback_kwh_per_employee, DEFAULT_KWH_PER_EMPLOYEE)
    return to_number(defaults.kwh_per_employee.get(inputs.country), fallback)


def effective_kwh_per_currency(inputs: Scope2Inputs, defaults: Scope2Defaults) -> Optional[float]:
    if inputs.use_overrides:
        return to_optional_number(inputs.override_kwh_per_currency)
    return to_optional_number(defaults.kwh_per_currency.get(inputs.country))


def effective_kwh_per_m2(inputs: Scope2Inputs, defaults: Scope2Defaults) -> float:
    if inputs.use_overrides:
        return to_number(inputs.override_kwh_per_m2)
    return to_number(defaults.area_benchmarks.get(inputs.building_type))


# -----------------------
# Methods and selection
# -----------------------
def _fmt(v: float) -> str:
    return f"{v:.15g}"


def estimate_methods(inputs: Scope2Inputs, defaults: Scope2Defaults) -> List[Scope2Estimate]:
    """kWh per available method, in ``METHOD_ORDER``."""
    out: Dict[str, Scope2Estimate] = {}

    direct = to_number(inputs.direct_kwh)
    if direct > 0:
        out[PROVIDED] = Scope2Estimate(PROVIDED, direct, "Provided kWh")

    revenue = to_number(inputs.revenue)
    keu = effective_kwh_per_currency(inputs, defaults)
    if revenue and keu:
        out[PER_REVENUE] = Scope2Estimate(PER_REVENUE, revenue * keu, f"Revenue × {keu:.3f} kWh/unit")

    employees = to_number(inputs.employees)
    kpe = effective_kwh_per_employee(inputs, defaults)
    if employees and kpe:
        out[PER_EMPLOYEE] = Scope2Estimate(PER_EMPLOYEE, employees * kpe, f"Employees × {kpe:,.0f} kWh")

    floorspace = to_number(inputs.floorspace_m2)
    km2 = effective_kwh_per_m2(inputs, defaults)
    if floorspace and km2:
        out[AREA] = Scope2Estimate(AREA, floorspace * km2, f"{_fmt(floorspace)} m² × {_fmt(km2)} kWh/m²")

    return [out[m] for m in METHOD_ORDER if m in out]


def auto_select(available: List[str]) -> Optional[str]:
    return next((m for m in AUTO_PRIORITY if m in available), None)


def select_method(available: List[str], auto_mode: bool = True, locked_method: Optional[str] = None) -> Optional[str]:
    """Locked method when it produced a value, otherwise the automatic pick."""
    if not auto_mode and locked_method in available:
        return locked_method
    return auto_select(available)


def compare_methods(estimates: List[Scope2Estimate], grid: GridFactor) -> List[ScenarioRow]:
    """Emissions each method would give under the same grid factor."""
    return [ScenarioRow(e.method, e.label, e.kwh, e.kwh * grid.ef) for e in estimates]


# -----------------------
# Entry point
# -----------------------
def estimate_scope2(
    inputs: Scope2Inputs,
    grids: Mapping[str, CountryGrid],
    defaults: Scope2Defaults,
) -> Scope2Result:
    grid = resolve_grid_factor(grids, inputs.country, inputs.region)
    estimates = estimate_methods(inputs, defaults)
    available = [e.method for e in estimates]

    auto_method = auto_select(available)
    method = select_method(available, inputs.auto_mode, inputs.locked_method)
    chosen = next((e for e in estimates if e.method == method), None)
    kwh = chosen.kwh if chosen is not None else None
    emissions = kwh * grid.ef if kwh is not None else None
    kpe = effective_kwh_per_employee(inputs, defaults)

    logger.debug("Scope 2: method=%s kwh=%s grid=%s (%s)", method, kwh, grid.ef, grid.source)

    return Scope2Result(
        grid=grid,
        estimates=tuple(estimates),
        auto_method=auto_method,
        method=method,
        kwh=kwh,
        emissions_kgco2e=emissions,
        kwh_per_employee=kpe,
        comparison=tuple(compare_methods(estimates, grid)),
        confidence=score_confidence(method, kwh, kpe, grid, country=inputs.country),
    )


__all__ = [
    "PROVIDED",
    "PER_REVENUE",
    "PER_EMPLOYEE",
    "AREA",
    "METHOD_ORDER",
    "AUTO_PRIORITY",
    "FALLBACK_COUNTRY",
    "DEFAULT_KWH_PER_EMPLOYEE",
    "resolve_grid_factor",
    "effective_kwh_per_employee",
    "effective_kwh_per_currency",
    "effective_kwh_per_m2",
    "estimate_methods",
    "auto_select",
    "select_method",
    "compare_methods",
    "estimate_scope2",
]
