"""Activity synthesis: parameters + job expansion → physical activity records.

Category/item/unit strings used here are the keys of the default emission
factor table (``datasets/sme/default/emission_factors.yml``); keep both in sync.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from .models import ActivityRecord, JobMixExpansion, MaterialRequirement, ParameterSet
from .utils import round1, round2, round_int, to_number

logger = logging.getLogger(__name__)

# Material activities are numbered from here so they never collide with A1..A5
MATERIAL_ID_START = 100
MATERIAL_ID_PREFIX = "PG"


def build_core_activities(params: ParameterSet, expansion: JobMixExpansion) -> List[ActivityRecord]:
    """The five activities every run has: fleet fuel, office power/heat, leaks, commuting."""
    office_m2 = to_number(params.office_m2)
    elec_kwh = office_m2 * to_number(params.elec_intensity_kwh_per_m2)
    heat_kwh = office_m2 * to_number(params.heat_intensity_kwh_per_m2)
    leak_kg = to_number(params.refrigerant_charge_kg) * to_number(params.leak_rate_frac)
    commute_km = (
        to_number(params.employees_fte)
        * to_number(params.commute_km_per_day_roundtrip)
        * to_number(params.workdays_per_year)
    )
    period = params.year

    return [
        ActivityRecord("A1", "fuel", "diesel_combustion", round1(expansion.litres), "litre",
                       "Fleet", period, "From job legs × fuel economy"),
        ActivityRecord("A2", "electricity", "grid_location_based", float(round_int(elec_kwh)), "kWh",
                       "Office", period, "office_m2 × elec_intensity"),
        ActivityRecord("A3", "energy", "natural_gas_combustion", float(round_int(heat_kwh)), "kWh",
                       "Office", period, "office_m2 × heat_intensity"),
        ActivityRecord("A4", "f_gases", "R410A_GWP100", round2(leak_kg), "kg_leaked",
                       "Office HVAC", period, "charge × leak_rate"),
        ActivityRecord("A5", "transport", "employee_commute_avg", float(round_int(commute_km)), "km",
                       "Employees", period, "FTE × commute_km × days"),
    ]


def build_material_activities(
    params: ParameterSet,
    expansion: JobMixExpansion,
    materials: Iterable[MaterialRequirement],
) -> List[ActivityRecord]:
    """Purchased goods per job type; requirements for unknown job types are skipped."""
    rows: List[ActivityRecord] = []
    idx = MATERIAL_ID_START
    for m in materials or []:
        jt = expansion.find(m.job_type)
        if jt is None:
            logger.debug("Skipping material %s: no job type '%s' in the mix", m.item, m.job_type)
            continue
        rows.append(ActivityRecord(
            activity_id=f"{MATERIAL_ID_PREFIX}{idx}",
            category="purchased_goods",
            item=m.item,
            quantity=round2(to_number(m.qty_per_job) * jt.jobs),
            unit=m.unit or "unit",
            entity="Jobs materials",
            period=params.year,
            notes=f"job_type={m.job_type}",
        ))
        idx += 1
    return rows


def build_activities(
    params: ParameterSet,
    expansion: JobMixExpansion,
    materials: Iterable[MaterialRequirement] = (),
) -> List[ActivityRecord]:
    return build_core_activities(params, expansion) + build_material_activities(params, expansion, materials)


__all__ = [
    "MATERIAL_ID_START",
    "MATERIAL_ID_PREFIX",
    "build_core_activities",
    "build_material_activities",
    "build_activities",
]
