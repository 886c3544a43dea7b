"""Input and output records for the ScopeZero engine.

Every record is a frozen dataclass: callers hand in whole snapshots and the
engine returns new ones, nothing is updated in place. Unknown numeric values
(missing emission factor, unavailable Scope-2 method) are ``None``, never NaN
and never zero.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .utils import to_number


# ===================================================================
#                         Activity-based inputs
# ===================================================================
@dataclass(frozen=True)
class ParameterSet:
    """Scalar configuration for one calculation run."""

    year: str = "2024"
    total_jobs_per_year: float = 1380
    fuel_economy_L_per_100km: float = 10.0
    office_m2: float = 50.0
    elec_intensity_kwh_per_m2: float = 50.0
    heat_intensity_kwh_per_m2: float = 90.0
    refrigerant_charge_kg: float = 2.0
    leak_rate_frac: float = 0.05
    employees_fte: float = 4.0
    commute_km_per_day_roundtrip: float = 30.0
    workdays_per_year: float = 230.0

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ParameterSet":
        data = dict(data or {})
        defaults = cls()
        kwargs: Dict[str, Any] = {}
        for name in cls.__dataclass_fields__:
            if name == "year":
                raw = data.get("year")
                kwargs["year"] = str(raw).strip() if raw not in (None, "") else defaults.year
            elif name in data:
                kwargs[name] = to_number(data[name], getattr(defaults, name))
        return cls(**kwargs)


@dataclass(frozen=True)
class JobType:
    """A category of job with its share of the annual volume and routing profile."""

    job_type: str
    share: float = 0.0
    legs_per_job: float = 2.0
    avg_one_way_km: float = 0.0
    detour_factor: float = 1.0
    revisit_rate: float = 0.0
    notes: str = ""


@dataclass(frozen=True)
class ExpandedJobRow:
    job_type: JobType
    jobs: int
    avg_leg_km: float
    legs_total: float
    km_total: float

    @property
    def key(self) -> str:
        return self.job_type.job_type


@dataclass(frozen=True)
class JobMixExpansion:
    rows: Tuple[ExpandedJobRow, ...]
    total_jobs: int
    total_km: float
    litres: float

    def find(self, job_type: str) -> Optional[ExpandedJobRow]:
        return next((r for r in self.rows if r.key == job_type), None)


@dataclass(frozen=True)
class MaterialRequirement:
    job_type: str
    item: str
    unit: str = "unit"
    qty_per_job: float = 0.0


@dataclass(frozen=True)
class EmissionFactor:
    """kgCO2e per activity unit, keyed by (category, item, unit)."""

    category: str
    item: str
    unit: str
    ef_kgco2e_per_unit: float
    scope: str = ""
    notes: str = ""

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.category, self.item, self.unit)


# ===================================================================
#                         Activity-based outputs
# ===================================================================
@dataclass(frozen=True)
class ActivityRecord:
    activity_id: str
    category: str
    item: str
    quantity: float
    unit: str
    entity: str
    period: str
    notes: str = ""

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.category, self.item, self.unit)


@dataclass(frozen=True)
class MergedLineItem:
    activity: ActivityRecord
    ef_kgco2e_per_unit: Optional[float]
    scope: str
    emissions_kgco2e: Optional[float]
    emissions_tco2e: Optional[float]

    @property
    def resolved(self) -> bool:
        return self.emissions_kgco2e is not None

    def as_dict(self) -> Dict[str, Any]:
        a = self.activity
        return {
            "activity_id": a.activity_id,
            "category": a.category,
            "item": a.item,
            "quantity": a.quantity,
            "unit": a.unit,
            "entity": a.entity,
            "period": a.period,
            "notes": a.notes,
            "ef_kgco2e_per_unit": self.ef_kgco2e_per_unit,
            "scope": self.scope,
            "emissions_kgco2e": self.emissions_kgco2e,
            "emissions_tco2e": self.emissions_tco2e,
        }


@dataclass(frozen=True)
class Summary:
    total_tco2e: float
    scope_breakdown: Tuple[Tuple[str, float], ...] = ()
    unresolved: Tuple[str, ...] = ()

    def by_scope(self) -> Dict[str, float]:
        return dict(self.scope_breakdown)


# ===================================================================
#                         Scope 2 (electricity)
# ===================================================================
@dataclass(frozen=True)
class NationalGrid:
    """Country with a single grid factor (kgCO2e/kWh)."""

    name: str
    ef: float
    note: str = ""


@dataclass(frozen=True)
class RegionalGrid:
    """Country whose grid factor can be refined by a sub-national region."""

    name: str
    ef: float
    note: str = ""
    regions: Mapping[str, float] = field(default_factory=dict)


CountryGrid = Union[NationalGrid, RegionalGrid]


@dataclass(frozen=True)
class GridFactor:
    ef: float
    source: str
    note: str = ""
    region: Optional[str] = None
    supports_regions: bool = False


@dataclass(frozen=True)
class Scope2Defaults:
    """Default intensities used when overrides are off."""

    kwh_per_employee: Mapping[str, float] = field(default_factory=dict)
    kwh_per_currency: Mapping[str, Optional[float]] = field(default_factory=dict)
    area_benchmarks: Mapping[str, float] = field(default_factory=dict)
    fallback_kwh_per_employee: float = 5000.0


@dataclass(frozen=True)
class Scope2Inputs:
    country: str = "European Union (27)"
    region: Optional[str] = None
    employees: float = 10
    revenue: float = 500_000
    floorspace_m2: float = 200
    building_type: str = "office"
    direct_kwh: Optional[float] = None
    use_overrides: bool = False
    override_kwh_per_employee: Optional[float] = None
    override_kwh_per_currency: Optional[float] = None
    override_kwh_per_m2: Optional[float] = None
    auto_mode: bool = True
    locked_method: str = "provided"


@dataclass(frozen=True)
class Scope2Estimate:
    method: str
    kwh: float
    label: str


@dataclass(frozen=True)
class ScenarioRow:
    method: str
    label: str
    kwh: float
    emissions_kgco2e: float


@dataclass(frozen=True)
class ConfidenceScore:
    score: float
    flags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Scope2Result:
    grid: GridFactor
    estimates: Tuple[Scope2Estimate, ...]
    auto_method: Optional[str]
    method: Optional[str]
    kwh: Optional[float]
    emissions_kgco2e: Optional[float]
    kwh_per_employee: float
    comparison: Tuple[ScenarioRow, ...]
    confidence: ConfidenceScore

    def estimate(self, method: str) -> Optional[Scope2Estimate]:
        return next((e for e in self.estimates if e.method == method), None)


__all__ = [
    "ParameterSet",
    "JobType",
    "ExpandedJobRow",
    "JobMixExpansion",
    "MaterialRequirement",
    "EmissionFactor",
    "ActivityRecord",
    "MergedLineItem",
    "Summary",
    "NationalGrid",
    "RegionalGrid",
    "CountryGrid",
    "GridFactor",
    "Scope2Defaults",
    "Scope2Inputs",
    "Scope2Estimate",
    "ScenarioRow",
    "ConfidenceScore",
    "Scope2Result",
]
