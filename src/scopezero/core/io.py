"""I/O utilities: YAML dataset loaders.

A dataset directory holds one YAML file per input table (see
``datasets/sme/default``). Loaders are tolerant of missing files (empty table +
warning) but reject structurally broken entries with ``ValueError`` so bad data
is caught here and never inside the calculation path.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .models import (
    CountryGrid,
    EmissionFactor,
    JobType,
    MaterialRequirement,
    NationalGrid,
    ParameterSet,
    RegionalGrid,
    Scope2Defaults,
    Scope2Inputs,
)
from .utils import to_number, to_optional_number

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "SCOPEZERO_DATA_DIR"
BUNDLED_DATA_DIR = Path(__file__).resolve().parents[3] / "datasets" / "sme" / "default"

PARAMETERS_FILE = "parameters.yml"
JOB_TYPES_FILE = "job_types.yml"
MATERIALS_FILE = "materials.yml"
EMISSION_FACTORS_FILE = "emission_factors.yml"
GRID_FACTORS_FILE = "grid_factors.yml"
INTENSITIES_FILE = "intensities.yml"
SCOPE2_FILE = "scope2.yml"


def default_data_dir() -> Path:
    """Dataset directory from ``SCOPEZERO_DATA_DIR``, else the bundled defaults."""
    raw = os.environ.get(DATA_DIR_ENV, "").strip()
    return Path(raw) if raw else BUNDLED_DATA_DIR


def safe_yaml_load(filepath: str | Path, default=None):
    """Safe YAML loader: returns default when file missing or invalid."""
    try:
        p = Path(filepath)
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or default
    except FileNotFoundError:
        logger.warning("YAML file not found: %s, returning default", filepath)
        return default
    except (OSError, yaml.YAMLError) as e:
        logger.error("Error reading YAML %s: %s", filepath, e)
        return default


def _entries(raw: Any, key: str, filepath: str | Path) -> List[dict]:
    """Accept either a bare list or ``{key: [...]}``."""
    if isinstance(raw, dict):
        raw = raw.get(key) or []
    if not isinstance(raw, list):
        raise ValueError(f"{filepath}: expected a list of '{key}' entries.")
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"{filepath}: '{key}' entry #{i} must be a mapping.")
    return raw


def _text(value: Any, default: str = "") -> str:
    return default if value is None else str(value).strip()


_TRUE_TEXT = {"true", "yes", "1"}
_FALSE_TEXT = {"false", "no", "0", ""}


def _flag(value: Any, default: bool) -> bool:
    """YAML booleans, numbers or text such as "yes"/"false"; anything else gives ``default``."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_TEXT:
        return True
    if text in _FALSE_TEXT:
        return False
    return default


def _required_text(entry: dict, name: str, what: str) -> str:
    value = _text(entry.get(name))
    if not value:
        raise ValueError(f"{what} entry is missing required '{name}': {entry}")
    return value


# ===================================================================
#                       Activity-based tables
# ===================================================================
def load_parameters(filepath: str | Path) -> ParameterSet:
    raw = safe_yaml_load(filepath, default={}) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{filepath}: parameters must be a mapping.")
    params = ParameterSet.from_mapping(raw.get("parameters", raw))
    logger.debug("Loaded parameters YAML from %s", filepath)
    return params


def _parse_job_type(entry: dict) -> JobType:
    return JobType(
        job_type=_required_text(entry, "job_type", "Job type"),
        share=to_number(entry.get("share")),
        legs_per_job=to_number(entry.get("legs_per_job")),
        avg_one_way_km=to_number(entry.get("avg_one_way_km")),
        detour_factor=to_number(entry.get("detour_factor"), 1.0),
        revisit_rate=to_number(entry.get("revisit_rate")),
        notes=_text(entry.get("notes")),
    )


def load_job_types(filepath: str | Path) -> List[JobType]:
    raw = safe_yaml_load(filepath, default=[]) or []
    return [_parse_job_type(e) for e in _entries(raw, "job_types", filepath)]


def _parse_material(entry: dict) -> MaterialRequirement:
    return MaterialRequirement(
        job_type=_required_text(entry, "job_type", "Material"),
        item=_required_text(entry, "item", "Material"),
        unit=_text(entry.get("unit")) or "unit",
        qty_per_job=to_number(entry.get("qty_per_job")),
    )


def load_materials(filepath: str | Path) -> List[MaterialRequirement]:
    raw = safe_yaml_load(filepath, default=[]) or []
    return [_parse_material(e) for e in _entries(raw, "materials", filepath)]


def _parse_factor(entry: dict) -> EmissionFactor:
    ef = to_optional_number(entry.get("ef_kgco2e_per_unit"))
    return EmissionFactor(
        category=_required_text(entry, "category", "Emission factor"),
        item=_required_text(entry, "item", "Emission factor"),
        unit=_required_text(entry, "unit", "Emission factor"),
        # a blank value stays unknown (NaN) so the resolver treats it as unmatched
        ef_kgco2e_per_unit=float("nan") if ef is None else ef,
        scope=_text(entry.get("scope")),
        notes=_text(entry.get("notes")),
    )


def load_emission_factors(filepath: str | Path) -> List[EmissionFactor]:
    """Factor table in file order; duplicates are kept (the resolver uses the last)."""
    raw = safe_yaml_load(filepath, default=[]) or []
    factors = [_parse_factor(e) for e in _entries(raw, "emission_factors", filepath)]
    logger.debug("Loaded %d emission factors from %s", len(factors), filepath)
    return factors


# ===================================================================
#                           Scope 2 tables
# ===================================================================
def _parse_country(entry: dict) -> CountryGrid:
    name = _required_text(entry, "name", "Grid country")
    ef = to_number(entry.get("ef"))
    note = _text(entry.get("note"))
    regions = entry.get("regions")
    if regions:
        if not isinstance(regions, dict):
            raise ValueError(f"Grid country '{name}': 'regions' must be a mapping.")
        return RegionalGrid(
            name=name,
            ef=ef,
            note=note,
            regions={str(k).strip(): to_number(v) for k, v in regions.items()},
        )
    return NationalGrid(name=name, ef=ef, note=note)


def load_grid_factors(filepath: str | Path) -> Dict[str, CountryGrid]:
    raw = safe_yaml_load(filepath, default=[]) or []
    grids: Dict[str, CountryGrid] = {}
    for entry in _entries(raw, "countries", filepath):
        grid = _parse_country(entry)
        grids[grid.name] = grid
    return grids


def _number_map(raw: Any) -> Dict[str, Optional[float]]:
    return {str(k).strip(): to_optional_number(v) for k, v in (raw or {}).items()}


def load_intensity_defaults(filepath: str | Path) -> Scope2Defaults:
    raw = safe_yaml_load(filepath, default={}) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{filepath}: intensities must be a mapping.")
    per_emp = {k: v for k, v in _number_map(raw.get("kwh_per_employee")).items() if v is not None}
    benchmarks = {k: v for k, v in _number_map(raw.get("area_benchmarks")).items() if v is not None}
    return Scope2Defaults(
        kwh_per_employee=per_emp,
        kwh_per_currency=_number_map(raw.get("kwh_per_currency")),
        area_benchmarks=benchmarks,
        fallback_kwh_per_employee=to_number(raw.get("fallback_kwh_per_employee"), 5000.0),
    )


def scope2_inputs_from_mapping(data: Optional[Mapping[str, Any]]) -> Scope2Inputs:
    data = dict(data or {})
    base = Scope2Inputs()
    return Scope2Inputs(
        country=_text(data.get("country")) or base.country,
        region=_text(data.get("region")) or None,
        employees=to_number(data.get("employees"), base.employees),
        revenue=to_number(data.get("revenue"), base.revenue),
        floorspace_m2=to_number(data.get("floorspace_m2"), base.floorspace_m2),
        building_type=_text(data.get("building_type")) or base.building_type,
        direct_kwh=to_optional_number(data.get("direct_kwh")),
        use_overrides=_flag(data.get("use_overrides"), base.use_overrides),
        override_kwh_per_employee=to_optional_number(data.get("override_kwh_per_employee")),
        override_kwh_per_currency=to_optional_number(data.get("override_kwh_per_currency")),
        override_kwh_per_m2=to_optional_number(data.get("override_kwh_per_m2")),
        auto_mode=_flag(data.get("auto_mode"), base.auto_mode),
        locked_method=_text(data.get("locked_method")) or base.locked_method,
    )


def load_scope2_inputs(filepath: str | Path) -> Scope2Inputs:
    raw = safe_yaml_load(filepath, default={}) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{filepath}: scope 2 inputs must be a mapping.")
    return scope2_inputs_from_mapping(raw.get("scope2", raw))


# ===================================================================
#                             Dataset
# ===================================================================
@dataclass(frozen=True)
class Dataset:
    """Everything one run needs, loaded from a dataset directory."""

    path: Path
    params: ParameterSet
    job_types: List[JobType] = field(default_factory=list)
    materials: List[MaterialRequirement] = field(default_factory=list)
    factors: List[EmissionFactor] = field(default_factory=list)
    grids: Dict[str, CountryGrid] = field(default_factory=dict)
    scope2_defaults: Scope2Defaults = field(default_factory=Scope2Defaults)
    scope2_inputs: Scope2Inputs = field(default_factory=Scope2Inputs)


def load_dataset(data_dir: str | Path | None = None) -> Dataset:
    """Load all tables from ``data_dir`` (default: ``default_data_dir()``)."""
    data_path = Path(data_dir) if data_dir is not None else default_data_dir()
    if not data_path.is_dir():
        raise FileNotFoundError(f"Dataset directory not found: {data_path}")

    ds = Dataset(
        path=data_path,
        params=load_parameters(data_path / PARAMETERS_FILE),
        job_types=load_job_types(data_path / JOB_TYPES_FILE),
        materials=load_materials(data_path / MATERIALS_FILE),
        factors=load_emission_factors(data_path / EMISSION_FACTORS_FILE),
        grids=load_grid_factors(data_path / GRID_FACTORS_FILE),
        scope2_defaults=load_intensity_defaults(data_path / INTENSITIES_FILE),
        scope2_inputs=load_scope2_inputs(data_path / SCOPE2_FILE),
    )
    logger.info(
        "Loaded dataset %s: %d job types, %d materials, %d factors, %d grid countries",
        data_path, len(ds.job_types), len(ds.materials), len(ds.factors), len(ds.grids),
    )
    return ds


__all__ = [
    "DATA_DIR_ENV",
    "BUNDLED_DATA_DIR",
    "default_data_dir",
    "safe_yaml_load",
    "load_parameters",
    "load_job_types",
    "load_materials",
    "load_emission_factors",
    "load_grid_factors",
    "load_intensity_defaults",
    "scope2_inputs_from_mapping",
    "load_scope2_inputs",
    "Dataset",
    "load_dataset",
]
