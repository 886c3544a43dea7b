"""Tabular views of run results and their CSV rendering.

Frames keep unknown numbers as NaN; CSV output writes them as empty fields,
quotes every field and doubles embedded quotes.
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from scopezero.core.models import (
    ActivityRecord,
    EmissionFactor,
    JobMixExpansion,
    MergedLineItem,
    ScenarioRow,
    Summary,
)

LINE_ITEM_COLUMNS = [
    "activity_id",
    "category",
    "item",
    "quantity",
    "unit",
    "entity",
    "period",
    "notes",
    "ef_kgco2e_per_unit",
    "scope",
    "emissions_tco2e",
]

ACTIVITY_COLUMNS = LINE_ITEM_COLUMNS[:8]

EXPANSION_COLUMNS = [
    "job_type",
    "share",
    "legs_per_job",
    "avg_one_way_km",
    "detour_factor",
    "revisit_rate",
    "notes",
    "jobs",
    "avg_leg_km",
    "legs_total",
    "km_total",
]

FACTOR_COLUMNS = ["category", "item", "unit", "ef_kgco2e_per_unit", "scope", "notes"]

SCENARIO_COLUMNS = ["method", "label", "kwh", "emissions_kgco2e"]


def _frame(records: List[dict], columns: Sequence[str]) -> pd.DataFrame:
    df = pd.DataFrame.from_records(records, columns=list(columns))
    return df


def expansion_frame(expansion: JobMixExpansion) -> pd.DataFrame:
    records = []
    for r in expansion.rows:
        jt = r.job_type
        records.append({
            "job_type": jt.job_type,
            "share": jt.share,
            "legs_per_job": jt.legs_per_job,
            "avg_one_way_km": jt.avg_one_way_km,
            "detour_factor": jt.detour_factor,
            "revisit_rate": jt.revisit_rate,
            "notes": jt.notes,
            "jobs": r.jobs,
            "avg_leg_km": r.avg_leg_km,
            "legs_total": r.legs_total,
            "km_total": r.km_total,
        })
    return _frame(records, EXPANSION_COLUMNS)


def activities_frame(activities: Iterable[ActivityRecord]) -> pd.DataFrame:
    records = [{c: getattr(a, c) for c in ACTIVITY_COLUMNS} for a in activities or []]
    return _frame(records, ACTIVITY_COLUMNS)


def factors_frame(factors: Iterable[EmissionFactor]) -> pd.DataFrame:
    records = [{c: getattr(f, c) for c in FACTOR_COLUMNS} for f in factors or []]
    return _frame(records, FACTOR_COLUMNS)


def line_items_frame(line_items: Iterable[MergedLineItem], columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    cols = list(columns or LINE_ITEM_COLUMNS)
    df = _frame([li.as_dict() for li in line_items or []], cols)
    for c in ("ef_kgco2e_per_unit", "emissions_kgco2e", "emissions_tco2e"):
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def scope_frame(summary: Summary) -> pd.DataFrame:
    return _frame(
        [{"scope": s, "emissions_tco2e": v} for s, v in summary.scope_breakdown],
        ["scope", "emissions_tco2e"],
    )


def scenario_frame(rows: Iterable[ScenarioRow]) -> pd.DataFrame:
    records = [{c: getattr(r, c) for c in SCENARIO_COLUMNS} for r in rows or []]
    return _frame(records, SCENARIO_COLUMNS)


def to_csv_text(df: pd.DataFrame) -> str:
    """CSV text with every field quoted and missing values left empty."""
    return df.to_csv(
        index=False,
        na_rep="",
        quoting=csv.QUOTE_ALL,
        doublequote=True,
        lineterminator="\n",
    )


def write_csv(df: pd.DataFrame, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(to_csv_text(df), encoding="utf-8")
    return p


__all__ = [
    "LINE_ITEM_COLUMNS",
    "ACTIVITY_COLUMNS",
    "EXPANSION_COLUMNS",
    "FACTOR_COLUMNS",
    "SCENARIO_COLUMNS",
    "expansion_frame",
    "activities_frame",
    "factors_frame",
    "line_items_frame",
    "scope_frame",
    "scenario_frame",
    "to_csv_text",
    "write_csv",
]
