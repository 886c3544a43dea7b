"""Core runner: deterministic compute given resolved inputs.

Two independent entry points:

  - ``run_core_scenario``: job mix → activities → factor join → summary
  - ``run_scope2_scenario``: proxies → kWh per method → selection → emissions

Neither touches files; loading YAML and shaping inputs is the caller's job
(see ``scopezero.core.io`` and ``scopezero.cli.engine_cli``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from .activities import build_activities
from .factors import merge_with_factors
from .jobs import expand_job_mix
from .models import (
    ActivityRecord,
    CountryGrid,
    EmissionFactor,
    JobMixExpansion,
    JobType,
    MaterialRequirement,
    MergedLineItem,
    ParameterSet,
    Scope2Defaults,
    Scope2Inputs,
    Scope2Result,
    Summary,
)
from .scope2 import estimate_scope2
from .summary import summarize


@dataclass(frozen=True)
class CoreScenario:
    """Resolved inputs for the activity-based model.

    Required:
      - params: scalar run configuration
      - job_types: job mix (shares are relative weights)

    Optional:
      - materials: purchased goods per job type
      - factors: emission factor table (last duplicate key wins)
    """
    params: ParameterSet
    job_types: Tuple[JobType, ...]
    materials: Tuple[MaterialRequirement, ...] = ()
    factors: Tuple[EmissionFactor, ...] = ()


@dataclass(frozen=True)
class JobMetrics:
    tco2e_per_job: float
    km_per_job: float
    litres_per_job: float


@dataclass(frozen=True)
class CoreResults:
    expansion: JobMixExpansion
    activities: Tuple[ActivityRecord, ...]
    line_items: Tuple[MergedLineItem, ...]
    summary: Summary
    metrics: JobMetrics
    meta: Dict[str, object] = field(default_factory=dict)

    @property
    def total_tco2e(self) -> float:
        return self.summary.total_tco2e


def job_metrics(expansion: JobMixExpansion, summary: Summary) -> JobMetrics:
    jobs = expansion.total_jobs
    denom = jobs or 1
    return JobMetrics(
        tco2e_per_job=summary.total_tco2e / jobs if jobs else 0.0,
        km_per_job=expansion.total_km / denom,
        litres_per_job=expansion.litres / denom,
    )


def run_core_scenario(scn: CoreScenario) -> CoreResults:
    """Execute the activity-based pipeline for one scenario."""
    expansion = expand_job_mix(scn.params, scn.job_types)
    activities = tuple(build_activities(scn.params, expansion, scn.materials))
    line_items = tuple(merge_with_factors(activities, scn.factors))
    summary = summarize(line_items)
    meta: Dict[str, object] = {
        "year": scn.params.year,
        "job_count_drift": sum(r.jobs for r in expansion.rows) - expansion.total_jobs,
        "unresolved_count": len(summary.unresolved),
    }
    return CoreResults(
        expansion=expansion,
        activities=activities,
        line_items=line_items,
        summary=summary,
        metrics=job_metrics(expansion, summary),
        meta=meta,
    )


def run_scope2_scenario(
    inputs: Scope2Inputs,
    grids: Mapping[str, CountryGrid],
    defaults: Optional[Scope2Defaults] = None,
) -> Scope2Result:
    return estimate_scope2(inputs, grids, defaults or Scope2Defaults())


__all__ = [
    "CoreScenario",
    "JobMetrics",
    "CoreResults",
    "job_metrics",
    "run_core_scenario",
    "run_scope2_scenario",
]
