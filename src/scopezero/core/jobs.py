"""Job-mix expansion: annual job volume → per-type job counts and driven distance.

Shares are relative weights and are normalised by their sum. Each row's job
count is rounded on its own, so the counts may not add back up to the annual
total (e.g. three equal shares of 10 jobs give 3+3+3). That drift is kept as is.
"""
from __future__ import annotations

import logging
from typing import Iterable

from .models import ExpandedJobRow, JobMixExpansion, JobType, ParameterSet
from .utils import round_int, to_number

logger = logging.getLogger(__name__)

DEFAULT_FUEL_ECONOMY_L_PER_100KM = 10.0


def expand_job_type(jt: JobType, total_jobs: int, sum_shares: float) -> ExpandedJobRow:
    jobs = round_int(to_number(jt.share) / sum_shares * total_jobs)
    avg_leg_km = to_number(jt.avg_one_way_km) * to_number(jt.detour_factor, 1.0)
    legs_total = to_number(jt.legs_per_job) * jobs * (1 + to_number(jt.revisit_rate))
    return ExpandedJobRow(
        job_type=jt,
        jobs=jobs,
        avg_leg_km=avg_leg_km,
        legs_total=legs_total,
        km_total=legs_total * avg_leg_km,
    )


def expand_job_mix(params: ParameterSet, job_types: Iterable[JobType]) -> JobMixExpansion:
    """Expand the job mix into job counts, legs and kilometres per job type.

    Args:
        params: Run parameters; uses ``total_jobs_per_year`` and
            ``fuel_economy_L_per_100km``.
        job_types: Ordered job types; output rows keep this order.

    Returns:
        JobMixExpansion with per-type rows, the (rounded) annual job total,
        total kilometres and the litres of fuel they burn.
    """
    job_types = list(job_types or [])
    total_jobs = round_int(to_number(params.total_jobs_per_year))
    sum_shares = sum(to_number(jt.share) for jt in job_types) or 1.0

    rows = tuple(expand_job_type(jt, total_jobs, sum_shares) for jt in job_types)
    total_km = sum(r.km_total for r in rows)
    fuel_economy = to_number(params.fuel_economy_L_per_100km, DEFAULT_FUEL_ECONOMY_L_PER_100KM)
    litres = total_km * fuel_economy / 100.0

    drift = sum(r.jobs for r in rows) - total_jobs
    if rows and drift:
        logger.debug("Job counts sum to %d (%+d vs %d total jobs)", total_jobs + drift, drift, total_jobs)

    return JobMixExpansion(rows=rows, total_jobs=total_jobs, total_km=total_km, litres=litres)


__all__ = ["expand_job_type", "expand_job_mix", "DEFAULT_FUEL_ECONOMY_L_PER_100KM"]
