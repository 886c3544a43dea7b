"""Heuristic confidence score for a Scope 2 estimate.

Keys match the method names in ``scope2.METHOD_ORDER``.
"""
from __future__ import annotations

from typing import List, Optional

from .models import ConfidenceScore, GridFactor
from .utils import clamp, round_half_up, to_number

BASE_SCORES = {
    "provided": 0.98,
    "per_revenue": 0.85,
    "per_employee": 0.80,
    "area": 0.55,
}
NO_METHOD_SCORE = 0.6

KWH_PER_EMPLOYEE_LOW = 500.0
KWH_PER_EMPLOYEE_HIGH = 15000.0
OUT_OF_RANGE_PENALTY = 0.7
MISSING_REGION_PENALTY = 0.85

SCORE_MIN = 0.1
SCORE_MAX = 1.0


def score_confidence(
    method: Optional[str],
    kwh: Optional[float],
    kwh_per_employee: float,
    grid: GridFactor,
    country: Optional[str] = None,
) -> ConfidenceScore:
    """Score in [0.1, 1.0] plus human-readable flags, in evaluation order."""
    flags: List[str] = []
    base = BASE_SCORES.get(method, NO_METHOD_SCORE) if method else NO_METHOD_SCORE

    kpe = to_number(kwh_per_employee)
    if method == "per_employee" and kpe:
        if kpe < KWH_PER_EMPLOYEE_LOW:
            flags.append(f"LOW_KWH/EMP < {KWH_PER_EMPLOYEE_LOW:g}")
            base *= OUT_OF_RANGE_PENALTY
        if kpe > KWH_PER_EMPLOYEE_HIGH:
            flags.append(f"HIGH_KWH/EMP > {KWH_PER_EMPLOYEE_HIGH:g}")
            base *= OUT_OF_RANGE_PENALTY

    if grid.supports_regions and not grid.region:
        flags.append(f"{country or grid.source}: add region for better accuracy")
        base *= MISSING_REGION_PENALTY

    if not kwh:
        flags.append("No kWh estimate available")

    score = clamp(round_half_up(base, 2), SCORE_MIN, SCORE_MAX)
    return ConfidenceScore(score=score, flags=tuple(flags))


__all__ = [
    "BASE_SCORES",
    "NO_METHOD_SCORE",
    "KWH_PER_EMPLOYEE_LOW",
    "KWH_PER_EMPLOYEE_HIGH",
    "OUT_OF_RANGE_PENALTY",
    "MISSING_REGION_PENALTY",
    "score_confidence",
]
