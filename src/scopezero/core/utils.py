"""Numeric coercion and rounding helpers shared by the calculation modules.

Inputs arrive from YAML files, CLI flags or editable tables, so any value may be
a string, None or garbage. Every helper here returns a finite float (or the
caller's default) and never raises.
"""
from __future__ import annotations

import math
from typing import Any, Optional


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite float, returning ``default`` otherwise."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        v = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return v if math.isfinite(v) else default


def to_optional_number(value: Any) -> Optional[float]:
    """Like ``to_number`` but keeps "unknown" as None instead of a default."""
    if value is None:
        return None
    v = to_number(value, default=math.nan)
    return None if math.isnan(v) else v


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with x.5 going towards +inf (not banker's rounding)."""
    scale = 10 ** digits
    v = to_number(value)
    scaled = v * scale
    if not math.isfinite(scaled):
        return v
    return math.floor(scaled + 0.5) / scale


def round_int(value: Any) -> int:
    return int(round_half_up(to_number(value), 0))


def round1(value: Any) -> float:
    return round_half_up(to_number(value), 1)


def round2(value: Any) -> float:
    return round_half_up(to_number(value), 2)


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


__all__ = [
    "to_number",
    "to_optional_number",
    "round_half_up",
    "round_int",
    "round1",
    "round2",
    "clamp",
]
