"""Join activities to emission factors by (category, item, unit)."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import ActivityRecord, EmissionFactor, MergedLineItem
from .utils import to_number, to_optional_number

logger = logging.getLogger(__name__)

KG_PER_TONNE = 1000.0


def build_factor_index(factors: Iterable[EmissionFactor]) -> Dict[Tuple[str, str, str], EmissionFactor]:
    """Key → factor; a later duplicate replaces an earlier one."""
    return {f.key: f for f in factors or []}


def resolve_line_item(activity: ActivityRecord, factor: Optional[EmissionFactor]) -> MergedLineItem:
    ef = to_optional_number(factor.ef_kgco2e_per_unit) if factor is not None else None
    if ef is None:
        return MergedLineItem(activity, None, (factor.scope or "") if factor else "", None, None)
    kg = to_number(activity.quantity) * ef
    return MergedLineItem(activity, ef, factor.scope or "", kg, kg / KG_PER_TONNE)


def merge_with_factors(
    activities: Iterable[ActivityRecord],
    factors: Iterable[EmissionFactor],
) -> List[MergedLineItem]:
    """Attach factor, scope and emissions to every activity.

    Activities without a matching factor keep ``None`` emissions and an empty
    scope so they can be told apart from items whose factor is genuinely 0.
    """
    index = build_factor_index(factors)
    merged: List[MergedLineItem] = []
    for a in activities or []:
        f = index.get(a.key)
        if f is None:
            logger.debug("No emission factor for %s (%s/%s/%s)", a.activity_id, *a.key)
        merged.append(resolve_line_item(a, f))
    return merged


__all__ = ["KG_PER_TONNE", "build_factor_index", "resolve_line_item", "merge_with_factors"]
