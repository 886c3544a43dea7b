"""Totals and scope split over merged line items."""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from .models import MergedLineItem, Summary


def summarize(line_items: Iterable[MergedLineItem]) -> Summary:
    """Sum defined tCO2e overall and per scope label.

    Unresolved items (``emissions_tco2e is None``) still register their scope
    label (usually "", the unscoped bucket) but add nothing to any subtotal;
    their ids are returned in ``Summary.unresolved``.
    """
    items = list(line_items or [])
    if not items:
        return Summary(total_tco2e=0.0)

    df = pd.DataFrame(
        {
            "scope": [li.scope or "" for li in items],
            "emissions_tco2e": pd.Series(
                [li.emissions_tco2e for li in items], dtype="float64"
            ),
        }
    )
    # NaN here only ever means "no factor"; sum() skips it
    total = float(df["emissions_tco2e"].sum())
    by_scope = df.groupby("scope", sort=True)["emissions_tco2e"].sum()
    breakdown = tuple((str(scope), float(v)) for scope, v in by_scope.items())
    unresolved = tuple(li.activity.activity_id for li in items if not li.resolved)
    return Summary(total_tco2e=total, scope_breakdown=breakdown, unresolved=unresolved)


__all__ = ["summarize"]
