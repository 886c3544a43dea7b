import pytest

from scopezero.core.models import ActivityRecord, MergedLineItem
from scopezero.core.summary import summarize


def _li(aid, scope, t):
    act = ActivityRecord(aid, "c", "i", 1.0, "u", "e", "2024")
    kg = None if t is None else t * 1000
    return MergedLineItem(act, None if t is None else 1.0, scope, kg, t)


def test_scope_subtotals_add_up_to_total():
    s = summarize([_li("a", "S1", 1.5), _li("b", "S2", 0.25), _li("c", "S1", 2.0), _li("d", "S3", 4.0)])
    assert s.total_tco2e == pytest.approx(7.75)
    assert sum(v for _, v in s.scope_breakdown) == pytest.approx(s.total_tco2e)
    assert s.by_scope() == pytest.approx({"S1": 3.5, "S2": 0.25, "S3": 4.0})
    assert s.unresolved == ()


def test_breakdown_is_sorted_and_has_unscoped_bucket():
    s = summarize([_li("a", "S3", 1.0), _li("b", "S1", 1.0), _li("c", "", None), _li("d", "S2", 1.0)])
    assert [scope for scope, _ in s.scope_breakdown] == ["", "S1", "S2", "S3"]


def test_unknown_emissions_add_nothing_but_are_reported():
    s = summarize([_li("a", "S1", 2.0), _li("x", "", None)])
    assert s.total_tco2e == pytest.approx(2.0)
    assert s.by_scope()[""] == 0.0
    assert s.unresolved == ("x",)


def test_empty_input():
    s = summarize([])
    assert s.total_tco2e == 0.0
    assert s.scope_breakdown == ()
