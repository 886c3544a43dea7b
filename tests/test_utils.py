import math

import pytest

from scopezero.core.utils import clamp, round1, round2, round_half_up, round_int, to_number, to_optional_number


@pytest.mark.parametrize("raw, expected", [
    (3, 3.0),
    ("2.5", 2.5),
    (" 7 ", 7.0),
    ("", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (float("nan"), 0.0),
    (float("inf"), 0.0),
    ([1, 2], 0.0),
])
def test_to_number_never_raises(raw, expected):
    assert to_number(raw) == expected


def test_to_number_uses_caller_default():
    assert to_number("x", 10.0) == 10.0
    assert to_number(math.nan, 1.0) == 1.0


def test_to_optional_number_keeps_unknown_as_none():
    assert to_optional_number(None) is None
    assert to_optional_number("n/a") is None
    assert to_optional_number(float("nan")) is None
    assert to_optional_number("0") == 0.0


def test_rounding_is_half_up():
    # python's round() would give 2 here (banker's rounding)
    assert round_int(2.5) == 3
    assert round_int(966 - 1e-12) == 966
    assert round1(5176.38) == pytest.approx(5176.4)
    assert round2(124.2) == pytest.approx(124.2)
    assert round_half_up(0.7225, 2) == pytest.approx(0.72)
    assert round_int("garbage") == 0


def test_clamp():
    assert clamp(0.01, 0.1, 1.0) == 0.1
    assert clamp(1.3, 0.1, 1.0) == 1.0
    assert clamp(0.5, 0.1, 1.0) == 0.5


def test_huge_values_do_not_overflow():
    assert to_number(10 ** 400) == 0.0
    assert to_number(10 ** 400, 7.0) == 7.0
    assert to_optional_number(10 ** 400) is None
    # scaling would overflow to inf; the value comes back unrounded
    assert round_half_up(1e307, 2) == 1e307
    assert round2(-1e308) == -1e308
