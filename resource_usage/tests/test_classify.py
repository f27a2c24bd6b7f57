import pytest
from hypothesis import given
from hypothesis import strategies as st

from resource_usage.classify import DEFAULT_CURSORS, LimitsCursors, Severity, classify, percent_of

_RANK = {Severity.NORMAL: 0, Severity.DANGER: 1, Severity.ERROR: 2}


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, Severity.NORMAL),
        (80.0, Severity.NORMAL),
        (80.01, Severity.DANGER),
        (100, Severity.DANGER),
        (100.01, Severity.ERROR),
        (10_000, Severity.ERROR),
    ],
)
def test_boundaries(value, expected):
    assert classify(value, 100, DEFAULT_CURSORS) is expected


def test_zero_limit_is_never_classified():
    assert classify(10**12, 0) is Severity.NORMAL


def test_custom_cursors():
    c = LimitsCursors(danger=0.5, error=0.75)
    assert classify(50, 100, c) is Severity.NORMAL
    assert classify(51, 100, c) is Severity.DANGER
    assert classify(76, 100, c) is Severity.ERROR
    assert c.danger_percent == pytest.approx(50.0)


def test_cursor_validation():
    with pytest.raises(ValueError):
        LimitsCursors(danger=0, error=1.0)
    with pytest.raises(ValueError):
        LimitsCursors(danger=0.9, error=0.8)


def test_percent_of():
    assert percent_of(25, 50) == pytest.approx(50.0)


def test_swap_scenario_severities():
    limit = 50_000_000
    assert classify(34_000_000.0, limit) is Severity.NORMAL
    assert classify(10_000_000, limit) is Severity.NORMAL
    assert classify(58_000_000, limit) is Severity.ERROR
    assert classify(45_000_000, limit) is Severity.DANGER


@given(
    st.integers(min_value=0, max_value=10**12),
    st.integers(min_value=0, max_value=10**12),
    st.integers(min_value=1, max_value=10**9),
)
def test_monotonic_in_value(a, b, limit):
    lo, hi = sorted((a, b))
    assert _RANK[classify(lo, limit)] <= _RANK[classify(hi, limit)]


@given(st.integers(min_value=1, max_value=10**9))
def test_at_or_below_danger_is_normal(limit):
    value = (limit * 8) // 10
    assert classify(value, limit) is Severity.NORMAL
