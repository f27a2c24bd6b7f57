import pytest

from resource_usage.scval import scval_as_string, scval_as_u64
from resource_usage.types import (
    ScBool,
    ScBytes,
    ScI32,
    ScI64,
    ScI128,
    ScString,
    ScSymbol,
    ScU32,
    ScU64,
    ScU128,
    ScVoid,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (ScU32(7), 7),
        (ScU64((1 << 64) - 1), (1 << 64) - 1),
        (ScI32(5), 5),
        (ScI32(-5), None),
        (ScI64(0), 0),
        (ScI64(-1), None),
        (ScU128(hi=0, lo=42), 42),
        (ScU128(hi=1, lo=42), None),
        (ScI128(hi=0, lo=9), 9),
        (ScI128(hi=-1, lo=9), None),
        (ScBool(True), None),
        (ScVoid(), None),
        (ScSymbol("1"), None),
    ],
)
def test_scval_as_u64(value, expected):
    assert scval_as_u64(value) == expected


def test_scval_as_string():
    assert scval_as_string(ScSymbol("core_metrics")) == "core_metrics"
    assert scval_as_string(ScString("hello")) == "hello"
    assert scval_as_string(ScBytes(b"core_metrics")) is None
    assert scval_as_string(ScU32(1)) is None
