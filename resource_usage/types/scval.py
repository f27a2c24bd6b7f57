"""
resource_usage.types.scval — the ledger's tagged scalar/container value.

`ScVal` is a closed union. Integer widths follow the ledger encoding:
128-bit values are carried as (hi, lo) 64-bit words, where ``hi`` is signed
for ``i128`` and unsigned for ``u128``; ``lo`` is always unsigned.

Range checks happen at construction so a decoded value is always well formed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Tuple, Union

from .address import ScAddress, address_from_dict
from .common import (
    as_int,
    hex_to_bytes,
    require,
    require_mapping,
    seq,
    type_tag,
    unknown_variant,
)

_U32_MAX = (1 << 32) - 1
_U64_MAX = (1 << 64) - 1
_I32 = (-(1 << 31), (1 << 31) - 1)
_I64 = (-(1 << 63), (1 << 63) - 1)


def _check(v: int, lo: int, hi: int, what: str) -> None:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{what} must be int, got {type(v).__name__}")
    if not (lo <= v <= hi):
        raise ValueError(f"{what} out of range: {v}")


@dataclass(frozen=True)
class ScVoid:
    TYPE: ClassVar[str] = "void"


@dataclass(frozen=True)
class ScBool:
    TYPE: ClassVar[str] = "bool"
    value: bool


@dataclass(frozen=True)
class ScU32:
    TYPE: ClassVar[str] = "u32"
    value: int

    def __post_init__(self) -> None:
        _check(self.value, 0, _U32_MAX, "u32")


@dataclass(frozen=True)
class ScI32:
    TYPE: ClassVar[str] = "i32"
    value: int

    def __post_init__(self) -> None:
        _check(self.value, *_I32, "i32")


@dataclass(frozen=True)
class ScU64:
    TYPE: ClassVar[str] = "u64"
    value: int

    def __post_init__(self) -> None:
        _check(self.value, 0, _U64_MAX, "u64")


@dataclass(frozen=True)
class ScI64:
    TYPE: ClassVar[str] = "i64"
    value: int

    def __post_init__(self) -> None:
        _check(self.value, *_I64, "i64")


@dataclass(frozen=True)
class ScU128:
    TYPE: ClassVar[str] = "u128"
    hi: int
    lo: int

    def __post_init__(self) -> None:
        _check(self.hi, 0, _U64_MAX, "u128.hi")
        _check(self.lo, 0, _U64_MAX, "u128.lo")

    @classmethod
    def from_int(cls, v: int) -> "ScU128":
        return cls(hi=v >> 64, lo=v & _U64_MAX)

    def __int__(self) -> int:
        return (self.hi << 64) | self.lo


@dataclass(frozen=True)
class ScI128:
    TYPE: ClassVar[str] = "i128"
    hi: int
    lo: int

    def __post_init__(self) -> None:
        _check(self.hi, *_I64, "i128.hi")
        _check(self.lo, 0, _U64_MAX, "i128.lo")

    @classmethod
    def from_int(cls, v: int) -> "ScI128":
        return cls(hi=v >> 64, lo=v & _U64_MAX)

    def __int__(self) -> int:
        return (self.hi << 64) | self.lo


@dataclass(frozen=True)
class ScSymbol:
    TYPE: ClassVar[str] = "symbol"
    value: str


@dataclass(frozen=True)
class ScString:
    TYPE: ClassVar[str] = "string"
    value: str


@dataclass(frozen=True)
class ScBytes:
    TYPE: ClassVar[str] = "bytes"
    value: bytes


@dataclass(frozen=True)
class ScVec:
    TYPE: ClassVar[str] = "vec"
    value: Tuple["ScVal", ...] = ()


@dataclass(frozen=True)
class ScMapEntry:
    key: "ScVal"
    val: "ScVal"


@dataclass(frozen=True)
class ScMap:
    TYPE: ClassVar[str] = "map"
    value: Tuple[ScMapEntry, ...] = ()


@dataclass(frozen=True)
class ScAddressVal:
    TYPE: ClassVar[str] = "address"
    value: ScAddress


ScVal = Union[
    ScVoid,
    ScBool,
    ScU32,
    ScI32,
    ScU64,
    ScI64,
    ScU128,
    ScI128,
    ScSymbol,
    ScString,
    ScBytes,
    ScVec,
    ScMap,
    ScAddressVal,
]

_SCALARS = {
    ScU32.TYPE: ScU32,
    ScI32.TYPE: ScI32,
    ScU64.TYPE: ScU64,
    ScI64.TYPE: ScI64,
}


def scval_from_dict(obj: Any) -> ScVal:
    """Parse a tagged ScVal mapping (see module docstring for field names)."""
    tag = type_tag(obj, "scval")
    if tag == ScVoid.TYPE:
        return ScVoid()
    if tag == ScBool.TYPE:
        return ScBool(bool(require(obj, "value", "scval")))
    if tag in _SCALARS:
        return _SCALARS[tag](as_int(require(obj, "value", "scval"), tag))
    if tag == ScU128.TYPE:
        return ScU128(hi=as_int(require(obj, "hi", tag), "hi"), lo=as_int(require(obj, "lo", tag), "lo"))
    if tag == ScI128.TYPE:
        return ScI128(hi=as_int(require(obj, "hi", tag), "hi"), lo=as_int(require(obj, "lo", tag), "lo"))
    if tag == ScSymbol.TYPE:
        return ScSymbol(str(require(obj, "value", tag)))
    if tag == ScString.TYPE:
        return ScString(str(require(obj, "value", tag)))
    if tag == ScBytes.TYPE:
        return ScBytes(hex_to_bytes(require(obj, "value", tag)))
    if tag == ScVec.TYPE:
        return ScVec(tuple(scval_from_dict(v) for v in seq(obj.get("value"), "vec")))
    if tag == ScMap.TYPE:
        entries = []
        for e in seq(obj.get("value"), "map"):
            m = require_mapping(e, "map entry")
            entries.append(
                ScMapEntry(
                    key=scval_from_dict(require(m, "key", "map entry")),
                    val=scval_from_dict(require(m, "val", "map entry")),
                )
            )
        return ScMap(tuple(entries))
    if tag == ScAddressVal.TYPE:
        return ScAddressVal(address_from_dict(require(obj, "value", tag)))
    raise unknown_variant(
        "scval",
        tag,
        (
            "void", "bool", "u32", "i32", "u64", "i64", "u128", "i128",
            "symbol", "string", "bytes", "vec", "map", "address",
        ),
    )


__all__ = [
    "ScVal",
    "ScVoid",
    "ScBool",
    "ScU32",
    "ScI32",
    "ScU64",
    "ScI64",
    "ScU128",
    "ScI128",
    "ScSymbol",
    "ScString",
    "ScBytes",
    "ScVec",
    "ScMap",
    "ScMapEntry",
    "ScAddressVal",
    "scval_from_dict",
]
