"""
Shared helpers for the decoded-type modules.

Every tagged variant serializes to a mapping with a ``type`` key (see
``resource_usage.codec.lower``); the ``*_from_dict`` parsers accept that shape
with binary fields given either as raw bytes (CBOR captures) or ``0x`` hex
strings (JSON captures).
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Tuple, Union

HexLike = Union[str, bytes, bytearray, memoryview]


def hex_to_bytes(v: HexLike) -> bytes:
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        if len(s) % 2:
            raise ValueError(f"odd-length hex string: {v!r}")
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {v!r}") from e
    raise TypeError(f"expected hex-like value, got {type(v).__name__}")


def bytes_to_hex(b: bytes) -> str:
    return "0x" + bytes(b).hex()


def require_mapping(obj: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise TypeError(f"{what} must be a mapping, got {type(obj).__name__}")
    return obj


def require(obj: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return obj[key]
    except KeyError:
        raise ValueError(f"missing {what} field: {key!r}") from None


def type_tag(obj: Any, what: str) -> str:
    m = require_mapping(obj, what)
    tag = m.get("type")
    if not isinstance(tag, str) or not tag:
        raise ValueError(f"{what} has no 'type' tag")
    return tag


def seq(obj: Any, what: str) -> Sequence[Any]:
    if obj is None:
        return ()
    if isinstance(obj, (list, tuple)):
        return obj
    raise TypeError(f"{what} must be a list, got {type(obj).__name__}")


def as_int(v: Any, what: str) -> int:
    if isinstance(v, bool) or not isinstance(v, (int, str)):
        raise TypeError(f"{what} must be an integer, got {type(v).__name__}")
    try:
        return int(v, 0) if isinstance(v, str) else int(v)
    except ValueError as e:
        raise ValueError(f"{what} is not an integer: {v!r}") from e


def unknown_variant(what: str, tag: str, known: Tuple[str, ...]) -> ValueError:
    return ValueError(f"unknown {what} type {tag!r} (expected one of {', '.join(known)})")
