"""
resource_usage.codec — canonical binary encoding for decoded ledger structures.

Two measurements depend on canonical encoded sizes:
  - ``min_txn_bytes`` : length of the re-encoded transaction envelope
  - ``entry_bytes``   : length of the largest created/updated ledger entry

Encoding is a two-step process:

  1) `lower(obj, limits)` turns the frozen dataclass tree into plain data:
       * tagged variants (classes with a ``TYPE`` ClassVar) become maps with a
         ``"type"`` key plus their fields
       * untagged dataclasses become maps of their fields
       * enums become their value, tuples become lists, bytes stay bytes
     Nesting deeper than ``limits.depth`` raises `EncodeError`.
  2) `encode(obj, limits)` serializes the lowered tree as canonical CBOR
     (`cbor2`, ``canonical=True``) and rejects output larger than
     ``limits.max_bytes``.

The lowered shape is exactly what the ``*_from_dict`` parsers in
`resource_usage.types` accept, so the same schema backs capture files.

Public API
----------
- EncodeLimits / DEFAULT_LIMITS
- lower(obj, limits=DEFAULT_LIMITS) -> Any
- encode(obj, limits=DEFAULT_LIMITS) -> bytes
- Encoder: (value, limits) -> bytes, for plugging in another wire format
- encoded_len(obj, limits=DEFAULT_LIMITS, encoder=None) -> int
- decode(raw) -> Any
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

import cbor2

from .errors import EncodeError

__all__ = ["EncodeLimits", "DEFAULT_LIMITS", "Encoder", "lower", "encode", "encoded_len", "decode"]


@dataclass(frozen=True)
class EncodeLimits:
    depth: int = 200
    max_bytes: int = 2 * 1024 * 1024  # 2 MiB

    def __post_init__(self) -> None:
        if self.depth <= 0:
            raise ValueError("depth must be > 0")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be > 0")


DEFAULT_LIMITS = EncodeLimits()

# (value, limits) -> bytes; raises EncodeError when the value cannot be encoded
Encoder = Callable[[Any, EncodeLimits], bytes]


def _lower(obj: Any, depth: int, max_depth: int) -> Any:
    if depth > max_depth:
        raise EncodeError(
            "value nesting exceeds depth limit",
            reason="depth",
            depth=depth,
            limit=max_depth,
        )
    # Enum before str/int: our enums subclass str
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        out: Dict[str, Any] = {}
        tag = getattr(type(obj), "TYPE", None)
        if tag is not None:
            out["type"] = tag
        for f in fields(obj):
            out[f.name] = _lower(getattr(obj, f.name), depth + 1, max_depth)
        return out
    if isinstance(obj, (list, tuple)):
        return [_lower(x, depth + 1, max_depth) for x in obj]
    if isinstance(obj, Mapping):
        lowered: Dict[Any, Any] = {}
        for k, v in obj.items():
            if not isinstance(k, (str, int, bytes)):
                raise EncodeError(f"unsupported map key type: {type(k).__name__}", reason="unsupported")
            lowered[k] = _lower(v, depth + 1, max_depth)
        return lowered
    raise EncodeError(f"unsupported type for encoding: {type(obj).__name__}", reason="unsupported")


def lower(obj: Any, limits: EncodeLimits = DEFAULT_LIMITS) -> Any:
    """Lower a decoded structure into plain CBOR-compatible data."""
    return _lower(obj, 0, limits.depth)


def encode(obj: Any, limits: EncodeLimits = DEFAULT_LIMITS) -> bytes:
    """
    Canonical CBOR bytes for *obj*.

    Raises:
        EncodeError on depth overflow, size overflow or unsupported values.
    """
    tree = lower(obj, limits)
    try:
        raw = cbor2.dumps(tree, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise EncodeError(str(e), reason="invalid") from e
    if len(raw) > limits.max_bytes:
        raise EncodeError(
            "encoded value exceeds size limit",
            reason="size",
            size=len(raw),
            limit=limits.max_bytes,
        )
    return raw


def encoded_len(obj: Any, limits: EncodeLimits = DEFAULT_LIMITS, encoder: Optional[Encoder] = None) -> int:
    """
    Length of *obj* under *encoder* (canonical CBOR by default).

    ``limits.max_bytes`` applies whichever encoder is used.
    """
    raw = (encoder or encode)(obj, limits)
    if len(raw) > limits.max_bytes:
        raise EncodeError(
            "encoded value exceeds size limit",
            reason="size",
            size=len(raw),
            limit=limits.max_bytes,
        )
    return len(raw)


def decode(raw: bytes) -> Any:
    """Decode CBOR bytes; raises ValueError on malformed input."""
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise TypeError("decode expects a bytes-like object")
    return cbor2.loads(bytes(raw))
