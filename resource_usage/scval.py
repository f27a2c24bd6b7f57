"""
Small ScVal accessors used when scanning diagnostic events.
"""

from __future__ import annotations

from typing import Optional

from .types.scval import (
    ScI32,
    ScI64,
    ScI128,
    ScString,
    ScSymbol,
    ScU32,
    ScU64,
    ScU128,
    ScVal,
)


def scval_as_string(v: ScVal) -> Optional[str]:
    """Text of a symbol or string value; None for anything else."""
    if isinstance(v, (ScSymbol, ScString)):
        return v.value
    return None


def scval_as_u64(v: ScVal) -> Optional[int]:
    """
    Unsigned 64-bit reading of an integer value.

    Negative 32/64-bit values and 128-bit values whose high word is non-zero
    have no u64 reading and yield None, as does any non-integer variant.
    """
    if isinstance(v, (ScU32, ScU64)):
        return v.value
    if isinstance(v, (ScI32, ScI64)):
        return v.value if v.value >= 0 else None
    if isinstance(v, (ScU128, ScI128)):
        return v.lo if v.hi == 0 else None
    return None


__all__ = ["scval_as_string", "scval_as_u64"]
