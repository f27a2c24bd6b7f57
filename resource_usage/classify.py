"""
resource_usage.classify — severity of a value against a resource limit.

    percent = 100 * value / limit
    ERROR   if percent > error  * 100
    DANGER  if percent > danger * 100
    NORMAL  otherwise

Both comparisons are strict, so a value sitting exactly on a cursor stays in
the lower band. A limit of 0 means "no enforced ceiling"; such metrics are
dropped from reports before classification and `classify` answers NORMAL.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

Number = Union[int, float]


class Severity(str, Enum):
    NORMAL = "normal"
    DANGER = "danger"
    ERROR = "error"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class LimitsCursors:
    danger: float = 0.8  # 0.8 => 80%
    error: float = 1.0  # 1.0 => 100%

    def __post_init__(self) -> None:
        if self.danger <= 0 or self.error <= 0:
            raise ValueError("cursor ratios must be > 0")
        if self.danger > self.error:
            raise ValueError("danger ratio must not exceed error ratio")

    @property
    def danger_percent(self) -> float:
        return self.danger * 100.0

    @property
    def error_percent(self) -> float:
        return self.error * 100.0


DEFAULT_CURSORS = LimitsCursors()


def percent_of(value: Number, limit: int) -> float:
    return 100.0 * float(value) / float(limit)


def classify(value: Number, limit: int, cursors: LimitsCursors = DEFAULT_CURSORS) -> Severity:
    if limit <= 0:
        return Severity.NORMAL
    percent = percent_of(value, limit)
    if percent > cursors.error_percent:
        return Severity.ERROR
    if percent > cursors.danger_percent:
        return Severity.DANGER
    return Severity.NORMAL


__all__ = ["Severity", "LimitsCursors", "DEFAULT_CURSORS", "percent_of", "classify"]
