"""
resource_usage.metric — one resource-usage sample for a single call.

Every field is optional: ``None`` means "not observed for this call", which is
different from a measured zero. Samples are immutable once built.

Metric keys
-----------
The eight keys below name the fields in report order. They are the keys of the
limit table (`resource_usage.config.MetricLimits`) and of the per-function
statistics (`resource_usage.statistics.FuncStatistics.metrics`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

METRIC_KEYS: Tuple[str, ...] = (
    "cpu_insns",
    "mem_bytes",
    "entry_bytes",
    "entry_reads",
    "entry_writes",
    "read_bytes",
    "write_bytes",
    "min_txn_bytes",
)


@dataclass(frozen=True, slots=True)
class ResourceMetric:
    cpu_insns: Optional[int] = None
    mem_bytes: Optional[int] = None
    entry_bytes: Optional[int] = None
    entry_reads: Optional[int] = None
    entry_writes: Optional[int] = None
    read_bytes: Optional[int] = None
    write_bytes: Optional[int] = None
    min_txn_bytes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def metric_value(m: ResourceMetric, key: str) -> Optional[int]:
    """Value of metric *key* in *m*; raises KeyError for an unknown key."""
    if key not in METRIC_KEYS:
        raise KeyError(f"unknown metric key: {key!r}")
    return getattr(m, key)


__all__ = ["METRIC_KEYS", "ResourceMetric", "metric_value"]
