"""
resource_usage.statistics — descriptive aggregates per (contract, function).

For each function with at least one sample and each metric key:

  * presence is decided by the *first* sample only; if it lacks the metric,
    the key is left out of that function's statistics entirely
  * otherwise every sample contributes, a missing value counting as 0
  * ``avg = sum / times`` (float), ``sum`` is an unbounded Python int

The first-sample gate is kept as the reporting tool has always behaved; a
function whose early calls lack a metric shows no row for it even if later
calls have one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Sequence, Union

from .metric import METRIC_KEYS, ResourceMetric, metric_value
from .store import ContractStore, SampleStore


@dataclass(frozen=True)
class MetricStatistics:
    avg: float
    max: int
    min: int
    sum: int


@dataclass
class FuncStatistics:
    times: int
    metrics: Dict[str, MetricStatistics] = field(default_factory=dict)


ContractStatistics = Dict[str, FuncStatistics]
ResultStatistics = Dict[str, ContractStatistics]


def metric_statistics(samples: Sequence[ResourceMetric], key: str) -> MetricStatistics:
    """Aggregate one metric over a non-empty sample list, zero-filling gaps."""
    values = [metric_value(m, key) or 0 for m in samples]
    total = sum(values)
    return MetricStatistics(
        avg=total / len(values),
        max=max(values),
        min=min(values),
        sum=total,
    )


def function_statistics(
    samples: Sequence[ResourceMetric],
    keys: Iterable[str] = METRIC_KEYS,
) -> FuncStatistics:
    if not samples:
        raise ValueError("function_statistics needs at least one sample")
    stats = FuncStatistics(times=len(samples))
    first = samples[0]
    for key in keys:
        if metric_value(first, key) is None:
            continue
        stats.metrics[key] = metric_statistics(samples, key)
    return stats


def aggregate(
    store: Union[SampleStore, Mapping[str, Mapping[str, Sequence[ResourceMetric]]]],
    keys: Iterable[str] = METRIC_KEYS,
) -> ResultStatistics:
    """
    Statistics for every function in *store* (a `SampleStore` or a plain
    contract -> function -> samples mapping). Functions without samples are
    skipped. Ordering of the result is not meaningful.
    """
    data: Mapping[str, Mapping[str, Sequence[ResourceMetric]]]
    data = store.snapshot() if isinstance(store, SampleStore) else store
    keys = tuple(keys)

    res: ResultStatistics = {}
    for contract_id, funcs in data.items():
        contract_entry = res.setdefault(contract_id, {})
        for func_name, samples in funcs.items():
            if not samples:
                continue
            contract_entry[func_name] = function_statistics(samples, keys)
    return res


__all__ = [
    "MetricStatistics",
    "FuncStatistics",
    "ContractStatistics",
    "ResultStatistics",
    "ContractStore",
    "metric_statistics",
    "function_statistics",
    "aggregate",
]
