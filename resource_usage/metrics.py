"""
resource_usage.metrics — Prometheus counters for the extraction / report pipeline.

Exposed metrics (names are prefixed with `resource_usage_`):
  - samples_recorded_total{contract}  : Counter — samples appended to the store
  - extract_failures_total{code}      : Counter — calls dropped, by error code
  - reports_total                     : Counter — contract reports emitted

`code` is one of the `ExtractError` codes (MISSING_META, UNSUPPORTED_META,
NO_TRANSACTION_DATA, ENCODE_ERROR) or WAIT_FAILED / NOT_SUCCESS for calls the
session could not confirm.

Tests inject a fresh `CollectorRegistry` with `set_registry(...)`.
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest

_PREFIX = "resource_usage_"

# ------------------------------ registry & ctor ------------------------------

_registry: Optional[CollectorRegistry] = None

# Metric singletons (bound during _build_metrics)
SAMPLES_RECORDED: Counter
EXTRACT_FAILURES: Counter
REPORTS: Counter


def set_registry(registry: CollectorRegistry) -> None:
    """
    Bind every metric to *registry*, replacing any previous binding.
    Counts accumulated against the old registry stay there.
    """
    global _registry
    _registry = registry
    _build_metrics(registry)


def get_registry() -> CollectorRegistry:
    """Return the metrics registry, creating one on first use."""
    registry = _registry
    if registry is None:
        registry = CollectorRegistry()
        set_registry(registry)
    return registry


def _build_metrics(reg: CollectorRegistry) -> None:
    global SAMPLES_RECORDED, EXTRACT_FAILURES, REPORTS

    SAMPLES_RECORDED = Counter(
        _PREFIX + "samples_recorded_total",
        "Resource samples appended to the store (by contract).",
        labelnames=("contract",),
        registry=reg,
    )
    EXTRACT_FAILURES = Counter(
        _PREFIX + "extract_failures_total",
        "Calls whose sample was dropped (by error code).",
        labelnames=("code",),
        registry=reg,
    )
    REPORTS = Counter(
        _PREFIX + "reports_total",
        "Contract resource reports emitted.",
        registry=reg,
    )


# ------------------------------ helpers -------------------------------------

def observe_sample(contract_id: str, n: int = 1) -> None:
    get_registry()
    if n > 0:
        SAMPLES_RECORDED.labels(contract=contract_id).inc(n)


def observe_failure(code: str) -> None:
    get_registry()
    EXTRACT_FAILURES.labels(code=code or "UNKNOWN").inc()


def observe_reports(n: int = 1) -> None:
    get_registry()
    if n > 0:
        REPORTS.inc(n)


def generate_latest_text() -> bytes:
    """Prometheus exposition text for the current registry."""
    return generate_latest(get_registry())


__all__ = [
    "CONTENT_TYPE_LATEST",
    "get_registry",
    "set_registry",
    "observe_sample",
    "observe_failure",
    "observe_reports",
    "generate_latest_text",
]
