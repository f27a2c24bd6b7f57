from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from resource_usage import metrics


@pytest.fixture(autouse=True)
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry per test."""
    reg = CollectorRegistry()
    metrics.set_registry(reg)
    return reg
