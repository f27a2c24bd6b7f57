"""
resource_usage — contract resource usage measurement for ledger RPC sessions.

Pipeline::

    (simulation, receipt) --extract--> ResourceMetric --record--> SampleStore
    SampleStore --aggregate--> statistics --build_reports/classify--> tables

Quick use:

    from resource_usage import ResourceUsageSession
    session = ResourceUsageSession(server)
    ...
    await session.report()
"""

from .classify import DEFAULT_CURSORS, LimitsCursors, Severity, classify
from .config import MetricLimits, ReportConfig, get_config, load_config
from .errors import (
    CaptureError,
    EncodeError,
    ExtractError,
    MissingMeta,
    NoTransactionData,
    ResourceUsageError,
    UnsupportedMeta,
)
from .extract import extract
from .metric import METRIC_KEYS, ResourceMetric
from .report import ContractReport, build_reports, print_report, render_report
from .session import LedgerServer, ResourceUsageSession
from .statistics import aggregate
from .store import SampleStore, record
from .version import __version__

__all__ = [
    "__version__",
    # core
    "ResourceMetric",
    "METRIC_KEYS",
    "extract",
    "SampleStore",
    "record",
    "aggregate",
    "Severity",
    "LimitsCursors",
    "DEFAULT_CURSORS",
    "classify",
    # config
    "MetricLimits",
    "ReportConfig",
    "load_config",
    "get_config",
    # reporting
    "ContractReport",
    "build_reports",
    "render_report",
    "print_report",
    # session
    "LedgerServer",
    "ResourceUsageSession",
    # errors
    "ResourceUsageError",
    "ExtractError",
    "MissingMeta",
    "UnsupportedMeta",
    "NoTransactionData",
    "EncodeError",
    "CaptureError",
]
