"""
resource_usage.config — configuration for extraction and reporting.

This module centralizes:
  • the metric limit table (ledger-protocol ceilings per metric key)
  • the danger / error cursor ratios used to classify report cells
  • the canonical-encoding limits (nesting depth, encoded size cap)
  • how long the session waits for each pending transaction
  • which encoder measures the byte-size metrics (canonical CBOR unless set)

Environment variables (all optional):
  RESOURCE_USAGE_DANGER              -> float ratio (default: 0.8)
  RESOURCE_USAGE_ERROR               -> float ratio (default: 1.0)
  RESOURCE_USAGE_LIMIT_<KEY>         -> integer ceiling for a metric key,
                                        e.g. RESOURCE_USAGE_LIMIT_CPU_INSNS=100000000;
                                        0 hides the metric from reports
  RESOURCE_USAGE_XDR_DEPTH           -> integer nesting depth (default: 200)
  RESOURCE_USAGE_MAX_ENCODED         -> e.g. "2MiB", "1048576" (default: 2MiB)
  RESOURCE_USAGE_WAIT_SECONDS        -> float seconds (default: 10)

Programmatic usage:
    from resource_usage.config import get_config, load_config
    cfg = load_config(overrides={"danger": 0.7, "limits": {"cpu_insns": 0}})

Config objects are passed explicitly to the aggregator, classifier and
reporter; nothing in those modules reads this module's cached default.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from .classify import LimitsCursors
from .codec import EncodeLimits, Encoder
from .metric import METRIC_KEYS

# ----------------------------- defaults ------------------------------------

DEFAULT_LIMITS: Mapping[str, int] = MappingProxyType(
    {
        "cpu_insns": 50_000_000,
        "mem_bytes": 10_000_000,
        "entry_bytes": 1_000_000,
        "entry_reads": 10_000,
        "entry_writes": 10_000,
        "read_bytes": 2_000_000,
        "write_bytes": 2_000_000,
        "min_txn_bytes": 100_000,
    }
)

_ENV_PREFIX = "RESOURCE_USAGE_"

# ----------------------------- helpers -------------------------------------

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([kKmMgG]i?[bB]|[bB])?\s*$")

_SIZE_UNITS = {
    "b": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000**2,
    "mib": 1024**2,
    "gb": 1000**3,
    "gib": 1024**3,
}


def parse_size_bytes(s: Union[str, int, float]) -> int:
    """
    Parse human-friendly byte sizes:
      "2MiB", "64KB", "131072", 131072 -> bytes (int)
    """
    if isinstance(s, (int, float)):
        n = int(s)
        if n < 0:
            raise ValueError("size must be non-negative")
        return n
    m = _SIZE_RE.match(str(s))
    if not m:
        raise ValueError(f"invalid size: {s!r}")
    unit = (m.group(2) or "B").lower()
    return int(m.group(1)) * _SIZE_UNITS[unit]


def _limit_env_name(key: str) -> str:
    return f"{_ENV_PREFIX}LIMIT_{key.upper()}"


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class MetricLimits:
    """Immutable metric-key -> ceiling table. Unknown keys are rejected."""

    values: Mapping[str, int] = field(default_factory=lambda: DEFAULT_LIMITS)

    def __post_init__(self) -> None:
        merged: Dict[str, int] = {}
        for key in METRIC_KEYS:
            v = int(self.values.get(key, 0))
            if v < 0:
                raise ValueError(f"limit for {key} must be >= 0")
            merged[key] = v
        unknown = set(self.values) - set(METRIC_KEYS)
        if unknown:
            raise ValueError(f"unknown metric keys in limit table: {sorted(unknown)}")
        object.__setattr__(self, "values", MappingProxyType(merged))

    def get(self, key: str) -> int:
        return self.values.get(key, 0)

    def __getitem__(self, key: str) -> int:
        return self.values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self.values.items())

    def with_overrides(self, **overrides: int) -> "MetricLimits":
        data = dict(self.values)
        data.update(overrides)
        return MetricLimits(data)

    def to_dict(self) -> Dict[str, int]:
        return dict(self.values)


def _encoder_name(encoder: Optional[Encoder]) -> str:
    if encoder is None:
        return "cbor"
    return getattr(encoder, "__qualname__", type(encoder).__name__)


@dataclass(frozen=True)
class ReportConfig:
    limits: MetricLimits = field(default_factory=MetricLimits)
    cursors: LimitsCursors = field(default_factory=LimitsCursors)
    encode_limits: EncodeLimits = field(default_factory=EncodeLimits)
    wait_seconds: float = 10.0
    # None measures with the canonical CBOR encoder
    encoder: Optional[Encoder] = None

    def __post_init__(self) -> None:
        if self.wait_seconds <= 0:
            raise ValueError("wait_seconds must be > 0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "limits": self.limits.to_dict(),
            "cursors": {"danger": self.cursors.danger, "error": self.cursors.error},
            "encode_limits": {
                "depth": self.encode_limits.depth,
                "max_bytes": self.encode_limits.max_bytes,
            },
            "wait_seconds": self.wait_seconds,
            "encoder": _encoder_name(self.encoder),
        }


# ------------------------------ loader --------------------------------------


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ReportConfig:
    """
    Build a ReportConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit values taking precedence over env; keys:
          'danger', 'error', 'limits' (mapping of metric key -> int),
          'depth', 'max_bytes', 'wait_seconds', 'encoder'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    limit_values: Dict[str, int] = dict(DEFAULT_LIMITS)
    for key in METRIC_KEYS:
        raw = env.get(_limit_env_name(key))
        if raw is not None and raw.strip() != "":
            limit_values[key] = int(raw)
    limit_values.update({k: int(v) for k, v in dict(overrides.get("limits") or {}).items()})

    cursors = LimitsCursors(
        danger=float(overrides.get("danger", env.get(f"{_ENV_PREFIX}DANGER", 0.8))),
        error=float(overrides.get("error", env.get(f"{_ENV_PREFIX}ERROR", 1.0))),
    )
    encode_limits = EncodeLimits(
        depth=int(overrides.get("depth", env.get(f"{_ENV_PREFIX}XDR_DEPTH", 200))),
        max_bytes=parse_size_bytes(
            overrides.get("max_bytes", env.get(f"{_ENV_PREFIX}MAX_ENCODED", 2 * 1024 * 1024))
        ),
    )
    return ReportConfig(
        limits=MetricLimits(limit_values),
        cursors=cursors,
        encode_limits=encode_limits,
        wait_seconds=float(overrides.get("wait_seconds", env.get(f"{_ENV_PREFIX}WAIT_SECONDS", 10.0))),
        encoder=overrides.get("encoder"),
    )


@lru_cache(maxsize=1)
def get_config() -> ReportConfig:
    """Cached default config for application bootstraps."""
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def _fmt_bytes(n: int) -> str:
    for unit, div in (("GiB", 1024**3), ("MiB", 1024**2), ("KiB", 1024)):
        if n >= div and n % div == 0:
            return f"{n // div}{unit}"
    return f"{n}B"


def summary(cfg: Optional[ReportConfig] = None) -> str:
    """One-line summary of the effective knobs."""
    cfg = cfg or get_config()
    hidden = [k for k, v in cfg.limits.items() if v == 0]
    return (
        "report{"
        f"danger={cfg.cursors.danger:.2f}, error={cfg.cursors.error:.2f}, "
        f"depth={cfg.encode_limits.depth}, max_encoded={_fmt_bytes(cfg.encode_limits.max_bytes)}, "
        f"wait={cfg.wait_seconds:g}s, encoder={_encoder_name(cfg.encoder)}, "
        f"hidden={','.join(hidden) or '-'}"
        "}"
    )


__all__ = [
    "DEFAULT_LIMITS",
    "MetricLimits",
    "ReportConfig",
    "parse_size_bytes",
    "load_config",
    "get_config",
    "summary",
]
