"""
resource_usage.types.rpc — ledger RPC responses consumed by the extractor.

- `SimulateTransactionResponse` — pre-execution estimate. Its
  `SorobanTransactionData` carries the declared footprint (read-only and
  read-write key sets) and the byte estimates for reads and writes.
- `GetTransactionResponse` — post-execution receipt: status, the original
  envelope and (on success) the versioned transaction metadata.
- `SendTransactionResponse` — submission acknowledgement carrying the hash.

Nothing here performs network I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .common import as_int, require, require_mapping, seq
from .ledger import LedgerKey, ledger_key_from_dict
from .meta import TransactionMeta, TransactionMetaV4, transaction_meta_from_dict
from .scval import ScVal
from .transaction import TransactionEnvelope


@dataclass(frozen=True)
class LedgerFootprint:
    read_only: Tuple[LedgerKey, ...] = ()
    read_write: Tuple[LedgerKey, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any) -> "LedgerFootprint":
        obj = require_mapping(obj, "footprint")
        return cls(
            read_only=tuple(ledger_key_from_dict(k) for k in seq(obj.get("read_only"), "read_only")),
            read_write=tuple(ledger_key_from_dict(k) for k in seq(obj.get("read_write"), "read_write")),
        )


@dataclass(frozen=True)
class SorobanResources:
    footprint: LedgerFootprint
    instructions: int = 0
    disk_read_bytes: int = 0
    write_bytes: int = 0

    @classmethod
    def from_dict(cls, obj: Any) -> "SorobanResources":
        obj = require_mapping(obj, "resources")
        return cls(
            footprint=LedgerFootprint.from_dict(obj.get("footprint") or {}),
            instructions=as_int(obj.get("instructions", 0), "instructions"),
            disk_read_bytes=as_int(obj.get("disk_read_bytes", 0), "disk_read_bytes"),
            write_bytes=as_int(obj.get("write_bytes", 0), "write_bytes"),
        )


@dataclass(frozen=True)
class SorobanTransactionData:
    resources: SorobanResources
    resource_fee: int = 0

    @classmethod
    def from_dict(cls, obj: Any) -> "SorobanTransactionData":
        obj = require_mapping(obj, "transaction data")
        return cls(
            resources=SorobanResources.from_dict(require(obj, "resources", "transaction data")),
            resource_fee=as_int(obj.get("resource_fee", 0), "resource_fee"),
        )


@dataclass(frozen=True)
class SimulateTransactionResponse:
    latest_ledger: int = 0
    transaction_data: Optional[SorobanTransactionData] = None
    min_resource_fee: Optional[int] = None
    error: Optional[str] = None

    def to_transaction_data(self) -> Optional[SorobanTransactionData]:
        """Resource footprint, or None when the simulation failed or carried none."""
        if self.error:
            return None
        return self.transaction_data

    @classmethod
    def from_dict(cls, obj: Any) -> "SimulateTransactionResponse":
        obj = require_mapping(obj, "simulation")
        td = obj.get("transaction_data")
        fee = obj.get("min_resource_fee")
        err = obj.get("error")
        return cls(
            latest_ledger=as_int(obj.get("latest_ledger", 0), "latest_ledger"),
            transaction_data=SorobanTransactionData.from_dict(td) if td is not None else None,
            min_resource_fee=as_int(fee, "min_resource_fee") if fee is not None else None,
            error=str(err) if err else None,
        )


class TransactionStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    NOT_FOUND = "NOT_FOUND"

    @property
    def is_success(self) -> bool:
        return self is TransactionStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(cls, s: str) -> "TransactionStatus":
        """Lenient parse: case-insensitive, accepts '-'/' ' for '_'."""
        norm = str(s or "").strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(norm)
        except ValueError:
            raise ValueError(f"unknown transaction status: {s!r}") from None


@dataclass(frozen=True)
class GetTransactionResponse:
    status: TransactionStatus
    envelope: Optional[TransactionEnvelope] = None
    result_meta: Optional[TransactionMeta] = None
    ledger: Optional[int] = None

    def to_result_meta(self) -> Optional[Tuple[TransactionMeta, Optional[ScVal]]]:
        """(meta, return_value) when the receipt carries metadata, else None."""
        if self.result_meta is None:
            return None
        rv = self.result_meta.return_value if isinstance(self.result_meta, TransactionMetaV4) else None
        return self.result_meta, rv

    def to_envelope(self) -> Optional[TransactionEnvelope]:
        return self.envelope

    @classmethod
    def from_dict(cls, obj: Any) -> "GetTransactionResponse":
        obj = require_mapping(obj, "receipt")
        env = obj.get("envelope")
        meta = obj.get("result_meta")
        ledger = obj.get("ledger")
        return cls(
            status=TransactionStatus.from_str(require(obj, "status", "receipt")),
            envelope=TransactionEnvelope.from_dict(env) if env is not None else None,
            result_meta=transaction_meta_from_dict(meta) if meta is not None else None,
            ledger=as_int(ledger, "ledger") if ledger is not None else None,
        )


@dataclass(frozen=True)
class SendTransactionResponse:
    hash: str
    status: str = "PENDING"
    latest_ledger: int = 0


__all__ = [
    "LedgerFootprint",
    "SorobanResources",
    "SorobanTransactionData",
    "SimulateTransactionResponse",
    "TransactionStatus",
    "GetTransactionResponse",
    "SendTransactionResponse",
]
