"""
resource_usage.types.meta — transaction metadata attached to a receipt.

`TransactionMeta` is a closed union tagged by version (``v0`` … ``v4``).
Versions 0-3 are recognised so that a mixed-version ledger history decodes
cleanly, but only the version 4 envelope carries the fields the extractor
understands; the extractor rejects the others with `UnsupportedMeta`.

Diagnostic events
-----------------
During execution the host emits `DiagnosticEvent`s. Cost counters are
published as events whose topics contain the symbol ``core_metrics`` and a
second symbol naming the counter (``cpu_insn``, ``mem_byte``, …); the
event's data is the counter value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Tuple, Union

from .common import hex_to_bytes, require, require_mapping, seq, type_tag, unknown_variant
from .ledger import LedgerEntryChange, ledger_entry_change_from_dict
from .scval import ScVal, ScVoid, scval_from_dict


class ContractEventType(str, Enum):
    SYSTEM = "system"
    CONTRACT = "contract"
    DIAGNOSTIC = "diagnostic"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class ContractEvent:
    type: ContractEventType
    topics: Tuple[ScVal, ...]
    data: ScVal
    contract_id: Optional[bytes] = None

    @classmethod
    def from_dict(cls, obj: Any) -> "ContractEvent":
        obj = require_mapping(obj, "contract event")
        try:
            ev_type = ContractEventType(str(obj.get("type", "contract")).lower())
        except ValueError:
            raise ValueError(f"unknown contract event type: {obj.get('type')!r}") from None
        cid = obj.get("contract_id")
        data = obj.get("data")
        return cls(
            type=ev_type,
            topics=tuple(scval_from_dict(t) for t in seq(obj.get("topics"), "topics")),
            data=scval_from_dict(data) if data is not None else ScVoid(),
            contract_id=hex_to_bytes(cid) if cid is not None else None,
        )


@dataclass(frozen=True)
class DiagnosticEvent:
    in_successful_contract_call: bool
    event: ContractEvent

    @classmethod
    def from_dict(cls, obj: Any) -> "DiagnosticEvent":
        obj = require_mapping(obj, "diagnostic event")
        return cls(
            in_successful_contract_call=bool(obj.get("in_successful_contract_call", True)),
            event=ContractEvent.from_dict(require(obj, "event", "diagnostic event")),
        )


@dataclass(frozen=True)
class OperationMeta:
    changes: Tuple[LedgerEntryChange, ...] = ()
    events: Tuple[ContractEvent, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any) -> "OperationMeta":
        obj = require_mapping(obj, "operation meta")
        return cls(
            changes=tuple(ledger_entry_change_from_dict(c) for c in seq(obj.get("changes"), "changes")),
            events=tuple(ContractEvent.from_dict(e) for e in seq(obj.get("events"), "events")),
        )


# ------------------------------ versions ------------------------------------


@dataclass(frozen=True)
class _LegacyMeta:
    operations: Tuple[OperationMeta, ...] = ()


@dataclass(frozen=True)
class TransactionMetaV0(_LegacyMeta):
    TYPE: ClassVar[str] = "v0"
    VERSION: ClassVar[int] = 0


@dataclass(frozen=True)
class TransactionMetaV1(_LegacyMeta):
    TYPE: ClassVar[str] = "v1"
    VERSION: ClassVar[int] = 1


@dataclass(frozen=True)
class TransactionMetaV2(_LegacyMeta):
    TYPE: ClassVar[str] = "v2"
    VERSION: ClassVar[int] = 2


@dataclass(frozen=True)
class TransactionMetaV3(_LegacyMeta):
    TYPE: ClassVar[str] = "v3"
    VERSION: ClassVar[int] = 3


@dataclass(frozen=True)
class TransactionMetaV4:
    TYPE: ClassVar[str] = "v4"
    VERSION: ClassVar[int] = 4

    operations: Tuple[OperationMeta, ...] = ()
    tx_changes_before: Tuple[LedgerEntryChange, ...] = ()
    tx_changes_after: Tuple[LedgerEntryChange, ...] = ()
    events: Tuple[ContractEvent, ...] = ()
    diagnostic_events: Tuple[DiagnosticEvent, ...] = ()
    return_value: Optional[ScVal] = None


TransactionMeta = Union[
    TransactionMetaV0,
    TransactionMetaV1,
    TransactionMetaV2,
    TransactionMetaV3,
    TransactionMetaV4,
]

_LEGACY = {c.TYPE: c for c in (TransactionMetaV0, TransactionMetaV1, TransactionMetaV2, TransactionMetaV3)}


def meta_version(meta: TransactionMeta) -> int:
    return int(type(meta).VERSION)


def _changes(obj: Any, key: str) -> Tuple[LedgerEntryChange, ...]:
    return tuple(ledger_entry_change_from_dict(c) for c in seq(obj.get(key), key))


def transaction_meta_from_dict(obj: Any) -> TransactionMeta:
    tag = type_tag(obj, "transaction meta")
    operations = tuple(OperationMeta.from_dict(o) for o in seq(obj.get("operations"), "operations"))
    if tag == TransactionMetaV4.TYPE:
        rv = obj.get("return_value")
        return TransactionMetaV4(
            operations=operations,
            tx_changes_before=_changes(obj, "tx_changes_before"),
            tx_changes_after=_changes(obj, "tx_changes_after"),
            events=tuple(ContractEvent.from_dict(e) for e in seq(obj.get("events"), "events")),
            diagnostic_events=tuple(
                DiagnosticEvent.from_dict(e) for e in seq(obj.get("diagnostic_events"), "diagnostic_events")
            ),
            return_value=scval_from_dict(rv) if rv is not None else None,
        )
    cls = _LEGACY.get(tag)
    if cls is None:
        raise unknown_variant("transaction meta", tag, ("v0", "v1", "v2", "v3", "v4"))
    return cls(operations=operations)


__all__ = [
    "ContractEventType",
    "ContractEvent",
    "DiagnosticEvent",
    "OperationMeta",
    "TransactionMeta",
    "TransactionMetaV0",
    "TransactionMetaV1",
    "TransactionMetaV2",
    "TransactionMetaV3",
    "TransactionMetaV4",
    "meta_version",
    "transaction_meta_from_dict",
]
