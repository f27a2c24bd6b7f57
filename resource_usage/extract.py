"""
resource_usage.extract — turn one (simulation, receipt) pair into a sample.

Sources
-------
simulation (pre-execution)
  entry_reads / entry_writes : size of the read-only / read-write footprint
  read_bytes / write_bytes   : resource estimate for ledger reads and writes

receipt (post-execution, metadata version 4 only)
  min_txn_bytes : canonical length of the re-encoded original envelope
  entry_bytes   : largest encoded post-change value over every created or
                  updated ledger entry of every operation
  cpu_insns / mem_bytes : values of the ``core_metrics`` diagnostic events

Failures raise `ExtractError` subclasses and drop only this call's sample.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .codec import DEFAULT_LIMITS, EncodeLimits, Encoder, encoded_len
from .errors import EncodeError, MissingMeta, NoTransactionData, UnsupportedMeta
from .metric import ResourceMetric
from .scval import scval_as_string, scval_as_u64
from .types.ledger import EntryCreated, EntryUpdated
from .types.meta import TransactionMetaV4, meta_version
from .types.rpc import GetTransactionResponse, SimulateTransactionResponse

log = logging.getLogger(__name__)

CORE_METRICS_TAG = "core_metrics"

CORE_KEYS: Tuple[str, ...] = (
    "cpu_insn",
    "mem_byte",
    "ledger_read_byte",
    "ledger_write_byte",
)


@dataclass(frozen=True)
class CoreMetrics:
    cpu_insn: Optional[int] = None
    mem_byte: Optional[int] = None
    ledger_read_byte: Optional[int] = None
    ledger_write_byte: Optional[int] = None


def extract(
    sim: SimulateTransactionResponse,
    receipt: GetTransactionResponse,
    *,
    limits: EncodeLimits = DEFAULT_LIMITS,
    encoder: Optional[Encoder] = None,
) -> ResourceMetric:
    """
    Build the `ResourceMetric` for one completed call.

    Byte sizes are measured with *encoder* (canonical CBOR when None); pass the
    ledger's own wire encoder to measure against its native format.

    Raises:
        MissingMeta       receipt carries no transaction metadata
        UnsupportedMeta   metadata is not the version 4 envelope
        NoTransactionData simulation carries no resource footprint
        EncodeError       the envelope could not be re-encoded
    """
    result = receipt.to_result_meta()
    if result is None:
        raise MissingMeta()
    meta, _ = result
    if isinstance(meta, TransactionMetaV4):
        return extract_v4(sim, receipt, meta, limits=limits, encoder=encoder)
    raise UnsupportedMeta(version=meta_version(meta))


def extract_v4(
    sim: SimulateTransactionResponse,
    receipt: GetTransactionResponse,
    meta: TransactionMetaV4,
    *,
    limits: EncodeLimits = DEFAULT_LIMITS,
    encoder: Optional[Encoder] = None,
) -> ResourceMetric:
    tx_data = sim.to_transaction_data()
    if tx_data is None:
        raise NoTransactionData()
    resources = tx_data.resources
    footprint = resources.footprint

    envelope = receipt.to_envelope()
    if envelope is None:
        raise EncodeError("receipt carries no transaction envelope", reason="missing")
    min_txn_bytes = encoded_len(envelope, limits, encoder)

    core = core_metrics(meta)
    return ResourceMetric(
        cpu_insns=core.cpu_insn,
        mem_bytes=core.mem_byte,
        entry_bytes=max_entry_value_len(meta, limits, encoder),
        entry_reads=len(footprint.read_only),
        entry_writes=len(footprint.read_write),
        read_bytes=resources.disk_read_bytes,
        write_bytes=resources.write_bytes,
        min_txn_bytes=min_txn_bytes,
    )


def max_entry_value_len(
    meta: TransactionMetaV4,
    limits: EncodeLimits = DEFAULT_LIMITS,
    encoder: Optional[Encoder] = None,
) -> int:
    """
    Largest encoded entry value created or updated by any operation.

    Removed/state/restored records contribute 0, as does an entry that cannot
    be encoded within *limits*. An empty change list yields 0.
    """
    max_len = 0
    for op in meta.operations:
        for change in op.changes:
            if not isinstance(change, (EntryCreated, EntryUpdated)):
                continue
            try:
                n = encoded_len(change.entry.data, limits, encoder)
            except EncodeError as e:
                log.debug("skipping unencodable ledger entry: %s", e)
                n = 0
            if n > max_len:
                max_len = n
    return max_len


def core_metrics(meta: TransactionMetaV4) -> CoreMetrics:
    """
    Scan diagnostic events for ``core_metrics`` counters.

    For a tagged event, the first string topic naming a known counter selects
    the field; the event data is read as an unsigned 64-bit value. Events whose
    value has no u64 reading are skipped. A later event for the same counter
    overwrites an earlier one.
    """
    found: Dict[str, int] = {}
    for de in meta.diagnostic_events:
        body = de.event
        is_core = False
        matched: Optional[str] = None
        for topic in body.topics:
            text = scval_as_string(topic)
            if text is None:
                continue
            if text == CORE_METRICS_TAG:
                is_core = True
                continue
            if matched is None and text in CORE_KEYS:
                matched = text
        if not is_core or matched is None:
            continue
        value = scval_as_u64(body.data)
        if value is None:
            log.debug("core metric %s has no u64 value, skipped", matched)
            continue
        found[matched] = value
    return CoreMetrics(
        cpu_insn=found.get("cpu_insn"),
        mem_byte=found.get("mem_byte"),
        ledger_read_byte=found.get("ledger_read_byte"),
        ledger_write_byte=found.get("ledger_write_byte"),
    )


__all__ = [
    "CORE_METRICS_TAG",
    "CORE_KEYS",
    "CoreMetrics",
    "extract",
    "extract_v4",
    "max_entry_value_len",
    "core_metrics",
]
