"""
resource_usage.capture — captured calls on disk, and the per-call pipeline step.

A capture file holds the three artifacts a report needs for every call: the
transaction that was sent, its simulation result and its receipt.

Formats
-------
* ``.cbor`` — canonical CBOR of the lowered records (see `resource_usage.codec`)
* ``.json`` — the same tree with every bytes value written as ``0x`` hex

Both are wrapped in a small header::

    {"format": "resource-usage-capture", "version": 1, "records": [...]}

A bare list of records is accepted on load. Files with an unknown suffix are
sniffed: a leading ``{`` or ``[`` (after whitespace) means JSON, anything else
CBOR.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import cbor2

from . import metrics
from .codec import DEFAULT_LIMITS, lower
from .config import ReportConfig
from .errors import CaptureError, ExtractError
from .extract import extract
from .store import SampleStore, contract_invocations
from .types.common import bytes_to_hex, require, require_mapping
from .types.rpc import GetTransactionResponse, SimulateTransactionResponse
from .types.transaction import Transaction

log = logging.getLogger(__name__)

CAPTURE_FORMAT = "resource-usage-capture"
CAPTURE_VERSION = 1

PathLike = Union[str, Path]

NOT_SUCCESS = "NOT_SUCCESS"


@dataclass(frozen=True)
class CallRecord:
    transaction: Transaction
    simulation: SimulateTransactionResponse
    receipt: GetTransactionResponse
    hash: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Any) -> "CallRecord":
        obj = require_mapping(obj, "call record")
        h = obj.get("hash")
        return cls(
            transaction=Transaction.from_dict(require(obj, "transaction", "call record")),
            simulation=SimulateTransactionResponse.from_dict(require(obj, "simulation", "call record")),
            receipt=GetTransactionResponse.from_dict(require(obj, "receipt", "call record")),
            hash=str(h) if h else None,
        )


# ------------------------------- processing ---------------------------------

def process_record(record: CallRecord, config: ReportConfig, store: SampleStore) -> bool:
    """
    Extract one call's sample and record it. A failure is logged, counted and
    swallowed for this call only; returns whether a sample was recorded.
    """
    tx_hash = record.hash or "-"
    if not record.receipt.status.is_success:
        log.warning("skipping %s: transaction status %s", tx_hash, record.receipt.status.value)
        metrics.observe_failure(NOT_SUCCESS)
        return False
    try:
        metric = extract(
            record.simulation,
            record.receipt,
            limits=config.encode_limits,
            encoder=config.encoder,
        )
    except ExtractError as e:
        log.warning("dropping sample for %s: %s (%s)", tx_hash, e.message, e.code)
        metrics.observe_failure(e.code)
        return False

    store.record(record.transaction, metric)
    for contract_id, _ in contract_invocations(record.transaction):
        metrics.observe_sample(contract_id)
    return True


def process_records(
    records: Iterable[CallRecord],
    config: ReportConfig,
    store: Optional[SampleStore] = None,
) -> SampleStore:
    store = SampleStore() if store is None else store
    for r in records:
        process_record(r, config, store)
    return store


# ------------------------------- file I/O -----------------------------------

def _jsonable(x: Any) -> Any:
    if isinstance(x, bytes):
        return bytes_to_hex(x)
    if isinstance(x, list):
        return [_jsonable(v) for v in x]
    if isinstance(x, dict):
        return {str(k): _jsonable(v) for k, v in x.items()}
    return x


def _document(records: Iterable[CallRecord], config: Optional[ReportConfig]) -> Dict[str, Any]:
    limits = config.encode_limits if config is not None else DEFAULT_LIMITS
    lowered = [lower(r, limits) for r in records]
    return {"format": CAPTURE_FORMAT, "version": CAPTURE_VERSION, "records": lowered}


def dump_capture(
    records: Iterable[CallRecord],
    path: PathLike,
    *,
    config: Optional[ReportConfig] = None,
) -> Path:
    """Write *records* to *path*; JSON when the suffix is ``.json``, CBOR otherwise."""
    p = Path(path)
    doc = _document(records, config)
    if p.suffix.lower() == ".json":
        p.write_text(json.dumps(_jsonable(doc), indent=2, sort_keys=True) + "\n", encoding="utf-8")
    else:
        p.write_bytes(cbor2.dumps(doc, canonical=True))
    return p


def _looks_like_json(raw: bytes) -> bool:
    head = raw.lstrip()[:1]
    return head in (b"{", b"[")


def _parse(raw: bytes, path: Path) -> Any:
    suffix = path.suffix.lower()
    as_json = suffix == ".json" or (suffix != ".cbor" and _looks_like_json(raw))
    try:
        if as_json:
            return json.loads(raw.decode("utf-8"))
        return cbor2.loads(raw)
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        kind = "JSON" if as_json else "CBOR"
        raise CaptureError(f"malformed {kind} capture: {e}", path=str(path)) from e


def load_capture(path: PathLike) -> List[CallRecord]:
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as e:
        raise CaptureError(f"cannot read capture: {e}", path=str(p)) from e

    doc = _parse(raw, p)
    if isinstance(doc, dict):
        fmt = doc.get("format")
        if fmt is not None and fmt != CAPTURE_FORMAT:
            raise CaptureError(f"unknown capture format {fmt!r}", path=str(p))
        version = doc.get("version", CAPTURE_VERSION)
        if version != CAPTURE_VERSION:
            raise CaptureError(f"unsupported capture version {version!r}", path=str(p))
        items = doc.get("records")
    else:
        items = doc
    if not isinstance(items, list):
        raise CaptureError("capture has no record list", path=str(p))

    out: List[CallRecord] = []
    for i, item in enumerate(items):
        try:
            out.append(CallRecord.from_dict(item))
        except (TypeError, ValueError, RecursionError) as e:
            raise CaptureError(f"record {i}: {e}", path=str(p)) from e
    log.debug("loaded %d call records from %s", len(out), p)
    return out


__all__ = [
    "CAPTURE_FORMAT",
    "CAPTURE_VERSION",
    "CallRecord",
    "process_record",
    "process_records",
    "dump_capture",
    "load_capture",
]
