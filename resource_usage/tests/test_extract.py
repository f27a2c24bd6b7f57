import logging

import pytest

from resource_usage.codec import EncodeLimits, encoded_len
from resource_usage.errors import EncodeError, MissingMeta, NoTransactionData, UnsupportedMeta
from resource_usage.extract import core_metrics, extract, max_entry_value_len
from resource_usage.types import (
    ContractEvent,
    ContractEventType,
    DiagnosticEvent,
    EntryRemoved,
    EntryRestored,
    EntryState,
    EntryUpdated,
    OperationMeta,
    ScBytes,
    ScI64,
    ScString,
    ScSymbol,
    ScU32,
    ScU64,
    ScU128,
    TransactionEnvelope,
    TransactionMetaV3,
    TransactionMetaV4,
)

from .helpers import (
    CONTRACT_A,
    code_entry,
    code_key,
    core_event,
    created,
    data_entry,
    invoke,
    meta,
    receipt,
    sim,
    tx,
)


@pytest.fixture
def call():
    return tx(invoke(CONTRACT_A, "swap", ScU32(1)))


# ---------------------------------------------------------------------------
# happy path
# ---------------------------------------------------------------------------

def test_extract_populates_every_metric(call):
    m = meta(cpu=12_345, mem=678, changes=[created(data_entry(ScU32(1)))])
    r = receipt(call, m)
    metric = extract(sim(read_only=3, read_write=2, read_bytes=900, write_bytes=300), r)

    assert metric.cpu_insns == 12_345
    assert metric.mem_bytes == 678
    assert metric.entry_reads == 3
    assert metric.entry_writes == 2
    assert metric.read_bytes == 900
    assert metric.write_bytes == 300
    assert metric.min_txn_bytes == encoded_len(TransactionEnvelope(tx=call))
    assert metric.entry_bytes == encoded_len(data_entry(ScU32(1)).data)


def _fixed_width(obj, limits):
    # stands in for the ledger's own wire encoder
    if isinstance(obj, TransactionEnvelope):
        return b"\x00" * 40
    return b"\x00" * 7


def test_byte_sizes_use_supplied_encoder(call):
    m = meta(cpu=1, mem=1, changes=[created(code_entry(500))])
    metric = extract(sim(), receipt(call, m), encoder=_fixed_width)
    assert metric.min_txn_bytes == 40
    assert metric.entry_bytes == 7


def test_supplied_encoder_is_held_to_size_limit(call):
    with pytest.raises(EncodeError) as ei:
        extract(sim(), receipt(call, meta()), limits=EncodeLimits(max_bytes=16), encoder=_fixed_width)
    assert ei.value.reason == "size"


def test_footprint_counts_come_from_simulation_only(call):
    # metadata touching many entries does not change reads/writes
    changes = [created(code_entry(10 + i)) for i in range(7)]
    metric = extract(sim(read_only=1, read_write=0), receipt(call, meta(changes=changes)))
    assert metric.entry_reads == 1
    assert metric.entry_writes == 0


def test_missing_core_metrics_stay_absent(call):
    metric = extract(sim(), receipt(call, meta()))
    assert metric.cpu_insns is None
    assert metric.mem_bytes is None
    assert metric.entry_bytes == 0


# ---------------------------------------------------------------------------
# failures
# ---------------------------------------------------------------------------

def test_missing_meta(call):
    with pytest.raises(MissingMeta) as ei:
        extract(sim(), receipt(call, None))
    assert ei.value.code == "MISSING_META"


def test_unsupported_meta_version(call):
    with pytest.raises(UnsupportedMeta) as ei:
        extract(sim(), receipt(call, TransactionMetaV3()))
    assert ei.value.version == 3
    assert ei.value.to_dict()["data"] == {"version": 3}


def test_no_transaction_data(call):
    with pytest.raises(NoTransactionData):
        extract(sim(with_data=False), receipt(call, meta(cpu=1)))


def test_failed_simulation_counts_as_no_data(call):
    with pytest.raises(NoTransactionData):
        extract(sim(error="trapped"), receipt(call, meta(cpu=1)))


def test_missing_envelope_is_encode_error(call):
    with pytest.raises(EncodeError) as ei:
        extract(sim(), receipt(call, meta(cpu=1), with_envelope=False))
    assert ei.value.reason == "missing"


def test_envelope_over_size_limit(call):
    limits = EncodeLimits(depth=200, max_bytes=16)
    with pytest.raises(EncodeError) as ei:
        extract(sim(), receipt(call, meta(cpu=1)), limits=limits)
    assert ei.value.reason == "size"


# ---------------------------------------------------------------------------
# entry_bytes
# ---------------------------------------------------------------------------

def test_max_entry_value_len_empty():
    assert max_entry_value_len(TransactionMetaV4()) == 0
    assert max_entry_value_len(meta()) == 0


def test_max_entry_value_len_takes_largest_created_or_updated():
    small, big = code_entry(10), code_entry(500)
    m = TransactionMetaV4(
        operations=(
            OperationMeta(changes=(created(small),)),
            OperationMeta(changes=(EntryUpdated(big),)),
        )
    )
    assert max_entry_value_len(m) == encoded_len(big.data)


def test_max_entry_value_len_ignores_other_change_kinds():
    huge = code_entry(5_000)
    m = TransactionMetaV4(
        operations=(
            OperationMeta(
                changes=(
                    EntryState(huge),
                    EntryRestored(huge),
                    EntryRemoved(code_key(1)),
                    created(code_entry(4)),
                )
            ),
        )
    )
    assert max_entry_value_len(m) == encoded_len(code_entry(4).data)


def test_unencodable_entry_contributes_zero(caplog):
    limits = EncodeLimits(depth=200, max_bytes=200)
    m = meta(changes=[created(code_entry(1_000)), created(data_entry(ScU32(1)))])
    with caplog.at_level(logging.DEBUG, logger="resource_usage.extract"):
        n = max_entry_value_len(m, limits)
    assert n == encoded_len(data_entry(ScU32(1)).data)
    assert "unencodable" in caplog.text


# ---------------------------------------------------------------------------
# core metrics scan
# ---------------------------------------------------------------------------

def _event(topics, data):
    return DiagnosticEvent(True, ContractEvent(ContractEventType.DIAGNOSTIC, tuple(topics), data))


def test_core_metrics_reads_all_counters():
    m = meta(
        extra_events=[
            core_event("cpu_insn", ScU64(100)),
            core_event("mem_byte", ScU32(20)),
            core_event("ledger_read_byte", ScU128(hi=0, lo=30)),
            core_event("ledger_write_byte", ScI64(40)),
        ]
    )
    c = core_metrics(m)
    assert (c.cpu_insn, c.mem_byte, c.ledger_read_byte, c.ledger_write_byte) == (100, 20, 30, 40)


def test_u128_with_high_word_is_skipped_per_field(call):
    m = meta(mem=5, extra_events=[core_event("cpu_insn", ScU128(hi=1, lo=5))])
    metric = extract(sim(), receipt(call, m))
    assert metric.cpu_insns is None
    assert metric.mem_bytes == 5


def test_negative_value_is_skipped():
    c = core_metrics(meta(extra_events=[core_event("cpu_insn", ScI64(-1))]))
    assert c.cpu_insn is None


def test_event_without_tag_is_ignored():
    m = meta(extra_events=[_event([ScSymbol("cpu_insn")], ScU64(9))])
    assert core_metrics(m).cpu_insn is None


def test_non_string_topics_are_skipped():
    m = meta(
        extra_events=[
            _event([ScU32(1), ScString("core_metrics"), ScBytes(b"x"), ScSymbol("mem_byte")], ScU64(77)),
        ]
    )
    assert core_metrics(m).mem_byte == 77


def test_later_event_overwrites_earlier():
    m = meta(extra_events=[core_event("cpu_insn", ScU64(1)), core_event("cpu_insn", ScU64(2))])
    assert core_metrics(m).cpu_insn == 2


def test_unknown_counter_name_is_ignored():
    m = meta(extra_events=[core_event("emit_event", ScU64(3))])
    assert core_metrics(m) == core_metrics(meta())
