import threading

from resource_usage.metric import ResourceMetric
from resource_usage.store import SampleStore, contract_invocations, record
from resource_usage.types import (
    AccountAddress,
    CreateContract,
    InvokeHostFunctionOp,
    Operation,
    Transaction,
    UploadWasm,
)

from .helpers import CONTRACT_A, CONTRACT_B, invoke, payment, tx


def test_record_single_invocation():
    store = SampleStore()
    m = ResourceMetric(cpu_insns=1)
    assert record(store, tx(invoke(CONTRACT_A, "swap")), m) == 1
    assert store.samples(str(CONTRACT_A), "swap") == [m]
    assert store.contracts() == [str(CONTRACT_A)]


def test_batched_invocations_append_same_sample_twice():
    store = SampleStore()
    m = ResourceMetric(cpu_insns=5)
    n = store.record(tx(invoke(CONTRACT_A, "swap"), invoke(CONTRACT_A, "swap")), m)
    assert n == 2
    samples = store.samples(str(CONTRACT_A), "swap")
    assert len(samples) == 2
    assert samples[0] is m and samples[1] is m


def test_non_invocation_operations_are_ignored():
    store = SampleStore()
    ops = (
        payment(),
        Operation(InvokeHostFunctionOp(UploadWasm(b"\x00asm"))),
        Operation(InvokeHostFunctionOp(CreateContract(wasm_hash=b"\x01" * 32, salt=b"\x02" * 32))),
        # invoking an account address is not a contract call
        invoke(AccountAddress(b"\x05" * 32), "transfer"),
        invoke(CONTRACT_B, "mint"),
    )
    assert store.record(tx(*ops), ResourceMetric()) == 1
    assert store.contracts() == [str(CONTRACT_B)]


def test_transaction_without_operations():
    store = SampleStore()
    t = Transaction(source_account="G", fee=1, sequence=1, operations=None)
    assert list(contract_invocations(t)) == []
    assert store.record(t, ResourceMetric()) == 0
    assert not store


def test_snapshot_is_a_copy():
    store = SampleStore()
    store.append("C1", "f", ResourceMetric(cpu_insns=1))
    snap = store.snapshot()
    snap["C1"]["f"].append(ResourceMetric(cpu_insns=2))
    assert len(store) == 1


def test_drain_empties_store():
    store = SampleStore()
    store.append("C1", "f", ResourceMetric(cpu_insns=1))
    store.append("C1", "g", ResourceMetric(cpu_insns=2))
    store.append("C2", "f", ResourceMetric(cpu_insns=3))
    data = store.drain()
    assert set(data) == {"C1", "C2"}
    assert len(data["C1"]["g"]) == 1
    assert len(store) == 0
    assert store.drain() == {}


def test_concurrent_appends_are_not_lost():
    store = SampleStore()
    m = ResourceMetric(cpu_insns=1)

    def worker():
        for _ in range(500):
            store.append("C", "f", m)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.samples("C", "f")) == 4000
