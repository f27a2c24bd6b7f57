import asyncio
import hashlib
import logging
from typing import Dict

import pytest
from rich.console import Console

from resource_usage.config import ReportConfig
from resource_usage.session import ResourceUsageSession
from resource_usage.types import (
    GetTransactionResponse,
    SendTransactionResponse,
    SimulateTransactionResponse,
    Transaction,
    TransactionMetaV3,
    TransactionStatus,
)

from .helpers import CONTRACT_A, CONTRACT_B, invoke, meta, receipt, sim, tx


class FakeServer:
    """In-memory ledger server: every sent transaction executes with a fixed cpu cost."""

    def __init__(self) -> None:
        self.cpu: Dict[str, int] = {}
        self.sent: Dict[str, Transaction] = {}
        self.fail_wait = set()
        self.cancel_wait = set()
        self.status: Dict[str, TransactionStatus] = {}
        self.legacy = set()
        self.waits = 0

    async def simulate_transaction(self, t: Transaction) -> SimulateTransactionResponse:
        return sim()

    async def assemble_transaction(self, t: Transaction, s: SimulateTransactionResponse) -> Transaction:
        return Transaction(t.source_account, t.fee + s.min_resource_fee, t.sequence, t.operations)

    async def send_transaction(self, t: Transaction) -> SendTransactionResponse:
        h = hashlib.sha256(repr((t.sequence, len(self.sent))).encode()).hexdigest()
        self.sent[h] = t
        return SendTransactionResponse(hash=h)

    async def wait_transaction(self, tx_hash: str, timeout: float) -> GetTransactionResponse:
        self.waits += 1
        await asyncio.sleep(0)
        if tx_hash in self.fail_wait:
            raise TimeoutError(tx_hash)
        if tx_hash in self.cancel_wait:
            raise asyncio.CancelledError()
        t = self.sent[tx_hash]
        m = TransactionMetaV3() if tx_hash in self.legacy else meta(cpu=self.cpu.get(tx_hash, 1_000), mem=10)
        return receipt(t, m, status=self.status.get(tx_hash, TransactionStatus.SUCCESS))

    def get_network(self) -> str:
        return "testnet"


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def session(server):
    return ResourceUsageSession(server, ReportConfig(wait_seconds=1.0))


@pytest.mark.asyncio
async def test_send_without_simulation_is_not_tracked(session):
    await session.send_transaction(tx(invoke(CONTRACT_A, "swap")))
    assert session.pending == ()


@pytest.mark.asyncio
async def test_simulation_cache_is_cleared_after_send(session):
    t = tx(invoke(CONTRACT_A, "swap"))
    await session.simulate_transaction(t)
    first = await session.send_transaction(t)
    await session.send_transaction(t)
    assert session.pending == (first.hash,)


@pytest.mark.asyncio
async def test_prepare_simulates_and_assembles(session):
    t = tx(invoke(CONTRACT_A, "swap"))
    prepared = await session.prepare_transaction(t)
    assert prepared.fee == t.fee + 100
    res = await session.send_transaction(prepared)
    assert session.pending == (res.hash,)


@pytest.mark.asyncio
async def test_collect_records_confirmed_calls(session, server):
    for seq in range(3):
        t = tx(invoke(CONTRACT_A, "swap"), seq=seq)
        await session.simulate_transaction(t)
        res = await session.send_transaction(t)
        server.cpu[res.hash] = (seq + 1) * 100
    assert await session.collect() == 3
    assert sorted(s.cpu_insns for s in session.store.samples(str(CONTRACT_A), "swap")) == [100, 200, 300]
    assert session.pending == ()
    assert await session.collect() == 0


@pytest.mark.asyncio
async def test_collect_skips_failures(session, server, caplog, registry):
    hashes = []
    for seq in range(4):
        t = tx(invoke(CONTRACT_A, "swap"), seq=seq)
        await session.simulate_transaction(t)
        hashes.append((await session.send_transaction(t)).hash)
    server.fail_wait.add(hashes[0])
    server.status[hashes[1]] = TransactionStatus.FAILED
    server.legacy.add(hashes[2])

    with caplog.at_level(logging.WARNING):
        assert await session.collect() == 1
    assert len(session.store) == 1
    assert "fail to get transaction" in caplog.text
    assert registry.get_sample_value("resource_usage_extract_failures_total", {"code": "WAIT_FAILED"}) == 1
    assert registry.get_sample_value("resource_usage_extract_failures_total", {"code": "NOT_SUCCESS"}) == 1
    assert registry.get_sample_value("resource_usage_extract_failures_total", {"code": "UNSUPPORTED_META"}) == 1


@pytest.mark.asyncio
async def test_cancelled_wait_keeps_hash_pending_and_records_others(session, server):
    hashes = []
    for seq in range(3):
        t = tx(invoke(CONTRACT_A, "swap"), seq=seq)
        await session.simulate_transaction(t)
        hashes.append((await session.send_transaction(t)).hash)
    server.cancel_wait.add(hashes[0])

    with pytest.raises(asyncio.CancelledError):
        await session.collect()
    assert session.pending == (hashes[0],)
    assert len(session.store) == 2

    server.cancel_wait.clear()
    assert await session.collect() == 1
    assert session.pending == ()
    assert len(session.store) == 3


@pytest.mark.asyncio
async def test_prepare_requires_assembling_server():
    class Bare:
        async def simulate_transaction(self, t):
            return sim()

    session = ResourceUsageSession(Bare(), ReportConfig(wait_seconds=1.0))
    with pytest.raises(TypeError, match="cannot assemble"):
        await session.prepare_transaction(tx(invoke(CONTRACT_A, "swap")))


@pytest.mark.asyncio
async def test_report_prints_and_drains(session, server, registry):
    for seq, (contract, fn) in enumerate([(CONTRACT_A, "swap"), (CONTRACT_B, "mint"), (CONTRACT_A, "swap")]):
        t = tx(invoke(contract, fn), seq=seq)
        await session.simulate_transaction(t)
        res = await session.send_transaction(t)
        server.cpu[res.hash] = 60_000_000

    console = Console(record=True, width=200)
    reports = await session.report(console)

    assert sorted(r.contract_id for r in reports) == sorted([str(CONTRACT_A), str(CONTRACT_B)])
    a = [r for r in reports if r.contract_id == str(CONTRACT_A)][0]
    assert a.function("swap").times == 2
    assert a.function("mint") is None
    assert a.has_errors
    text = console.export_text()
    assert text.count("Resource Usage Table") == 2
    assert len(session.store) == 0
    assert registry.get_sample_value("resource_usage_reports_total") == 2


@pytest.mark.asyncio
async def test_capture_mode_keeps_records(server, tmp_path):
    from resource_usage.capture import load_capture

    session = ResourceUsageSession(server, ReportConfig(wait_seconds=1.0), capture=True)
    t = tx(invoke(CONTRACT_A, "swap"))
    await session.simulate_transaction(t)
    await session.send_transaction(t)
    await session.collect()
    assert len(session.records) == 1
    path = session.dump_capture(tmp_path / "calls.cbor")
    assert load_capture(path) == session.records


@pytest.mark.asyncio
async def test_dump_requires_capture_mode(session, tmp_path):
    with pytest.raises(RuntimeError):
        session.dump_capture(tmp_path / "x.cbor")


def test_unknown_attributes_delegate_to_server(session):
    assert session.get_network() == "testnet"
    with pytest.raises(AttributeError):
        session.no_such_method
