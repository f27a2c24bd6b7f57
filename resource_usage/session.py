"""
resource_usage.session — measure every contract call made through a ledger RPC server.

`ResourceUsageSession` wraps any object implementing the async `LedgerServer`
protocol. The calling code uses it exactly like the server itself:

    session = ResourceUsageSession(server)
    tx = await session.prepare_transaction(tx)     # simulate + assemble
    await session.send_transaction(signed(tx))     # hash filed as pending
    ...
    reports = await session.report()               # wait, extract, print

Lifecycle of one call
---------------------
1. `simulate_transaction` caches the (transaction, simulation) pair.
2. `send_transaction` submits; if a simulation is cached the returned hash is
   filed as pending together with that pair. The cache is cleared on every
   send, so a send without a fresh simulation is not measured.
3. `collect` waits for all pending hashes concurrently, then runs the
   extract + record step for each confirmed call. Wait failures, non-success
   receipts and extraction errors drop only that call.
4. `report` drains the store and prints one table per contract.

Attributes the session does not define are looked up on the wrapped server.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from rich.console import Console

from . import metrics
from .capture import CallRecord, dump_capture, process_record
from .config import ReportConfig, get_config
from .report import ContractReport, build_reports, print_reports
from .statistics import aggregate
from .store import SampleStore
from .types.rpc import GetTransactionResponse, SendTransactionResponse, SimulateTransactionResponse
from .types.transaction import Transaction

log = logging.getLogger(__name__)

WAIT_FAILED = "WAIT_FAILED"


class LedgerServer(Protocol):
    async def simulate_transaction(self, tx: Transaction) -> SimulateTransactionResponse: ...
    async def send_transaction(self, tx: Transaction) -> SendTransactionResponse: ...
    async def wait_transaction(self, tx_hash: str, timeout: float) -> GetTransactionResponse: ...


@dataclass(frozen=True)
class _Pending:
    transaction: Transaction
    simulation: SimulateTransactionResponse


class ResourceUsageSession:
    def __init__(
        self,
        server: LedgerServer,
        config: Optional[ReportConfig] = None,
        *,
        capture: bool = False,
    ) -> None:
        self.server = server
        self.config = config or get_config()
        self.store = SampleStore()
        self.capture = capture
        self.records: List[CallRecord] = []
        self._last: Optional[_Pending] = None
        self._pending: Dict[str, _Pending] = {}

    # ---------------------------------------------------------------- calls

    async def simulate_transaction(self, tx: Transaction) -> SimulateTransactionResponse:
        sim = await self.server.simulate_transaction(tx)
        self._last = _Pending(tx, sim)
        return sim

    async def prepare_transaction(self, tx: Transaction) -> Any:
        """Simulate *tx* and let the server assemble the resource-bearing transaction."""
        sim = await self.simulate_transaction(tx)
        assemble = getattr(self.server, "assemble_transaction", None)
        if assemble is None:
            raise TypeError(f"{type(self.server).__name__} cannot assemble transactions")
        return await assemble(tx, sim)

    async def send_transaction(self, tx: Transaction) -> SendTransactionResponse:
        res = await self.server.send_transaction(tx)
        if self._last is not None:
            self._pending[res.hash] = self._last
        else:
            log.debug("send %s without a simulation; not measured", res.hash)
        self._last = None
        return res

    @property
    def pending(self) -> Tuple[str, ...]:
        return tuple(self._pending)

    # -------------------------------------------------------------- collect

    async def _wait(self, tx_hash: str) -> GetTransactionResponse:
        timeout = self.config.wait_seconds
        return await asyncio.wait_for(self.server.wait_transaction(tx_hash, timeout), timeout)

    async def collect(self) -> int:
        """
        Wait for every pending hash and fold confirmed calls into the store.
        Returns the number of calls that produced a sample.

        A wait that was cancelled leaves its hash pending; the cancellation is
        re-raised after every other result has been processed.
        """
        pending, self._pending = self._pending, {}
        if not pending:
            return 0
        hashes = list(pending)
        done = set()
        try:
            results = await asyncio.gather(*(self._wait(h) for h in hashes), return_exceptions=True)

            recorded = 0
            cancelled: Optional[asyncio.CancelledError] = None
            for tx_hash, res in zip(hashes, results):
                if isinstance(res, asyncio.CancelledError):
                    cancelled = res
                    continue
                done.add(tx_hash)
                if isinstance(res, BaseException):
                    log.warning("fail to get transaction %s: %r", tx_hash, res)
                    metrics.observe_failure(WAIT_FAILED)
                    continue
                p = pending[tx_hash]
                record = CallRecord(p.transaction, p.simulation, res, hash=tx_hash)
                if self.capture:
                    self.records.append(record)
                if process_record(record, self.config, self.store):
                    recorded += 1
            if cancelled is not None:
                raise cancelled
            return recorded
        finally:
            for tx_hash in hashes:
                if tx_hash not in done:
                    self._pending.setdefault(tx_hash, pending[tx_hash])

    # --------------------------------------------------------------- report

    async def report(self, console: Optional[Console] = None) -> List[ContractReport]:
        await self.collect()
        statistics = aggregate(self.store.drain())
        reports = build_reports(statistics, self.config)
        print_reports(reports, self.config.cursors, console)
        metrics.observe_reports(len(reports))
        return reports

    def dump_capture(self, path: Union[str, Path]) -> Path:
        """Write the calls collected so far (requires ``capture=True``)."""
        if not self.capture:
            raise RuntimeError("session was created without capture=True")
        return dump_capture(self.records, path, config=self.config)

    # ----------------------------------------------------------- delegation

    def __getattr__(self, name: str) -> Any:
        # only reached for attributes not found on the session itself
        if name.startswith("_") or name == "server":
            raise AttributeError(name)
        return getattr(self.server, name)


__all__ = ["LedgerServer", "ResourceUsageSession", "WAIT_FAILED"]
