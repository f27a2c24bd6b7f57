"""
resource_usage.store — per-session sample accumulation.

Layout::

    contract strkey -> function name -> [ResourceMetric, ...]

Lists keep call-completion order and only grow until the store is drained for
a report. A sample describes the whole transaction, so a transaction batching
several contract invocations appends the same sample under every
(contract, function) it called.

Writes are serialized by a per-store lock held only for the append; readers get
copies. `drain()` hands out the accumulated samples and empties the store in a
single critical section.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Tuple

from .metric import ResourceMetric
from .types.address import ContractAddress
from .types.transaction import InvokeContract, InvokeHostFunctionOp, Transaction

log = logging.getLogger(__name__)

FunctionStore = Dict[str, List[ResourceMetric]]
ContractStore = Dict[str, FunctionStore]


def contract_invocations(transaction: Transaction) -> Iterator[Tuple[str, str]]:
    """Yield (contract strkey, function name) for each direct contract call."""
    for operation in transaction.operations or ():
        body = operation.body
        if not isinstance(body, InvokeHostFunctionOp):
            continue
        fn = body.host_function
        if not isinstance(fn, InvokeContract):
            continue
        if not isinstance(fn.contract_address, ContractAddress):
            continue
        yield str(fn.contract_address), fn.function_name


class SampleStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: ContractStore = {}

    def append(self, contract_id: str, function_name: str, metric: ResourceMetric) -> None:
        with self._lock:
            self._data.setdefault(contract_id, {}).setdefault(function_name, []).append(metric)

    def record(self, transaction: Transaction, metric: ResourceMetric) -> int:
        """
        Attribute *metric* to every contract invocation in *transaction*.

        Returns the number of appends (0 for a transaction without invocations).
        """
        n = 0
        for contract_id, function_name in contract_invocations(transaction):
            self.append(contract_id, function_name, metric)
            log.debug("recorded sample contract=%s function=%s", contract_id, function_name)
            n += 1
        return n

    def snapshot(self) -> ContractStore:
        with self._lock:
            return {c: {f: list(s) for f, s in funcs.items()} for c, funcs in self._data.items()}

    def drain(self) -> ContractStore:
        """Return everything accumulated so far and leave the store empty."""
        with self._lock:
            data, self._data = self._data, {}
        return data

    def clear(self) -> None:
        with self._lock:
            self._data = {}

    def contracts(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def samples(self, contract_id: str, function_name: str) -> List[ResourceMetric]:
        with self._lock:
            return list(self._data.get(contract_id, {}).get(function_name, ()))

    def __len__(self) -> int:
        """Total number of stored samples across all functions."""
        with self._lock:
            return sum(len(s) for funcs in self._data.values() for s in funcs.values())

    def __bool__(self) -> bool:
        return len(self) > 0


def record(store: SampleStore, transaction: Transaction, metric: ResourceMetric) -> int:
    return store.record(transaction, metric)


__all__ = [
    "FunctionStore",
    "ContractStore",
    "SampleStore",
    "contract_invocations",
    "record",
]
