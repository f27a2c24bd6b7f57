"""Small builders for decoded ledger structures used across the tests."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from resource_usage.types import (
    AccountAddress,
    ContractAddress,
    ContractCodeEntry,
    ContractDataDurability,
    ContractDataEntry,
    ContractEvent,
    ContractEventType,
    DiagnosticEvent,
    EntryCreated,
    GetTransactionResponse,
    LedgerEntry,
    LedgerFootprint,
    LedgerKeyContractCode,
    Operation,
    OperationMeta,
    PaymentOp,
    ScSymbol,
    ScU32,
    ScU64,
    ScVal,
    SimulateTransactionResponse,
    SorobanResources,
    SorobanTransactionData,
    Transaction,
    TransactionEnvelope,
    TransactionMetaV4,
    TransactionStatus,
)

CONTRACT_A = ContractAddress(bytes(range(32)))
CONTRACT_B = ContractAddress(bytes(range(32, 64)))
SOURCE = AccountAddress(b"\x07" * 32)


def invoke(contract: ContractAddress, fn: str, *args: ScVal) -> Operation:
    return Operation.invoke(contract, fn, *args)


def payment() -> Operation:
    return Operation(PaymentOp(destination=str(SOURCE), amount=10))


def tx(*ops: Operation, seq: int = 1) -> Transaction:
    return Transaction(source_account=str(SOURCE), fee=100, sequence=seq, operations=tuple(ops))


def code_key(i: int) -> LedgerKeyContractCode:
    return LedgerKeyContractCode(hash=bytes([i]) * 32)


def sim(
    read_only: int = 2,
    read_write: int = 1,
    read_bytes: int = 1_000,
    write_bytes: int = 500,
    error: Optional[str] = None,
    with_data: bool = True,
) -> SimulateTransactionResponse:
    data = None
    if with_data:
        fp = LedgerFootprint(
            read_only=tuple(code_key(i) for i in range(read_only)),
            read_write=tuple(code_key(100 + i) for i in range(read_write)),
        )
        data = SorobanTransactionData(
            resources=SorobanResources(
                footprint=fp,
                instructions=1_000_000,
                disk_read_bytes=read_bytes,
                write_bytes=write_bytes,
            ),
            resource_fee=1_234,
        )
    return SimulateTransactionResponse(latest_ledger=42, transaction_data=data, min_resource_fee=100, error=error)


def core_event(name: str, value: ScVal) -> DiagnosticEvent:
    return DiagnosticEvent(
        in_successful_contract_call=True,
        event=ContractEvent(
            type=ContractEventType.DIAGNOSTIC,
            topics=(ScSymbol("core_metrics"), ScSymbol(name)),
            data=value,
        ),
    )


def data_entry(value: ScVal) -> LedgerEntry:
    return LedgerEntry(
        last_modified_ledger_seq=7,
        data=ContractDataEntry(
            contract=CONTRACT_A,
            key=ScSymbol("k"),
            durability=ContractDataDurability.PERSISTENT,
            val=value,
        ),
    )


def code_entry(size: int) -> LedgerEntry:
    return LedgerEntry(last_modified_ledger_seq=7, data=ContractCodeEntry(hash=b"\x01" * 32, code=b"\x00" * size))


def meta(
    cpu: Optional[int] = None,
    mem: Optional[int] = None,
    changes: Sequence = (),
    extra_events: Iterable[DiagnosticEvent] = (),
) -> TransactionMetaV4:
    events = list(extra_events)
    if cpu is not None:
        events.append(core_event("cpu_insn", ScU64(cpu)))
    if mem is not None:
        events.append(core_event("mem_byte", ScU64(mem)))
    return TransactionMetaV4(
        operations=(OperationMeta(changes=tuple(changes)),),
        diagnostic_events=tuple(events),
        return_value=ScU32(0),
    )


def receipt(
    transaction: Transaction,
    result_meta=None,
    status: TransactionStatus = TransactionStatus.SUCCESS,
    with_envelope: bool = True,
) -> GetTransactionResponse:
    return GetTransactionResponse(
        status=status,
        envelope=TransactionEnvelope(tx=transaction) if with_envelope else None,
        result_meta=result_meta,
        ledger=43,
    )


def created(entry: LedgerEntry) -> EntryCreated:
    return EntryCreated(entry)
