"""
resource_usage.types.transaction — the transaction that was sent.

A `Transaction` batches one or more `Operation`s. Only operations whose body is
`InvokeHostFunctionOp` wrapping an `InvokeContract` host function are contract
invocations; every other body is carried so envelopes re-encode faithfully but
is otherwise ignored by the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple, Union

from .address import ScAddress, address_from_dict
from .common import (
    as_int,
    hex_to_bytes,
    require,
    require_mapping,
    seq,
    type_tag,
    unknown_variant,
)
from .scval import ScVal, scval_from_dict


# ------------------------------ host functions ------------------------------


@dataclass(frozen=True)
class InvokeContract:
    TYPE: ClassVar[str] = "invoke_contract"
    contract_address: ScAddress
    function_name: str
    args: Tuple[ScVal, ...] = ()


@dataclass(frozen=True)
class CreateContract:
    TYPE: ClassVar[str] = "create_contract"
    wasm_hash: bytes
    salt: bytes
    deployer: Optional[ScAddress] = None


@dataclass(frozen=True)
class UploadWasm:
    TYPE: ClassVar[str] = "upload_wasm"
    wasm: bytes


HostFunction = Union[InvokeContract, CreateContract, UploadWasm]


def host_function_from_dict(obj: Any) -> HostFunction:
    tag = type_tag(obj, "host function")
    if tag == InvokeContract.TYPE:
        return InvokeContract(
            contract_address=address_from_dict(require(obj, "contract_address", tag)),
            function_name=str(require(obj, "function_name", tag)),
            args=tuple(scval_from_dict(a) for a in seq(obj.get("args"), "args")),
        )
    if tag == CreateContract.TYPE:
        deployer = obj.get("deployer")
        return CreateContract(
            wasm_hash=hex_to_bytes(require(obj, "wasm_hash", tag)),
            salt=hex_to_bytes(require(obj, "salt", tag)),
            deployer=address_from_dict(deployer) if deployer is not None else None,
        )
    if tag == UploadWasm.TYPE:
        return UploadWasm(hex_to_bytes(require(obj, "wasm", tag)))
    raise unknown_variant("host function", tag, ("invoke_contract", "create_contract", "upload_wasm"))


# ------------------------------ operation bodies ----------------------------


@dataclass(frozen=True)
class InvokeHostFunctionOp:
    TYPE: ClassVar[str] = "invoke_host_function"
    host_function: HostFunction


@dataclass(frozen=True)
class PaymentOp:
    TYPE: ClassVar[str] = "payment"
    destination: str
    amount: int
    asset: str = "native"


@dataclass(frozen=True)
class CreateAccountOp:
    TYPE: ClassVar[str] = "create_account"
    destination: str
    starting_balance: int


@dataclass(frozen=True)
class ExtendFootprintTtlOp:
    TYPE: ClassVar[str] = "extend_footprint_ttl"
    extend_to: int


@dataclass(frozen=True)
class RestoreFootprintOp:
    TYPE: ClassVar[str] = "restore_footprint"


OperationBody = Union[
    InvokeHostFunctionOp,
    PaymentOp,
    CreateAccountOp,
    ExtendFootprintTtlOp,
    RestoreFootprintOp,
]


def operation_body_from_dict(obj: Any) -> OperationBody:
    tag = type_tag(obj, "operation body")
    if tag == InvokeHostFunctionOp.TYPE:
        return InvokeHostFunctionOp(host_function_from_dict(require(obj, "host_function", tag)))
    if tag == PaymentOp.TYPE:
        return PaymentOp(
            destination=str(require(obj, "destination", tag)),
            amount=as_int(require(obj, "amount", tag), "amount"),
            asset=str(obj.get("asset", "native")),
        )
    if tag == CreateAccountOp.TYPE:
        return CreateAccountOp(
            destination=str(require(obj, "destination", tag)),
            starting_balance=as_int(require(obj, "starting_balance", tag), "starting_balance"),
        )
    if tag == ExtendFootprintTtlOp.TYPE:
        return ExtendFootprintTtlOp(as_int(require(obj, "extend_to", tag), "extend_to"))
    if tag == RestoreFootprintOp.TYPE:
        return RestoreFootprintOp()
    raise unknown_variant(
        "operation body",
        tag,
        ("invoke_host_function", "payment", "create_account", "extend_footprint_ttl", "restore_footprint"),
    )


@dataclass(frozen=True)
class Operation:
    body: OperationBody
    source_account: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Any) -> "Operation":
        obj = require_mapping(obj, "operation")
        src = obj.get("source_account")
        return cls(
            body=operation_body_from_dict(require(obj, "body", "operation")),
            source_account=str(src) if src is not None else None,
        )

    @classmethod
    def invoke(cls, contract: ScAddress, function_name: str, *args: ScVal) -> "Operation":
        """Shorthand for a direct contract-function call operation."""
        return cls(InvokeHostFunctionOp(InvokeContract(contract, function_name, tuple(args))))


# ------------------------------ transaction ---------------------------------


@dataclass(frozen=True)
class Transaction:
    source_account: str
    fee: int
    sequence: int
    operations: Optional[Tuple[Operation, ...]] = None
    memo: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Any) -> "Transaction":
        obj = require_mapping(obj, "transaction")
        ops = obj.get("operations")
        memo = obj.get("memo")
        return cls(
            source_account=str(require(obj, "source_account", "transaction")),
            fee=as_int(obj.get("fee", 0), "fee"),
            sequence=as_int(obj.get("sequence", 0), "sequence"),
            operations=tuple(Operation.from_dict(o) for o in seq(ops, "operations")) if ops is not None else None,
            memo=str(memo) if memo is not None else None,
        )


@dataclass(frozen=True)
class DecoratedSignature:
    hint: bytes
    signature: bytes


@dataclass(frozen=True)
class TransactionEnvelope:
    tx: Transaction
    signatures: Tuple[DecoratedSignature, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any) -> "TransactionEnvelope":
        obj = require_mapping(obj, "envelope")
        sigs = []
        for s in seq(obj.get("signatures"), "signatures"):
            m = require_mapping(s, "signature")
            sigs.append(
                DecoratedSignature(
                    hint=hex_to_bytes(require(m, "hint", "signature")),
                    signature=hex_to_bytes(require(m, "signature", "signature")),
                )
            )
        return cls(tx=Transaction.from_dict(require(obj, "tx", "envelope")), signatures=tuple(sigs))


__all__ = [
    "HostFunction",
    "InvokeContract",
    "CreateContract",
    "UploadWasm",
    "host_function_from_dict",
    "OperationBody",
    "InvokeHostFunctionOp",
    "PaymentOp",
    "CreateAccountOp",
    "ExtendFootprintTtlOp",
    "RestoreFootprintOp",
    "operation_body_from_dict",
    "Operation",
    "Transaction",
    "DecoratedSignature",
    "TransactionEnvelope",
]
