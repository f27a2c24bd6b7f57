"""
Decoded ledger structures consumed by the extractor and the store.

Every union is closed: each variant is a frozen dataclass with a ``TYPE`` tag,
and each union has a ``*_from_dict`` parser that rejects unknown tags.
"""

from .address import AccountAddress, ContractAddress, ScAddress, address_from_dict
from .ledger import (
    AccountEntry,
    ContractCodeEntry,
    ContractDataDurability,
    ContractDataEntry,
    EntryCreated,
    EntryRemoved,
    EntryRestored,
    EntryState,
    EntryUpdated,
    LedgerEntry,
    LedgerEntryChange,
    LedgerEntryData,
    LedgerKey,
    LedgerKeyAccount,
    LedgerKeyContractCode,
    LedgerKeyContractData,
    TtlEntry,
    ledger_entry_change_from_dict,
    ledger_entry_data_from_dict,
    ledger_key_from_dict,
)
from .meta import (
    ContractEvent,
    ContractEventType,
    DiagnosticEvent,
    OperationMeta,
    TransactionMeta,
    TransactionMetaV0,
    TransactionMetaV1,
    TransactionMetaV2,
    TransactionMetaV3,
    TransactionMetaV4,
    meta_version,
    transaction_meta_from_dict,
)
from .rpc import (
    GetTransactionResponse,
    LedgerFootprint,
    SendTransactionResponse,
    SimulateTransactionResponse,
    SorobanResources,
    SorobanTransactionData,
    TransactionStatus,
)
from .scval import (
    ScAddressVal,
    ScBool,
    ScBytes,
    ScI32,
    ScI64,
    ScI128,
    ScMap,
    ScMapEntry,
    ScString,
    ScSymbol,
    ScU32,
    ScU64,
    ScU128,
    ScVal,
    ScVec,
    ScVoid,
    scval_from_dict,
)
from .transaction import (
    CreateAccountOp,
    CreateContract,
    DecoratedSignature,
    ExtendFootprintTtlOp,
    HostFunction,
    InvokeContract,
    InvokeHostFunctionOp,
    Operation,
    OperationBody,
    PaymentOp,
    RestoreFootprintOp,
    Transaction,
    TransactionEnvelope,
    UploadWasm,
    host_function_from_dict,
    operation_body_from_dict,
)

__all__ = [
    # address
    "AccountAddress",
    "ContractAddress",
    "ScAddress",
    "address_from_dict",
    # scval
    "ScVal",
    "ScVoid",
    "ScBool",
    "ScU32",
    "ScI32",
    "ScU64",
    "ScI64",
    "ScU128",
    "ScI128",
    "ScSymbol",
    "ScString",
    "ScBytes",
    "ScVec",
    "ScMap",
    "ScMapEntry",
    "ScAddressVal",
    "scval_from_dict",
    # ledger
    "ContractDataDurability",
    "LedgerKey",
    "LedgerKeyAccount",
    "LedgerKeyContractData",
    "LedgerKeyContractCode",
    "ledger_key_from_dict",
    "LedgerEntryData",
    "AccountEntry",
    "ContractDataEntry",
    "ContractCodeEntry",
    "TtlEntry",
    "ledger_entry_data_from_dict",
    "LedgerEntry",
    "LedgerEntryChange",
    "EntryCreated",
    "EntryUpdated",
    "EntryRemoved",
    "EntryState",
    "EntryRestored",
    "ledger_entry_change_from_dict",
    # meta
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
    # transaction
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
    # rpc
    "LedgerFootprint",
    "SorobanResources",
    "SorobanTransactionData",
    "SimulateTransactionResponse",
    "TransactionStatus",
    "GetTransactionResponse",
    "SendTransactionResponse",
]
