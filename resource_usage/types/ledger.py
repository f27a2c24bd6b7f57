"""
resource_usage.types.ledger — ledger keys, entries and entry-change records.

Change records
--------------
Each operation in a transaction's metadata carries an ordered list of
`LedgerEntryChange` records:

  created  : entry did not exist before; carries the new entry
  updated  : entry existed; carries the post-change entry
  removed  : entry was deleted; carries only its key
  state    : pre-change snapshot of an entry that is then updated/removed
  restored : archived entry brought back into live state

Only ``created`` and ``updated`` carry a post-change value that counts toward
the largest-entry measurement.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from .address import ScAddress, address_from_dict
from .common import as_int, hex_to_bytes, require, require_mapping, type_tag, unknown_variant
from .scval import ScVal, scval_from_dict


class ContractDataDurability(str, Enum):
    TEMPORARY = "temporary"
    PERSISTENT = "persistent"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


def _durability(v: Any) -> ContractDataDurability:
    try:
        return ContractDataDurability(str(v).lower())
    except ValueError:
        raise ValueError(f"unknown contract data durability: {v!r}") from None


# ------------------------------ keys ----------------------------------------


@dataclass(frozen=True)
class LedgerKeyAccount:
    TYPE: ClassVar[str] = "account"
    account_id: bytes


@dataclass(frozen=True)
class LedgerKeyContractData:
    TYPE: ClassVar[str] = "contract_data"
    contract: ScAddress
    key: ScVal
    durability: ContractDataDurability = ContractDataDurability.PERSISTENT


@dataclass(frozen=True)
class LedgerKeyContractCode:
    TYPE: ClassVar[str] = "contract_code"
    hash: bytes


LedgerKey = Union[LedgerKeyAccount, LedgerKeyContractData, LedgerKeyContractCode]


def ledger_key_from_dict(obj: Any) -> LedgerKey:
    tag = type_tag(obj, "ledger key")
    if tag == LedgerKeyAccount.TYPE:
        return LedgerKeyAccount(hex_to_bytes(require(obj, "account_id", tag)))
    if tag == LedgerKeyContractData.TYPE:
        return LedgerKeyContractData(
            contract=address_from_dict(require(obj, "contract", tag)),
            key=scval_from_dict(require(obj, "key", tag)),
            durability=_durability(obj.get("durability", "persistent")),
        )
    if tag == LedgerKeyContractCode.TYPE:
        return LedgerKeyContractCode(hex_to_bytes(require(obj, "hash", tag)))
    raise unknown_variant("ledger key", tag, ("account", "contract_data", "contract_code"))


# ------------------------------ entries -------------------------------------


@dataclass(frozen=True)
class AccountEntry:
    TYPE: ClassVar[str] = "account"
    account_id: bytes
    balance: int
    seq_num: int


@dataclass(frozen=True)
class ContractDataEntry:
    TYPE: ClassVar[str] = "contract_data"
    contract: ScAddress
    key: ScVal
    durability: ContractDataDurability
    val: ScVal


@dataclass(frozen=True)
class ContractCodeEntry:
    TYPE: ClassVar[str] = "contract_code"
    hash: bytes
    code: bytes


@dataclass(frozen=True)
class TtlEntry:
    TYPE: ClassVar[str] = "ttl"
    key_hash: bytes
    live_until_ledger_seq: int


LedgerEntryData = Union[AccountEntry, ContractDataEntry, ContractCodeEntry, TtlEntry]


def ledger_entry_data_from_dict(obj: Any) -> LedgerEntryData:
    tag = type_tag(obj, "ledger entry data")
    if tag == AccountEntry.TYPE:
        return AccountEntry(
            account_id=hex_to_bytes(require(obj, "account_id", tag)),
            balance=as_int(require(obj, "balance", tag), "balance"),
            seq_num=as_int(require(obj, "seq_num", tag), "seq_num"),
        )
    if tag == ContractDataEntry.TYPE:
        return ContractDataEntry(
            contract=address_from_dict(require(obj, "contract", tag)),
            key=scval_from_dict(require(obj, "key", tag)),
            durability=_durability(obj.get("durability", "persistent")),
            val=scval_from_dict(require(obj, "val", tag)),
        )
    if tag == ContractCodeEntry.TYPE:
        return ContractCodeEntry(
            hash=hex_to_bytes(require(obj, "hash", tag)),
            code=hex_to_bytes(require(obj, "code", tag)),
        )
    if tag == TtlEntry.TYPE:
        return TtlEntry(
            key_hash=hex_to_bytes(require(obj, "key_hash", tag)),
            live_until_ledger_seq=as_int(require(obj, "live_until_ledger_seq", tag), "live_until_ledger_seq"),
        )
    raise unknown_variant("ledger entry data", tag, ("account", "contract_data", "contract_code", "ttl"))


@dataclass(frozen=True)
class LedgerEntry:
    last_modified_ledger_seq: int
    data: LedgerEntryData

    @classmethod
    def from_dict(cls, obj: Any) -> "LedgerEntry":
        obj = require_mapping(obj, "ledger entry")
        return cls(
            last_modified_ledger_seq=as_int(obj.get("last_modified_ledger_seq", 0), "last_modified_ledger_seq"),
            data=ledger_entry_data_from_dict(require(obj, "data", "ledger entry")),
        )


# ------------------------------ changes -------------------------------------


@dataclass(frozen=True)
class EntryCreated:
    TYPE: ClassVar[str] = "created"
    entry: LedgerEntry


@dataclass(frozen=True)
class EntryUpdated:
    TYPE: ClassVar[str] = "updated"
    entry: LedgerEntry


@dataclass(frozen=True)
class EntryRemoved:
    TYPE: ClassVar[str] = "removed"
    key: LedgerKey


@dataclass(frozen=True)
class EntryState:
    TYPE: ClassVar[str] = "state"
    entry: LedgerEntry


@dataclass(frozen=True)
class EntryRestored:
    TYPE: ClassVar[str] = "restored"
    entry: LedgerEntry


LedgerEntryChange = Union[EntryCreated, EntryUpdated, EntryRemoved, EntryState, EntryRestored]

_ENTRY_CHANGES = {c.TYPE: c for c in (EntryCreated, EntryUpdated, EntryState, EntryRestored)}


def ledger_entry_change_from_dict(obj: Any) -> LedgerEntryChange:
    tag = type_tag(obj, "ledger entry change")
    if tag == EntryRemoved.TYPE:
        return EntryRemoved(ledger_key_from_dict(require(obj, "key", tag)))
    cls = _ENTRY_CHANGES.get(tag)
    if cls is None:
        raise unknown_variant("ledger entry change", tag, ("created", "updated", "removed", "state", "restored"))
    return cls(LedgerEntry.from_dict(require(obj, "entry", tag)))


__all__ = [
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
]
