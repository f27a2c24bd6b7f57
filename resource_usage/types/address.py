"""
resource_usage.types.address — ledger addresses.

`ScAddress` is a closed union of:
  - ContractAddress : 32-byte contract id, rendered as a ``C…`` strkey
  - AccountAddress  : 32-byte ed25519 account id, rendered as a ``G…`` strkey

``str(address)`` is the canonical text form used as the Sample Store key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from .. import strkey

from .common import hex_to_bytes, require, type_tag, unknown_variant


def _check_len(b: bytes, what: str) -> bytes:
    if len(b) != 32:
        raise ValueError(f"{what} must be 32 bytes, got {len(b)}")
    return b


@dataclass(frozen=True)
class ContractAddress:
    TYPE: ClassVar[str] = "contract"

    contract_id: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "contract_id", _check_len(bytes(self.contract_id), "contract_id"))

    def __str__(self) -> str:
        return strkey.encode_contract(self.contract_id)

    @classmethod
    def from_strkey(cls, s: str) -> "ContractAddress":
        return cls(strkey.decode_contract(s))


@dataclass(frozen=True)
class AccountAddress:
    TYPE: ClassVar[str] = "account"

    account_id: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", _check_len(bytes(self.account_id), "account_id"))

    def __str__(self) -> str:
        return strkey.encode_account(self.account_id)

    @classmethod
    def from_strkey(cls, s: str) -> "AccountAddress":
        return cls(strkey.decode_account(s))


ScAddress = Union[ContractAddress, AccountAddress]


def address_from_dict(obj: Any) -> ScAddress:
    """Parse a tagged address mapping, or a bare strkey string."""
    if isinstance(obj, str):
        version, payload = strkey.decode(obj)
        if version == strkey.VERSION_CONTRACT:
            return ContractAddress(payload)
        if version == strkey.VERSION_ACCOUNT:
            return AccountAddress(payload)
        raise ValueError(f"unsupported strkey version byte {version}")
    tag = type_tag(obj, "address")
    if tag == ContractAddress.TYPE:
        return ContractAddress(hex_to_bytes(require(obj, "contract_id", "address")))
    if tag == AccountAddress.TYPE:
        return AccountAddress(hex_to_bytes(require(obj, "account_id", "address")))
    raise unknown_variant("address", tag, (ContractAddress.TYPE, AccountAddress.TYPE))


__all__ = ["ContractAddress", "AccountAddress", "ScAddress", "address_from_dict"]
