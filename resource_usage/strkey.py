"""
resource_usage.strkey
=====================

Canonical text form for ledger addresses ("strkeys").

Format
------
    strkey = base32( version_byte || payload || crc16_xmodem_le(version_byte || payload) )

with padding stripped. The version byte selects the leading character:

    account  (G…)  6 << 3
    contract (C…)  2 << 3

Payloads are 32 bytes, so both kinds encode to 56 characters.

This module provides:
- encode_contract(raw32) -> "C…"
- encode_account(raw32)  -> "G…"
- decode_contract(s) / decode_account(s) -> raw32
- is_valid(s) -> bool
"""

from __future__ import annotations

import base64
import struct
from typing import Tuple

__all__ = [
    "VERSION_ACCOUNT",
    "VERSION_CONTRACT",
    "StrKeyError",
    "encode",
    "decode",
    "encode_contract",
    "encode_account",
    "decode_contract",
    "decode_account",
    "is_valid",
]

VERSION_ACCOUNT = 6 << 3
VERSION_CONTRACT = 2 << 3

_PAYLOAD_LEN = 32


class StrKeyError(ValueError):
    """Raised for malformed strkeys or payloads."""


def _crc16_xmodem(data: bytes) -> int:
    crc = 0x0000
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def encode(version: int, payload: bytes) -> str:
    if not (0 <= version <= 0xFF):
        raise StrKeyError(f"version byte out of range: {version}")
    payload = bytes(payload)
    if len(payload) != _PAYLOAD_LEN:
        raise StrKeyError(f"payload must be {_PAYLOAD_LEN} bytes, got {len(payload)}")
    body = bytes([version]) + payload
    checksum = struct.pack("<H", _crc16_xmodem(body))
    return base64.b32encode(body + checksum).decode("ascii").rstrip("=")


def decode(s: str) -> Tuple[int, bytes]:
    """Return (version_byte, payload) after verifying the checksum."""
    if not isinstance(s, str) or not s:
        raise StrKeyError("strkey must be a non-empty string")
    padded = s + "=" * (-len(s) % 8)
    try:
        raw = base64.b32decode(padded.encode("ascii"), casefold=False)
    except (ValueError, UnicodeEncodeError) as e:
        raise StrKeyError(f"invalid base32 in strkey: {s!r}") from e
    if len(raw) != 1 + _PAYLOAD_LEN + 2:
        raise StrKeyError(f"unexpected strkey length: {len(raw)} bytes")
    body, checksum = raw[:-2], raw[-2:]
    if struct.unpack("<H", checksum)[0] != _crc16_xmodem(body):
        raise StrKeyError(f"strkey checksum mismatch: {s!r}")
    return body[0], body[1:]


def _decode_expect(s: str, version: int) -> bytes:
    got, payload = decode(s)
    if got != version:
        raise StrKeyError(f"unexpected strkey version byte {got} (want {version})")
    return payload


def encode_contract(contract_id: bytes) -> str:
    return encode(VERSION_CONTRACT, contract_id)


def encode_account(account_id: bytes) -> str:
    return encode(VERSION_ACCOUNT, account_id)


def decode_contract(s: str) -> bytes:
    return _decode_expect(s, VERSION_CONTRACT)


def decode_account(s: str) -> bytes:
    return _decode_expect(s, VERSION_ACCOUNT)


def is_valid(s: str) -> bool:
    try:
        decode(s)
        return True
    except StrKeyError:
        return False
