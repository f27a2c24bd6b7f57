"""
resource_usage.errors — typed exceptions for metric extraction and reporting.

Extraction failures are *per call*: the session and CLI catch `ExtractError`,
log it, count it and carry on with the remaining calls. None of these errors
are retriable at this layer; retries belong to the network client.

Hierarchy
---------
ResourceUsageError (base)
 ├─ ExtractError
 │   ├─ MissingMeta        : receipt carries no transaction metadata
 │   ├─ UnsupportedMeta    : metadata version other than 4
 │   ├─ NoTransactionData  : simulation result carries no resource footprint
 │   └─ EncodeError        : canonical re-encoding exceeded depth/size limits
 └─ CaptureError           : malformed capture file

This module imports nothing from the rest of the package so it can be used
from the codec and type layers without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ResourceUsageError(Exception):
    """
    Base error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'MISSING_META').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "resource usage error"
    code: str = "RESOURCE_USAGE_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs and CLI output."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class ExtractError(ResourceUsageError):
    """Base for failures that drop a single call's sample."""

    def __init__(
        self,
        message: str = "extraction failed",
        *,
        code: str = "EXTRACT_ERROR",
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, data=data)


class MissingMeta(ExtractError):
    def __init__(self, message: str = "missing transaction meta"):
        super().__init__(message, code="MISSING_META")


class UnsupportedMeta(ExtractError):
    """Only the version 4 metadata envelope is understood."""

    def __init__(
        self,
        message: str = "unsupported transaction meta version",
        *,
        version: Optional[int] = None,
    ):
        data = {"version": version} if version is not None else None
        super().__init__(message, code="UNSUPPORTED_META", data=data)

    @property
    def version(self) -> Optional[int]:
        return (self.data or {}).get("version")


class NoTransactionData(ExtractError):
    def __init__(self, message: str = "simulate no transaction data"):
        super().__init__(message, code="NO_TRANSACTION_DATA")


class EncodeError(ExtractError):
    """
    Canonical encoding failed.

    Typical triggers:
      - nesting deeper than the configured depth limit
      - encoded output larger than the configured size cap
      - a value with no canonical representation
    """

    def __init__(
        self,
        message: str = "encoding failed",
        *,
        reason: str = "invalid",
        depth: Optional[int] = None,
        size: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        d: Dict[str, Any] = {"reason": reason}
        if depth is not None:
            d["depth"] = depth
        if size is not None:
            d["size"] = size
        if limit is not None:
            d["limit"] = limit
        super().__init__(message, code="ENCODE_ERROR", data=d)

    @property
    def reason(self) -> str:
        return str((self.data or {}).get("reason", "invalid"))


class CaptureError(ResourceUsageError):
    """Raised when a capture file cannot be read or parsed."""

    def __init__(self, message: str = "invalid capture", *, path: Optional[str] = None):
        super().__init__(
            message=message,
            code="CAPTURE_ERROR",
            data={"path": path} if path is not None else None,
        )


__all__ = [
    "ResourceUsageError",
    "ExtractError",
    "MissingMeta",
    "UnsupportedMeta",
    "NoTransactionData",
    "EncodeError",
    "CaptureError",
]
