"""
Typed error classes for the KNS SDK.

Every error raised by the name parser, address codec, pricing helpers and the
`KNS` facade derives from `KnsError`, so callers can catch specific failure
modes while still being able to catch the base class. Transport failures from
the HTTP layer (`httpx.HTTPError`) are not wrapped and propagate unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "KnsError",
    "InvalidNameFormat",
    "InvalidRecordNameFormat",
    "UnsupportedCoinType",
    "NameNotFound",
    "SignerRequired",
    "SignerRejected",
    "LedgerStatusError",
    "ValueTooLarge",
]


class KnsError(Exception):
    """Base class for all SDK errors."""


@dataclass(eq=False)
class InvalidNameFormat(KnsError, ValueError):
    """Raised when a name is not of the form `example.hh`."""

    name: str

    def __str__(self) -> str:
        return f"invalid name {self.name!r}, expected a name of the form `example.hh`"


@dataclass(eq=False)
class InvalidRecordNameFormat(KnsError, ValueError):
    """Raised when a record name is not of the form `example.hh` or `test.example.hh`."""

    name: str

    def __str__(self) -> str:
        return (
            f"invalid record name {self.name!r}, expected a record name of the form "
            "`example.hh` or `test.example.hh`"
        )


@dataclass(eq=False)
class UnsupportedCoinType(KnsError):
    """Raised when a string address is given for a coin type the codec cannot serialize."""

    coin_type: int

    def __str__(self) -> str:
        return (
            f"no serialization for coinType {self.coin_type} available, "
            "please serialize before calling set_address"
        )


@dataclass(eq=False)
class NameNotFound(KnsError):
    """
    Raised when the resolver reports a name as absent (HTTP 404) or expired
    (HTTP 400). Safe to treat as "not registered".
    """

    name: Optional[str] = None

    def __str__(self) -> str:
        return f"name not found: {self.name}" if self.name else "name not found"


class SignerRequired(KnsError):
    """Raised when a write operation is invoked before `set_signer`."""

    def __init__(self) -> None:
        super().__init__("signer required, call set_signer before calling this method")


@dataclass(eq=False)
class SignerRejected(KnsError):
    """
    Raised when the signer declined the transaction or failed to produce a
    submittable one. `source` holds the underlying exception, if any.
    """

    source: Optional[BaseException] = None

    def __str__(self) -> str:
        if self.source is None:
            return "signer rejected the transaction"
        return f"signer rejected the transaction: {self.source!r}"


@dataclass(eq=False)
class LedgerStatusError(KnsError):
    """
    A ledger status failure (e.g. INSUFFICIENT_PAYER_BALANCE) reported for a
    transaction. Signers raise this to surface a real ledger status; it is
    re-raised as-is instead of being wrapped in `SignerRejected`.
    """

    status: str
    transaction_id: Optional[str] = None
    receipt: Optional[Any] = None

    def __str__(self) -> str:
        suffix = f" tx={self.transaction_id}" if self.transaction_id else ""
        return f"ledger status {self.status}{suffix}"


@dataclass(eq=False)
class ValueTooLarge(KnsError, ValueError):
    """Raised when a value does not fit a fixed-width slot."""

    size: int
    limit: int

    def __str__(self) -> str:
        return f"value of {self.size} bytes exceeds the {self.limit}-byte slot"
