"""
kns_sdk.ledger
==============

The contract between the name service and the ledger transaction layer.

Building, freezing, signing, submitting and receipt-polling Hedera
transactions is delegated to an injected collaborator. This module fixes the
shapes crossing that boundary:

- `ContractFunctionParameters`: ordered, typed call arguments. Byte values are
  the already-encoded outputs of the address codec and `to_bytes32`.
- `ContractExecuteTransaction` / `TokenAssociateTransaction`: plain
  descriptions of what to submit.
- `Signer`: signs and submits a transaction on behalf of `account_id`.
- `LedgerClient`: fetches the receipt (with child receipts) for a submitted
  transaction id.

Adapters for a concrete ledger SDK implement `Signer` and `LedgerClient`;
tests use in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import (Any, List, Optional, Protocol, Sequence, Tuple, Union,
                    runtime_checkable)

from .account_id import AccountId, ContractId, TokenId
from .errors import ValueTooLarge
from .utils.bytes import BYTES32, BytesLike

__all__ = [
    "ContractFunctionParameters",
    "ContractExecuteTransaction",
    "TokenAssociateTransaction",
    "Transaction",
    "TransactionResponse",
    "ChildReceipt",
    "TransactionReceipt",
    "Signer",
    "LedgerClient",
]

_INT_RANGES = {
    "int64": (-(1 << 63), (1 << 63) - 1),
    "uint32": (0, (1 << 32) - 1),
    "uint256": (0, (1 << 256) - 1),
}


class ContractFunctionParameters:
    """
    Ordered ``(abi_type, value)`` arguments for a contract call.

    Builder methods validate ranges/widths eagerly and return `self`::

        params = (
            ContractFunctionParameters()
            .add_int64(32001)
            .add_bytes32(to_bytes32(b"www"))
            .add_uint32(3030)
            .add_bytes(address_bytes)
        )
    """

    def __init__(self) -> None:
        self._args: List[Tuple[str, Any]] = []

    def _add_int(self, abi_type: str, value: int) -> "ContractFunctionParameters":
        lo, hi = _INT_RANGES[abi_type]
        if not isinstance(value, int) or isinstance(value, bool) or not lo <= value <= hi:
            raise ValueError(f"{abi_type} argument out of range: {value!r}")
        self._args.append((abi_type, value))
        return self

    def add_int64(self, value: int) -> "ContractFunctionParameters":
        return self._add_int("int64", value)

    def add_uint32(self, value: int) -> "ContractFunctionParameters":
        return self._add_int("uint32", value)

    def add_uint256(self, value: int) -> "ContractFunctionParameters":
        return self._add_int("uint256", value)

    def add_bytes32(self, value: BytesLike) -> "ContractFunctionParameters":
        raw = bytes(value)
        if len(raw) > BYTES32:
            raise ValueTooLarge(size=len(raw), limit=BYTES32)
        if len(raw) != BYTES32:
            raise ValueError(f"bytes32 argument must be exactly {BYTES32} bytes, got {len(raw)}")
        self._args.append(("bytes32", raw))
        return self

    def add_bytes(self, value: BytesLike) -> "ContractFunctionParameters":
        self._args.append(("bytes", bytes(value)))
        return self

    def add_string(self, value: str) -> "ContractFunctionParameters":
        self._args.append(("string", str(value)))
        return self

    @property
    def args(self) -> Sequence[Tuple[str, Any]]:
        return tuple(self._args)

    @property
    def types(self) -> Sequence[str]:
        return tuple(t for t, _ in self._args)

    @property
    def values(self) -> Sequence[Any]:
        return tuple(v for _, v in self._args)

    def __len__(self) -> int:
        return len(self._args)

    def __repr__(self) -> str:
        return f"ContractFunctionParameters({', '.join(self.types)})"


@dataclass
class ContractExecuteTransaction:
    contract_id: ContractId
    function_name: str
    params: ContractFunctionParameters
    gas: int
    payable_amount: Decimal = Decimal(0)  # in HBAR
    transaction_id: Optional[str] = None  # set by the signer when frozen


@dataclass
class TokenAssociateTransaction:
    account_id: AccountId
    token_ids: List[TokenId] = field(default_factory=list)
    transaction_id: Optional[str] = None


Transaction = Union[ContractExecuteTransaction, TokenAssociateTransaction]


@dataclass(frozen=True)
class TransactionResponse:
    transaction_id: str


@dataclass(frozen=True)
class ChildReceipt:
    status: str = "SUCCESS"
    serials: Sequence[int] = ()


@dataclass(frozen=True)
class TransactionReceipt:
    status: str
    transaction_id: Optional[str] = None
    children: Sequence[ChildReceipt] = ()

    def minted_serials(self) -> List[int]:
        """First serial of every child receipt that minted NFTs, in order."""
        return [child.serials[0] for child in self.children if child.serials]


@runtime_checkable
class Signer(Protocol):
    """
    Signing capability (a wallet or local key).

    `call` freezes, signs and submits `transaction`, returning its response.
    It may return None when the user declines. A ledger status failure should
    be raised as `kns_sdk.errors.LedgerStatusError`; anything else raised is
    treated as a rejection.
    """

    @property
    def account_id(self) -> AccountId: ...

    def call(self, transaction: Transaction) -> Optional[TransactionResponse]: ...


@runtime_checkable
class LedgerClient(Protocol):
    """Receipt lookup against the ledger the signer submits to."""

    def get_receipt(
        self, transaction_id: str, *, include_children: bool = True
    ) -> TransactionReceipt: ...

    def close(self) -> None: ...
