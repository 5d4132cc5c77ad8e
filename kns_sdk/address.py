"""
kns_sdk.address
===============

Coin-type aware address codec.

Address records are stored on-chain (and returned by the resolver) as raw
bytes whose layout depends on the coin type (SLIP-44 numbering):

=========  ==========================  =========================================
coin type  human form                  canonical bytes
=========  ==========================  =========================================
3030       ``0.0.1040`` (Hedera)       20-byte solidity form; protobuf
                                       ``AccountID`` when the account is keyed
                                       by an alias public key
0          ``bc1q…`` / ``1A1z…``       the UTF-8 text itself, verbatim
60/714/    ``0x`` + 40 hex chars       the 20 decoded bytes
9006
other      n/a                         caller must pre-serialize
=========  ==========================  =========================================

There is no global fixed width: padding to 32 bytes happens only when a value
is placed in a ``bytes32`` contract slot (see `kns_sdk.utils.bytes.to_bytes32`).

New chains are added by extending `CoinType` and the two dispatch functions
`serialize_address` / `format_address`.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from .account_id import SOLIDITY_ADDRESS_LEN, AccountId
from .errors import UnsupportedCoinType
from .utils.bytes import BytesLike, from_hex, to_hex, utf8_decode, utf8_encode

__all__ = [
    "CoinType",
    "EVM_COIN_TYPES",
    "serialize_address",
    "serialize_hedera_address",
    "deserialize_hedera_address",
    "format_address",
]


class CoinType(IntEnum):
    BTC = 0
    ETH = 60
    BNB = 714
    HBAR = 3030
    BSC = 9006


EVM_COIN_TYPES = frozenset({CoinType.ETH, CoinType.BNB, CoinType.BSC})

_EVM_ADDRESS_LEN = 20


def _serialize_evm(coin_type: int, address: str) -> bytes:
    if not address.startswith(("0x", "0X")):
        raise ValueError(f"coinType {coin_type} address must be 0x-prefixed hex, got {address!r}")
    raw = from_hex(address)
    if len(raw) != _EVM_ADDRESS_LEN:
        raise ValueError(
            f"coinType {coin_type} address must be {_EVM_ADDRESS_LEN} bytes, got {len(raw)}"
        )
    return raw


def serialize_hedera_address(address: Union[BytesLike, str, AccountId]) -> bytes:
    """
    Serialize a Hedera account for coin type 3030.

    Numbered accounts use the 20-byte solidity form; alias-keyed accounts use
    the protobuf ``AccountID`` encoding. Bytes are passed through unchanged.
    """
    if isinstance(address, (bytes, bytearray, memoryview)):
        return bytes(address)
    account_id = address if isinstance(address, AccountId) else AccountId.from_string(address)
    if account_id.has_alias:
        return account_id.to_bytes()
    return from_hex(account_id.to_solidity_address())


def serialize_address(coin_type: int, address: Union[BytesLike, str]) -> bytes:
    """
    Convert a human-readable address into its canonical bytes for `coin_type`.

    Bytes input is assumed to be pre-serialized and returned unchanged.
    Raises UnsupportedCoinType for a string address of an unknown coin type.
    """
    if isinstance(address, (bytes, bytearray, memoryview)):
        return bytes(address)

    if coin_type == CoinType.HBAR:
        return serialize_hedera_address(address)
    elif coin_type == CoinType.BTC:
        return utf8_encode(address)
    elif coin_type in EVM_COIN_TYPES:
        return _serialize_evm(coin_type, address)
    else:
        raise UnsupportedCoinType(coin_type)


def deserialize_hedera_address(data: BytesLike) -> AccountId:
    """
    Recover a Hedera account id from its stored bytes.

    Exactly 20 bytes is the solidity form; any other length is decoded as a
    protobuf ``AccountID`` (alias keys, arbitrary shard/realm/num).
    """
    raw = bytes(data)
    if len(raw) == SOLIDITY_ADDRESS_LEN:
        return AccountId.from_solidity_address(to_hex(raw))
    return AccountId.from_bytes(raw)


def format_address(coin_type: int, data: BytesLike) -> str:
    """
    Render stored address bytes for display. Never fails for unknown coin
    types: those fall back to ``0x`` + lowercase hex.
    """
    if coin_type == CoinType.HBAR:
        return str(deserialize_hedera_address(data))
    elif coin_type == CoinType.BTC:
        # invalid UTF-8 renders as U+FFFD
        return utf8_decode(data, errors="replace")
    else:
        return to_hex(data, prefix=True)
