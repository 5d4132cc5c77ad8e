"""
kns_sdk.account_id
==================

Ledger entity identifiers: accounts, tokens and contracts.

Every entity is addressed by a ``shard.realm.num`` triplet. Accounts may
instead be addressed by an *alias key*: ``shard.realm.<DER public key hex>``,
in which case the number component is zero.

Encodings
---------
String
    ``"0.0.1040"`` or ``"0.0.302a300506032b6570032100<32-byte key hex>"``.
    A trailing checksum (``"0.0.1040-abcde"``) is accepted and ignored, and a
    bare number is shorthand for ``0.0.<num>``.

Solidity address (20 bytes)
    ``shard`` as 4 big-endian bytes, then ``realm`` and ``num`` as 8 big-endian
    bytes each. Cannot carry an alias key.

Protobuf (``AccountID`` message, variable length)
    field 1 shard, field 2 realm (both always written, zero included),
    field 3 account number *or* field 4 alias, where the alias is a serialized
    ``Key`` message (field 2 = ED25519 bytes, field 6 = ECDSA secp256k1 bytes).

Example
-------
    >>> AccountId(50, 20, 1040).to_bytes().hex()
    '08321014189008'
    >>> AccountId.from_solidity_address("0000003200000000000000140000000000000410")
    AccountId(shard=50, realm=20, num=1040, alias_key=None)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type, TypeVar

from .utils.bytes import BytesLike, from_hex, to_hex
from .utils.proto import (WIRE_LEN, WIRE_VARINT, encode_bytes_field,
                          encode_varint_field, iter_fields)

__all__ = [
    "KeyType",
    "PublicKey",
    "EntityId",
    "AccountId",
    "TokenId",
    "ContractId",
    "SOLIDITY_ADDRESS_LEN",
]

SOLIDITY_ADDRESS_LEN = 20

_MAX_U32 = (1 << 32) - 1
_MAX_U64 = (1 << 64) - 1


class KeyType(str, Enum):
    ED25519 = "ED25519"
    ECDSA_SECP256K1 = "ECDSA_SECP256K1"


# DER SubjectPublicKeyInfo prefixes, raw key bytes follow.
_DER_PREFIX = {
    KeyType.ED25519: bytes.fromhex("302a300506032b6570032100"),
    KeyType.ECDSA_SECP256K1: bytes.fromhex("302d300706052b8104000a032200"),
}
_RAW_LEN = {KeyType.ED25519: 32, KeyType.ECDSA_SECP256K1: 33}
# field numbers inside the protobuf `Key` oneof
_KEY_FIELD = {KeyType.ED25519: 2, KeyType.ECDSA_SECP256K1: 6}


@dataclass(frozen=True)
class PublicKey:
    """A public key usable as an account alias."""

    key_type: KeyType
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != _RAW_LEN[self.key_type]:
            raise ValueError(
                f"{self.key_type.value} public key must be {_RAW_LEN[self.key_type]} bytes, "
                f"got {len(self.raw)}"
            )

    @classmethod
    def from_bytes(cls, data: BytesLike) -> "PublicKey":
        """Accept DER-encoded or raw (32-byte ED25519 / 33-byte compressed ECDSA) keys."""
        raw = bytes(data)
        for key_type, prefix in _DER_PREFIX.items():
            if raw.startswith(prefix) and len(raw) == len(prefix) + _RAW_LEN[key_type]:
                return cls(key_type, raw[len(prefix):])
        if len(raw) == 32:
            return cls(KeyType.ED25519, raw)
        if len(raw) == 33 and raw[0] in (0x02, 0x03):
            return cls(KeyType.ECDSA_SECP256K1, raw)
        raise ValueError(f"unrecognized public key encoding ({len(raw)} bytes)")

    @classmethod
    def from_string(cls, text: str) -> "PublicKey":
        return cls.from_bytes(from_hex(text.strip()))

    def to_der(self) -> bytes:
        return _DER_PREFIX[self.key_type] + self.raw

    def to_protobuf(self) -> bytes:
        return encode_bytes_field(_KEY_FIELD[self.key_type], self.raw)

    @classmethod
    def from_protobuf(cls, data: BytesLike) -> "PublicKey":
        by_field = {num: kt for kt, num in _KEY_FIELD.items()}
        for field_number, wire_type, value in iter_fields(data):
            if field_number in by_field and wire_type == WIRE_LEN:
                return cls(by_field[field_number], bytes(value))
        raise ValueError("protobuf Key carries no ED25519 or ECDSA secp256k1 key")

    def __str__(self) -> str:
        return to_hex(self.to_der())


E = TypeVar("E", bound="EntityId")


def _split_entity(text: str) -> list[str]:
    s = text.strip()
    # drop an optional `-checksum` suffix
    if "-" in s:
        s = s.split("-", 1)[0]
    parts = s.split(".")
    if len(parts) == 1:
        parts = ["0", "0", parts[0]]
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"invalid entity id {text!r}, expected `shard.realm.num`")
    return parts


def _parse_component(text: str, part: str) -> int:
    if not (part.isascii() and part.isdigit()):
        raise ValueError(f"invalid entity id {text!r}: {part!r} is not a non-negative integer")
    return int(part)


@dataclass(frozen=True)
class EntityId:
    """A ``shard.realm.num`` ledger entity identifier."""

    shard: int
    realm: int
    num: int

    def __post_init__(self) -> None:
        for field_name in ("shard", "realm", "num"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{field_name} must be a non-negative integer, got {value!r}")

    @classmethod
    def from_string(cls: Type[E], text: str) -> E:
        parts = _split_entity(text)
        shard, realm, num = (_parse_component(text, p) for p in parts)
        return cls(shard, realm, num)

    def to_solidity_address(self) -> str:
        """20-byte condensed form as lowercase hex (no prefix)."""
        if self.shard > _MAX_U32 or self.realm > _MAX_U64 or self.num > _MAX_U64:
            raise ValueError(f"{self} does not fit the solidity address form")
        packed = (
            self.shard.to_bytes(4, "big")
            + self.realm.to_bytes(8, "big")
            + self.num.to_bytes(8, "big")
        )
        return to_hex(packed)

    @classmethod
    def from_solidity_address(cls: Type[E], address: str) -> E:
        raw = from_hex(address)
        if len(raw) != SOLIDITY_ADDRESS_LEN:
            raise ValueError(
                f"solidity address must be {SOLIDITY_ADDRESS_LEN} bytes, got {len(raw)}"
            )
        return cls(
            int.from_bytes(raw[0:4], "big"),
            int.from_bytes(raw[4:12], "big"),
            int.from_bytes(raw[12:20], "big"),
        )

    def __str__(self) -> str:
        return f"{self.shard}.{self.realm}.{self.num}"


@dataclass(frozen=True)
class TokenId(EntityId):
    """Token (NFT collection) id."""


@dataclass(frozen=True)
class ContractId(EntityId):
    """Smart-contract id."""


@dataclass(frozen=True)
class AccountId(EntityId):
    """Account id, optionally keyed by an alias public key instead of a number."""

    num: int = 0
    alias_key: Optional[PublicKey] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.alias_key is not None and self.num != 0:
            raise ValueError("an aliased account id must have a zero account number")

    @property
    def has_alias(self) -> bool:
        return self.alias_key is not None

    @classmethod
    def from_string(cls, text: str) -> "AccountId":
        shard_s, realm_s, tail = _split_entity(text)
        shard = _parse_component(text, shard_s)
        realm = _parse_component(text, realm_s)
        if tail.isascii() and tail.isdigit():
            return cls(shard, realm, int(tail))
        try:
            key = PublicKey.from_string(tail)
        except ValueError as e:
            raise ValueError(f"invalid account id {text!r}: {e}") from e
        return cls(shard, realm, 0, key)

    def to_solidity_address(self) -> str:
        if self.alias_key is not None:
            raise ValueError(f"aliased account id {self} has no solidity address form")
        return super().to_solidity_address()

    def to_bytes(self) -> bytes:
        """Protobuf ``AccountID`` encoding."""
        out = encode_varint_field(1, self.shard) + encode_varint_field(2, self.realm)
        if self.alias_key is not None:
            out += encode_bytes_field(4, self.alias_key.to_protobuf())
        else:
            out += encode_varint_field(3, self.num)
        return out

    @classmethod
    def from_bytes(cls, data: BytesLike) -> "AccountId":
        """Decode a protobuf ``AccountID``; raises ValueError on malformed input."""
        shard = realm = num = 0
        alias: Optional[PublicKey] = None
        for field_number, wire_type, value in iter_fields(data):
            if field_number in (1, 2, 3):
                if wire_type != WIRE_VARINT:
                    raise ValueError(f"AccountID field {field_number} must be a varint")
                if field_number == 1:
                    shard = int(value)
                elif field_number == 2:
                    realm = int(value)
                else:
                    num = int(value)
            elif field_number == 4:
                if wire_type != WIRE_LEN:
                    raise ValueError("AccountID alias must be length-delimited")
                alias = PublicKey.from_protobuf(value)
        if alias is not None:
            return cls(shard, realm, 0, alias)
        return cls(shard, realm, num)

    def __str__(self) -> str:
        if self.alias_key is not None:
            return f"{self.shard}.{self.realm}.{self.alias_key}"
        return super().__str__()
