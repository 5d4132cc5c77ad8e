"""
Domain models returned by the `KNS` client.

All records are immutable once built; `extend_name_registration` returns a
*new* `Name` via `dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Literal, Tuple

from .account_id import AccountId, ContractId, TokenId

__all__ = [
    "RegistryVersion",
    "AddressRecord",
    "TextRecord",
    "TldId",
    "NameId",
    "Name",
    "OwnedName",
    "NameRecords",
    "V3_SERIAL_OFFSET",
    "to_contract_serial_number",
    "from_contract_serial_number",
]

RegistryVersion = Literal[1, 2, 3]

# v3 serials are stored shifted by this offset; v2 serials are negated.
V3_SERIAL_OFFSET = 32000


def to_contract_serial_number(version: int, serial_number: int) -> int:
    """NFT serial -> absolute serial used as the registry contract's key."""
    if version == 3:
        return V3_SERIAL_OFFSET + serial_number
    if version == 2:
        return -serial_number
    return serial_number


def from_contract_serial_number(contract_serial_number: int) -> tuple[RegistryVersion, int]:
    """Absolute serial -> (registry version, NFT serial)."""
    if contract_serial_number > V3_SERIAL_OFFSET:
        return 3, contract_serial_number - V3_SERIAL_OFFSET
    if contract_serial_number < 0:
        return 2, -contract_serial_number
    return 1, contract_serial_number


@dataclass(frozen=True)
class AddressRecord:
    name: str
    coin_type: int
    address_bytes: bytes
    address: str


@dataclass(frozen=True)
class TextRecord:
    name: str
    text: str

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "TextRecord":
        return cls(name=str(obj.get("name", "")), text=str(obj.get("text", "")))


@dataclass(frozen=True)
class TldId:
    """Registry contract and NFT token currently selling names under a TLD."""

    contract_id: ContractId
    token_id: TokenId


@dataclass(frozen=True)
class NameId:
    token_id: TokenId
    contract_id: ContractId
    serial_number: int
    contract_serial_number: int
    version: RegistryVersion


@dataclass(frozen=True)
class Name:
    domain: str
    owner_account_id: AccountId
    expiration_time: datetime
    serial_number: int
    contract_serial_number: int
    token_id: TokenId
    contract_id: ContractId
    version: RegistryVersion

    @property
    def name_id(self) -> NameId:
        return NameId(
            token_id=self.token_id,
            contract_id=self.contract_id,
            serial_number=self.serial_number,
            contract_serial_number=self.contract_serial_number,
            version=self.version,
        )


@dataclass(frozen=True)
class OwnedName:
    domain: str
    expiration_time: datetime


@dataclass(frozen=True)
class NameRecords:
    """Every address and text record stored under a name."""

    address: Tuple[AddressRecord, ...] = ()
    text: Tuple[TextRecord, ...] = ()
