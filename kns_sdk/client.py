"""
kns_sdk.client
==============

`KNS`: the name-service facade.

Reads go to the resolver (names, records, reverse lookups, exchange rate) and
the mirror node (NFT ownership, token associations). Writes are described as
contract-execution / token-association transactions and handed to the
configured `Signer`; receipts come from the injected `LedgerClient`.

Typical usage
-------------
    from kns_sdk import KNS, KnsConfig

    with KNS(KnsConfig.for_network("mainnet")) as kns:
        print(kns.get_hedera_address("mehcode.hh"))

    kns = KNS(ledger=my_ledger, signer=my_wallet)
    price = kns.get_register_price_hbar("example.hh")
    name = kns.register_name("example.hh", years=1)
    kns.set_address("example.hh", CoinType.ETH, "0x" + "ab" * 20)

Registry generations
--------------------
Names minted by three incompatible registry contracts coexist. The resolver
reports one absolute serial per name; `models.from_contract_serial_number`
maps it back to (version, NFT serial) and selects the matching v1/v2/v3
contract and token ids. New registrations always go to the TLD's v3 registry.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

import httpx

from .account_id import AccountId, ContractId, TokenId
from .address import (CoinType, deserialize_hedera_address, format_address,
                      serialize_address, serialize_hedera_address)
from .cache import EXCHANGE_RATE_KEY, KnsCache
from .config import KnsConfig
from .errors import (KnsError, LedgerStatusError, NameNotFound,
                     SignerRejected, SignerRequired)
from .ledger import (ContractExecuteTransaction, ContractFunctionParameters,
                     LedgerClient, Signer, TokenAssociateTransaction,
                     Transaction, TransactionReceipt)
from .mirror import MirrorClient
from .models import (AddressRecord, Name, NameId, NameRecords, OwnedName,
                     TextRecord, TldId, from_contract_serial_number,
                     to_contract_serial_number)
from .names import (ParsedName, format_name, normalize_name,
                    normalize_record_name, parse_name, parse_record_name)
from .pricing import get_register_price_hbar as _usd_to_hbar
from .pricing import get_register_price_usd as _price_usd
from .resolver import ResolverClient, ResolverResult, ResultKind
from .utils.bytes import BytesLike, b64_decode, to_bytes32, utf8_encode
from .version import CURRENT_REGISTRY_VERSION

log = logging.getLogger(__name__)

T = TypeVar("T")

REGISTER_GAS = 2_860_000
SET_RECORD_GAS = 300_000
DELETE_RECORD_GAS = 200_000

_SUCCESS = "SUCCESS"


def _parse_timestamp(value: str) -> datetime:
    """ISO-8601 (``Z`` suffix allowed) -> timezone-aware datetime (UTC if naive)."""
    s = str(value).strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def add_years(when: datetime, years: int) -> datetime:
    """Calendar-year addition; Feb 29 lands on Feb 28 in non-leap years."""
    try:
        return when.replace(year=when.year + years)
    except ValueError:
        return when.replace(year=when.year + years, day=28)


def _check_years(years: int) -> int:
    if not isinstance(years, int) or isinstance(years, bool) or years < 1:
        raise ValueError(f"years must be a positive integer, got {years!r}")
    return years


def _expect(result: ResolverResult[T], name: str) -> T:
    if result.kind is ResultKind.NOT_FOUND:
        raise NameNotFound(name)
    return result.data  # type: ignore[return-value]


def _map_raw_address(rec: Dict[str, Any]) -> AddressRecord:
    coin_type = int(rec["coinType"])
    address_bytes = b64_decode(rec["address"])
    return AddressRecord(
        name=str(rec.get("name", "")),
        coin_type=coin_type,
        address_bytes=address_bytes,
        address=format_address(coin_type, address_bytes),
    )


class KNS:
    """
    Kabuto Name Service client.

    Parameters
    ----------
    config : KnsConfig | None
        Endpoints and timeouts; defaults to `KnsConfig.from_env()`.
    ledger : LedgerClient | None
        Receipt source for write operations. Reads work without it.
    signer : Signer | None
        Signing capability; may also be set later with `set_signer`.
    http : httpx.Client | None
        Shared HTTP client for the resolver and mirror (not closed by `close`).
    clock : callable | None
        Monotonic clock for cache expiry (tests).
    now : callable | None
        Wall clock returning an aware datetime, used for new expirations.
    """

    def __init__(
        self,
        config: Optional[KnsConfig] = None,
        *,
        ledger: Optional[LedgerClient] = None,
        signer: Optional[Signer] = None,
        http: Optional[httpx.Client] = None,
        clock: Optional[Callable[[], float]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or KnsConfig.from_env()
        headers = self.config.http_headers()
        timeout = self.config.request_timeout
        self._resolver = ResolverClient(
            self.config.resolver_url, timeout=timeout, headers=headers, http=http
        )
        self._mirror = MirrorClient(
            self.config.mirror_url, timeout=timeout, headers=headers, http=http
        )
        self._ledger = ledger
        self._signer = signer
        self._cache = KnsCache(exchange_rate_ttl=self.config.exchange_rate_ttl, clock=clock)
        self._now = now or (lambda: datetime.now(timezone.utc))

    # --- lifecycle -------------------------------------------------------

    def __enter__(self) -> "KNS":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        """Closes any resources used by this name service client."""
        self._resolver.close()
        self._mirror.close()
        if self._ledger is not None:
            self._ledger.close()

    def set_signer(self, signer: Signer) -> None:
        """
        Sets the signer used to sign generated transactions.
        Must be called before any write method.
        """
        self._signer = signer

    @property
    def cache(self) -> KnsCache:
        return self._cache

    # --- pricing ---------------------------------------------------------

    def get_register_price_usd(self, name: str) -> Decimal:
        """
        Estimated yearly price (USD) of registering the name.
        Does not check if the name is available.
        """
        return _price_usd(name)

    def get_register_price_hbar(self, name: str) -> Decimal:
        """
        Estimated yearly price (HBAR) of registering the name.
        Does not check if the name is available.
        """
        return _usd_to_hbar(self.get_register_price_usd(name), self._get_hbar_price())

    def _get_hbar_price(self) -> Decimal:
        cached = self._cache.exchange_rate.get(EXCHANGE_RATE_KEY)
        if cached is not None:
            return cached
        result = self._resolver.get_exchange_rate()
        if not result.found or not isinstance(result.data, dict) or "usd" not in result.data:
            raise KnsError("resolver did not return an HBAR exchange rate")
        rate = Decimal(str(result.data["usd"]))
        if not rate.is_finite() or rate <= 0:
            raise KnsError(f"resolver returned an invalid HBAR exchange rate: {rate}")
        log.debug("HBAR exchange rate refreshed: %s USD", rate)
        self._cache.exchange_rate.put(EXCHANGE_RATE_KEY, rate)
        return rate

    def _get_name_price_for_duration(self, name: str, years: int) -> Decimal:
        return self.get_register_price_hbar(name) * years

    # --- reads -----------------------------------------------------------

    def get_name(self, name: str) -> Name:
        """Registration information for a name; raises NameNotFound if unregistered."""
        normalized = normalize_name(name)
        data = _expect(self._resolver.get_name(normalized), normalized)

        contract_serial_number = int(data["tokenSerialNumber"])
        version, serial_number = from_contract_serial_number(contract_serial_number)
        token_id = TokenId.from_string(data[f"v{version}TokenId"])
        contract_id = ContractId.from_string(data[f"v{version}ContractId"])
        expiration_time = _parse_timestamp(data["expiresAt"])

        owner = self._mirror.get_nft_owner(token_id, serial_number)

        return Name(
            domain=normalized,
            owner_account_id=owner,
            expiration_time=expiration_time,
            serial_number=serial_number,
            contract_serial_number=contract_serial_number,
            token_id=token_id,
            contract_id=contract_id,
            version=version,
        )

    def get_all(self, name: str) -> NameRecords:
        """All address and text records for a name."""
        normalized = normalize_name(name)
        data = _expect(self._resolver.get_records(normalized), normalized)
        return NameRecords(
            address=tuple(_map_raw_address(rec) for rec in data.get("address") or ()),
            text=tuple(TextRecord.from_json(rec) for rec in data.get("text") or ()),
        )

    def get_all_address(self, name: str) -> List[AddressRecord]:
        return list(self.get_all(name).address)

    def get_all_text(self, name: str) -> List[TextRecord]:
        return list(self.get_all(name).text)

    def get_address_bytes(self, name: str, coin_type: int) -> bytes:
        """Stored address bytes for a (record) name and coin type."""
        normalized = normalize_record_name(name)
        data = _expect(self._resolver.get_address(normalized, coin_type), normalized)
        return b64_decode(data["address"])

    def get_address(self, name: str, coin_type: int) -> str:
        return format_address(coin_type, self.get_address_bytes(name, coin_type))

    def get_hedera_address(self, name: str) -> AccountId:
        return deserialize_hedera_address(self.get_address_bytes(name, CoinType.HBAR))

    def get_text(self, name: str) -> str:
        normalized = normalize_record_name(name)
        data = _expect(self._resolver.get_text(normalized), normalized)
        return str(data["text"])

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """HIP-412 JSON metadata for a name, if available."""
        normalized = normalize_name(name)
        return _expect(self._resolver.get_metadata(normalized), normalized)

    def find_names_by_address(self, coin_type: int, address: Union[BytesLike, str]) -> List[str]:
        """Names holding an address record equal to `address`."""
        formatted = format_address(coin_type, serialize_address(coin_type, address))
        data = _expect(self._resolver.find_names_by_address(coin_type, formatted), formatted)
        return [f"{rec['domain']}.{rec['parent']}" for rec in data or ()]

    def find_names_by_hedera_address(self, address: Union[AccountId, str]) -> List[str]:
        return self.find_names_by_address(CoinType.HBAR, str(address))

    def find_names_by_owner(
        self, owner_account_id: Optional[Union[AccountId, str]] = None
    ) -> List[OwnedName]:
        """Names owned by an account (the signer's account by default)."""
        owner = owner_account_id if owner_account_id is not None else self._require_signer().account_id
        data = _expect(self._resolver.get_owner_names(owner), str(owner))
        names = (data or {}).get("names") or ()
        return [
            OwnedName(domain=str(n["name"]), expiration_time=_parse_timestamp(n["expiresAt"]))
            for n in names
        ]

    def get_name_expirations(self) -> Dict[str, datetime]:
        """Expiration time of every name owned by the signer's account."""
        return {n.domain: n.expiration_time for n in self.find_names_by_owner()}

    def is_associated_for_name(self, name: str) -> bool:
        """
        Whether the signer's account is associated with the name's token.
        Each top-level domain (TLD) needs to be associated.
        """
        signer = self._require_signer()
        token_id = self._get_token_id_for_name(parse_name(name))
        return str(token_id) in self._mirror.get_account_token_ids(signer.account_id)

    # --- writes ----------------------------------------------------------

    def associate_name(self, name: str) -> None:
        """Associates the signer's account with the token of the name's TLD."""
        signer = self._require_signer()
        token_id = self._get_token_id_for_name(parse_name(name))
        self._execute(TokenAssociateTransaction(account_id=signer.account_id, token_ids=[token_id]))

    def register_name(self, name: str, years: int = 1) -> Name:
        """
        Registers a new name to the signer for `years` years.
        Use `get_register_price_hbar` to see the yearly cost.
        """
        _check_years(years)
        signer = self._require_signer()
        parsed = parse_name(name)
        tld_id = self._get_v3_tld_id(parsed.top_level_domain)
        price = self._get_name_price_for_duration(name, years)

        params = (
            ContractFunctionParameters()
            .add_bytes32(to_bytes32(utf8_encode(parsed.second_level_domain)))
            .add_uint256(years)
        )
        receipt = self._execute(
            ContractExecuteTransaction(
                contract_id=tld_id.contract_id,
                function_name="purchaseZone",
                params=params,
                gas=REGISTER_GAS,
                payable_amount=price,
            )
        )

        serials = receipt.minted_serials()
        if not serials:
            raise KnsError(f"registration of {format_name(parsed)} minted no name NFT")
        serial_number = serials[0]
        name_id = NameId(
            token_id=tld_id.token_id,
            contract_id=tld_id.contract_id,
            serial_number=serial_number,
            contract_serial_number=to_contract_serial_number(CURRENT_REGISTRY_VERSION, serial_number),
            version=CURRENT_REGISTRY_VERSION,
        )
        self._cache.name_ids.put(format_name(parsed), name_id)

        return Name(
            domain=format_name(parsed),
            owner_account_id=signer.account_id,
            expiration_time=add_years(self._now(), years),
            serial_number=name_id.serial_number,
            contract_serial_number=name_id.contract_serial_number,
            token_id=name_id.token_id,
            contract_id=name_id.contract_id,
            version=name_id.version,
        )

    def extend_name_registration(self, name: str, years: int = 1) -> Name:
        """
        Extends ownership of the name by `years` years.
        The signer must own the name's NFT.
        """
        _check_years(years)
        self._require_signer()
        parsed = parse_name(name)
        name_data = self.get_name(name)
        price = self._get_name_price_for_duration(name, years)

        params = (
            ContractFunctionParameters()
            .add_bytes32(to_bytes32(utf8_encode(parsed.second_level_domain)))
            .add_uint256(years)
        )
        self._execute(
            ContractExecuteTransaction(
                contract_id=name_data.contract_id,
                function_name="extendZoneLifetime",
                params=params,
                gas=REGISTER_GAS,
                payable_amount=price,
            )
        )
        return replace(name_data, expiration_time=add_years(name_data.expiration_time, years))

    def set_address(
        self, name: str, coin_type: int, address: Union[BytesLike, str]
    ) -> AddressRecord:
        """Sets the address record for a (record) name and coin type."""
        self._require_signer()
        parsed = parse_record_name(name)
        address_bytes = serialize_address(coin_type, address)
        name_id = self._get_name_id(parsed.domain)

        params = (
            ContractFunctionParameters()
            .add_int64(name_id.contract_serial_number)
            .add_bytes32(to_bytes32(utf8_encode(parsed.record_name)))
            .add_uint32(int(coin_type))
            .add_bytes(address_bytes)
        )
        self._execute(
            ContractExecuteTransaction(
                contract_id=name_id.contract_id,
                function_name="setAddress",
                params=params,
                gas=SET_RECORD_GAS,
            )
        )
        return AddressRecord(
            name=parsed.record_name,
            coin_type=int(coin_type),
            address_bytes=address_bytes,
            address=format_address(coin_type, address_bytes),
        )

    def set_hedera_address(
        self, name: str, address: Union[BytesLike, str, AccountId]
    ) -> AddressRecord:
        """Sets the HBAR (coin type 3030) address record for a name."""
        return self.set_address(name, CoinType.HBAR, serialize_hedera_address(address))

    def set_text(self, name: str, text: str) -> TextRecord:
        self._require_signer()
        parsed = parse_record_name(name)
        name_id = self._get_name_id(parsed.domain)

        params = (
            ContractFunctionParameters()
            .add_int64(name_id.contract_serial_number)
            .add_bytes32(to_bytes32(utf8_encode(parsed.record_name)))
            .add_string(text)
        )
        self._execute(
            ContractExecuteTransaction(
                contract_id=name_id.contract_id,
                function_name="setText",
                params=params,
                gas=SET_RECORD_GAS,
            )
        )
        return TextRecord(name=parsed.record_name, text=text)

    def remove_text(self, name: str) -> None:
        self._require_signer()
        parsed = parse_record_name(name)
        name_id = self._get_name_id(parsed.domain)

        params = (
            ContractFunctionParameters()
            .add_int64(name_id.contract_serial_number)
            .add_bytes32(to_bytes32(utf8_encode(parsed.record_name)))
        )
        self._execute(
            ContractExecuteTransaction(
                contract_id=name_id.contract_id,
                function_name="deleteText",
                params=params,
                gas=DELETE_RECORD_GAS,
            )
        )

    def remove_address(self, name: str, coin_type: int) -> None:
        self._require_signer()
        parsed = parse_record_name(name)
        name_id = self._get_name_id(parsed.domain)

        params = (
            ContractFunctionParameters()
            .add_int64(name_id.contract_serial_number)
            .add_bytes32(to_bytes32(utf8_encode(parsed.record_name)))
            .add_uint32(int(coin_type))
        )
        self._execute(
            ContractExecuteTransaction(
                contract_id=name_id.contract_id,
                function_name="deleteAddress",
                params=params,
                gas=DELETE_RECORD_GAS,
            )
        )

    # --- internals -------------------------------------------------------

    def _require_signer(self) -> Signer:
        if self._signer is None:
            raise SignerRequired()
        return self._signer

    def _require_ledger(self) -> LedgerClient:
        if self._ledger is None:
            raise KnsError("ledger client required to submit transactions")
        return self._ledger

    def _get_v3_tld_id(self, tld: str) -> TldId:
        cached = self._cache.tld_ids.get(tld)
        if cached is not None:
            return cached
        data = _expect(self._resolver.get_tld(tld), f".{tld}")
        tld_id = TldId(
            contract_id=ContractId.from_string(data["v3ContractId"]),
            token_id=TokenId.from_string(data["v3TokenId"]),
        )
        self._cache.tld_ids.put(tld, tld_id)
        return tld_id

    def _get_name_id(self, parsed: ParsedName) -> NameId:
        key = format_name(parsed)
        cached = self._cache.name_ids.get(key)
        if cached is not None:
            return cached
        name_id = self.get_name(key).name_id
        self._cache.name_ids.put(key, name_id)
        return name_id

    def _get_token_id_for_name(self, parsed: ParsedName) -> TokenId:
        try:
            return self._get_name_id(parsed).token_id
        except NameNotFound:
            return self._get_v3_tld_id(parsed.top_level_domain).token_id

    def _execute(self, transaction: Transaction) -> TransactionReceipt:
        signer = self._require_signer()
        ledger = self._require_ledger()

        try:
            response = signer.call(transaction)
        except LedgerStatusError:
            raise
        except Exception as e:
            raise SignerRejected(e) from e
        if response is None:
            raise SignerRejected()

        log.info(
            "submitted %s transaction %s",
            getattr(transaction, "function_name", "tokenAssociate"),
            response.transaction_id,
        )
        receipt = ledger.get_receipt(response.transaction_id, include_children=True)
        if receipt.status != _SUCCESS:
            raise LedgerStatusError(
                status=receipt.status,
                transaction_id=response.transaction_id,
                receipt=receipt,
            )
        return receipt


__all__ = ["KNS", "add_years", "REGISTER_GAS", "SET_RECORD_GAS", "DELETE_RECORD_GAS"]
