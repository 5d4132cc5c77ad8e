from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import pytest

from kns_sdk.account_id import AccountId
from kns_sdk.client import KNS
from kns_sdk.config import KnsConfig
from kns_sdk.ledger import (ChildReceipt, Transaction, TransactionReceipt,
                            TransactionResponse)

RESOLVER = "http://resolver.test/api"
MIRROR = "http://mirror.test"


class FakeClock:
    def __init__(self, t: float = 1000.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeSigner:
    """
    Records every transaction it is asked to sign.
    `reject` makes it decline (return None); `error` makes it raise.
    """

    def __init__(self, account_id: str = "0.0.1001") -> None:
        self._account_id = AccountId.from_string(account_id)
        self.calls: List[Transaction] = []
        self.reject = False
        self.error: Optional[BaseException] = None

    @property
    def account_id(self) -> AccountId:
        return self._account_id

    def call(self, transaction: Transaction) -> Optional[TransactionResponse]:
        self.calls.append(transaction)
        if self.error is not None:
            raise self.error
        if self.reject:
            return None
        tx_id = f"{self._account_id}@1700000000.{len(self.calls):09d}"
        transaction.transaction_id = tx_id
        return TransactionResponse(tx_id)


class FakeLedger:
    def __init__(self) -> None:
        self.status = "SUCCESS"
        self.minted: List[int] = []
        self.receipts: List[str] = []
        self.closed = False

    def get_receipt(self, transaction_id: str, *, include_children: bool = True) -> TransactionReceipt:
        self.receipts.append(transaction_id)
        children = tuple(ChildReceipt(serials=(s,)) for s in self.minted) if include_children else ()
        return TransactionReceipt(self.status, transaction_id, children)

    def close(self) -> None:
        self.closed = True


FIXED_NOW = datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def config() -> KnsConfig:
    return KnsConfig(resolver_url=RESOLVER, mirror_url=MIRROR)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture()
def kns(config: KnsConfig, signer: FakeSigner, ledger: FakeLedger, clock: FakeClock):
    client = KNS(config, ledger=ledger, signer=signer, clock=clock, now=lambda: FIXED_NOW)
    yield client
    client.close()


@pytest.fixture()
def reader(config: KnsConfig, clock: FakeClock):
    """A read-only client: no signer, no ledger."""
    client = KNS(config, clock=clock)
    yield client
    client.close()
