from __future__ import annotations

import httpx
import pytest
import respx

from kns_sdk.account_id import AccountId, TokenId
from kns_sdk.mirror import MirrorClient

from .conftest import MIRROR


@respx.mock
def test_nft_owner() -> None:
    respx.get(f"{MIRROR}/api/v1/tokens/0.0.3000/nfts/7").mock(
        return_value=httpx.Response(200, json={"account_id": "0.0.1001", "serial_number": 7})
    )
    with MirrorClient(MIRROR) as mirror:
        assert mirror.get_nft_owner(TokenId(0, 0, 3000), 7) == AccountId(0, 0, 1001)


@respx.mock
def test_account_token_ids() -> None:
    respx.get(f"{MIRROR}/api/v1/accounts/0.0.1001").mock(
        return_value=httpx.Response(
            200,
            json={"balance": {"balance": 10, "tokens": [{"token_id": "0.0.3000", "balance": 1}, {"token_id": "0.0.3001"}]}},
        )
    )
    with MirrorClient(MIRROR) as mirror:
        assert mirror.get_account_token_ids(AccountId(0, 0, 1001)) == {"0.0.3000", "0.0.3001"}


@respx.mock
def test_account_without_tokens() -> None:
    respx.get(f"{MIRROR}/api/v1/accounts/0.0.1001").mock(return_value=httpx.Response(200, json={"balance": None}))
    with MirrorClient(MIRROR) as mirror:
        assert mirror.get_account_token_ids("0.0.1001") == set()


@respx.mock
def test_errors_propagate() -> None:
    respx.get(f"{MIRROR}/api/v1/tokens/0.0.3000/nfts/1").mock(return_value=httpx.Response(404))
    with MirrorClient(MIRROR) as mirror:
        with pytest.raises(httpx.HTTPStatusError):
            mirror.get_nft_owner("0.0.3000", 1)
