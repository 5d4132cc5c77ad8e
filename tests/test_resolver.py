from __future__ import annotations

import httpx
import pytest
import respx

from kns_sdk.errors import KnsError
from kns_sdk.resolver import ResolverClient, ResultKind

from .conftest import RESOLVER


@respx.mock
def test_ok_unwraps_data_envelope() -> None:
    route = respx.get(f"{RESOLVER}/name/example.hh").mock(
        return_value=httpx.Response(200, json={"data": {"tokenSerialNumber": 32005}})
    )
    with ResolverClient(RESOLVER) as resolver:
        result = resolver.get_name("example.hh")
    assert route.called
    assert result.kind is ResultKind.OK
    assert result.found
    assert result.status == 200
    assert result.data == {"tokenSerialNumber": 32005}


@pytest.mark.parametrize("status", [400, 404])
@respx.mock
def test_missing_or_expired_is_not_found(status: int) -> None:
    respx.get(f"{RESOLVER}/name/gone.hh/record").mock(return_value=httpx.Response(status))
    with ResolverClient(RESOLVER) as resolver:
        result = resolver.get_records("gone.hh")
    assert result.kind is ResultKind.NOT_FOUND
    assert result.status == status
    assert result.data is None


@respx.mock
def test_server_error_propagates() -> None:
    respx.get(f"{RESOLVER}/exchange-rate").mock(return_value=httpx.Response(500))
    with ResolverClient(RESOLVER) as resolver:
        with pytest.raises(httpx.HTTPStatusError):
            resolver.get_exchange_rate()


@respx.mock
def test_transport_error_propagates() -> None:
    respx.get(f"{RESOLVER}/exchange-rate").mock(side_effect=httpx.ConnectError("boom"))
    with ResolverClient(RESOLVER) as resolver:
        with pytest.raises(httpx.HTTPError):
            resolver.get_exchange_rate()


@respx.mock
def test_missing_envelope_is_an_error() -> None:
    respx.get(f"{RESOLVER}/exchange-rate").mock(return_value=httpx.Response(200, json={"usd": 1}))
    with ResolverClient(RESOLVER) as resolver:
        with pytest.raises(KnsError):
            resolver.get_exchange_rate()


@respx.mock
def test_metadata_has_no_envelope() -> None:
    respx.get(f"{RESOLVER}/name/example.hh/metadata").mock(
        return_value=httpx.Response(200, json={"name": "example.hh", "image": "ipfs://x"})
    )
    with ResolverClient(RESOLVER) as resolver:
        result = resolver.get_metadata("example.hh")
    assert result.data == {"name": "example.hh", "image": "ipfs://x"}


@respx.mock
def test_endpoint_paths() -> None:
    ok = httpx.Response(200, json={"data": {}})
    routes = [
        respx.get(f"{RESOLVER}/name/www.example.hh/record/address/60").mock(return_value=ok),
        respx.get(f"{RESOLVER}/name/www.example.hh/record/text").mock(return_value=ok),
        respx.get(f"{RESOLVER}/name/.hh").mock(return_value=ok),
        respx.get(f"{RESOLVER}/owner/0.0.1001").mock(return_value=ok),
        respx.get(f"{RESOLVER}/record/address/3030/0.0.1040/name").mock(
            return_value=httpx.Response(200, json={"data": []})
        ),
    ]
    with ResolverClient(f"{RESOLVER}/") as resolver:
        resolver.get_address("www.example.hh", 60)
        resolver.get_text("www.example.hh")
        resolver.get_tld("hh")
        resolver.get_owner_names("0.0.1001")
        assert resolver.find_names_by_address(3030, "0.0.1040").data == []
    assert all(r.called for r in routes)


def test_injected_client_is_not_closed() -> None:
    http = httpx.Client()
    ResolverClient(RESOLVER, http=http).close()
    assert not http.is_closed
    http.close()
