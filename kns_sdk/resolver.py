"""
kns_sdk.resolver
================

Thin HTTP wrapper over the KNS resolver REST API.

Endpoints (JSON, payload under a top-level ``"data"`` key)
-----------------------------------------------------------
- GET /name/{name}                                 registration + registry ids
- GET /name/{name}/record                          all address + text records
- GET /name/{record}/record/address/{coinType}     one base64 address
- GET /name/{record}/record/text                   one text record
- GET /name/{name}/metadata                        HIP-412 JSON (no envelope)
- GET /name/.{tld}                                 current registry ids for a TLD
- GET /owner/{accountId}                           names owned by an account
- GET /record/address/{coinType}/{address}/name    reverse lookup
- GET /exchange-rate                               USD per HBAR

Status handling
---------------
404 (no such name) and 400 (expired name) come back as a `ResolverResult`
with ``kind == ResultKind.NOT_FOUND``; callers decide what that means. Any
other non-2xx raises `httpx.HTTPStatusError` and transport failures raise
`httpx.HTTPError`, both unchanged. Nothing here retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar, Union
from urllib.parse import quote

import httpx

from .account_id import AccountId
from .errors import KnsError

log = logging.getLogger(__name__)

T = TypeVar("T")

NOT_FOUND_STATUSES = frozenset({400, 404})


class ResultKind(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ResolverResult(Generic[T]):
    kind: ResultKind
    status: int
    data: Optional[T] = None

    @property
    def found(self) -> bool:
        return self.kind is ResultKind.OK


def _segment(value: Union[str, int]) -> str:
    return quote(str(value), safe="")


class ResolverClient:
    """
    Synchronous resolver client.

    Parameters
    ----------
    base_url : str
        Resolver API root, e.g. ``https://ns.kabuto.sh/api``.
    timeout : float
        Per-request timeout (seconds) when the client builds its own
        `httpx.Client`.
    headers : Mapping[str, str] | None
        Extra request headers.
    http : httpx.Client | None
        Pre-configured client (connection pooling, auth, proxies). The resolver
        closes only clients it created.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.Client(
            timeout=timeout,
            headers=dict(headers or {}),
        )

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "ResolverClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    # --- internals -------------------------------------------------------

    def _get(self, path: str, *, envelope: bool = True) -> ResolverResult[Any]:
        log.debug("resolver GET %s", path)
        resp = self._http.get(self.base_url + path)
        if resp.status_code in NOT_FOUND_STATUSES:
            log.debug("resolver GET %s -> %s (not found)", path, resp.status_code)
            return ResolverResult(ResultKind.NOT_FOUND, resp.status_code)
        resp.raise_for_status()
        payload = resp.json()
        if envelope:
            if not isinstance(payload, dict) or "data" not in payload:
                raise KnsError(f"resolver GET {path}: response has no 'data' envelope")
            payload = payload["data"]
        return ResolverResult(ResultKind.OK, resp.status_code, payload)

    # --- endpoints -------------------------------------------------------

    def get_name(self, name: str) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/name/{_segment(name)}")

    def get_records(self, name: str) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/name/{_segment(name)}/record")

    def get_address(self, record_name: str, coin_type: int) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/name/{_segment(record_name)}/record/address/{int(coin_type)}")

    def get_text(self, record_name: str) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/name/{_segment(record_name)}/record/text")

    def get_metadata(self, name: str) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/name/{_segment(name)}/metadata", envelope=False)

    def get_tld(self, tld: str) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/name/.{_segment(tld)}")

    def get_owner_names(self, account_id: Union[AccountId, str]) -> ResolverResult[Dict[str, Any]]:
        return self._get(f"/owner/{_segment(account_id)}")

    def find_names_by_address(self, coin_type: int, address: str) -> ResolverResult[Any]:
        return self._get(f"/record/address/{int(coin_type)}/{_segment(address)}/name")

    def get_exchange_rate(self) -> ResolverResult[Dict[str, Any]]:
        return self._get("/exchange-rate")


__all__ = ["ResolverClient", "ResolverResult", "ResultKind", "NOT_FOUND_STATUSES"]
