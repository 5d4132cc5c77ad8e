"""
Read-only client for the Hedera mirror node REST API.

Only the two lookups the name service needs are wrapped:

- GET /api/v1/tokens/{tokenId}/nfts/{serial}   -> current NFT owner
- GET /api/v1/accounts/{accountId}             -> associated token ids

Errors (`httpx.HTTPStatusError`, `httpx.HTTPError`) propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Set, Union

import httpx

from .account_id import AccountId, TokenId

log = logging.getLogger(__name__)


class MirrorClient:
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
        self._http = http or httpx.Client(timeout=timeout, headers=dict(headers or {}))

    def __enter__(self) -> "MirrorClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _get_json(self, path: str) -> dict:
        log.debug("mirror GET %s", path)
        resp = self._http.get(self.base_url + path)
        resp.raise_for_status()
        return resp.json()

    def get_nft_owner(self, token_id: Union[TokenId, str], serial_number: int) -> AccountId:
        """Account currently holding NFT `serial_number` of `token_id`."""
        data = self._get_json(f"/api/v1/tokens/{token_id}/nfts/{int(serial_number)}")
        return AccountId.from_string(data["account_id"])

    def get_account_token_ids(self, account_id: Union[AccountId, str]) -> Set[str]:
        """Token ids (as strings) the account is associated with."""
        data = self._get_json(f"/api/v1/accounts/{account_id}")
        tokens = (data.get("balance") or {}).get("tokens") or []
        return {str(t["token_id"]) for t in tokens if "token_id" in t}


__all__ = ["MirrorClient"]
