"""
SDK configuration: network selection, resolver/mirror endpoints, timeouts.

- Network presets pick the resolver and mirror-node base URLs.
- Supports overrides via environment variables (KNS_*).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

from .version import __version__

Network = Literal["testnet", "mainnet"]

_RESOLVER_URLS: Dict[str, str] = {
    "testnet": "https://ns.testnet.kabuto.sh/api",
    "mainnet": "https://ns.kabuto.sh/api",
}
_MIRROR_URLS: Dict[str, str] = {
    "testnet": "https://testnet.mirrornode.hedera.com",
    "mainnet": "https://mainnet-public.mirrornode.hedera.com",
}

DEFAULT_NETWORK: Network = "testnet"
DEFAULT_EXCHANGE_RATE_TTL = 10 * 60.0


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _parse_network(val: Optional[str]) -> Network:
    s = (val or DEFAULT_NETWORK).strip().lower()
    if s not in _RESOLVER_URLS:
        raise ValueError(f"network must be one of {sorted(_RESOLVER_URLS)}, got {val!r}")
    return s  # type: ignore[return-value]


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(slots=True)
class KnsConfig:
    network: Network = DEFAULT_NETWORK
    # Empty means "use the network preset"
    resolver_url: str = ""
    mirror_url: str = ""
    request_timeout: float = 30.0
    exchange_rate_ttl: float = DEFAULT_EXCHANGE_RATE_TTL
    user_agent: str = field(default_factory=lambda: f"kns-sdk-py/{__version__}")

    def __post_init__(self) -> None:
        self.network = _parse_network(self.network)
        if not self.resolver_url:
            self.resolver_url = _RESOLVER_URLS[self.network]
        if not self.mirror_url:
            self.mirror_url = _MIRROR_URLS[self.network]
        _ensure_scheme(self.resolver_url, ("http", "https"))
        _ensure_scheme(self.mirror_url, ("http", "https"))

    @classmethod
    def for_network(cls, network: Network) -> "KnsConfig":
        return cls(network=network)

    @classmethod
    def from_env(cls, prefix: str = "KNS_") -> "KnsConfig":
        """
        Create config from environment variables:

        KNS_NETWORK             (testnet | mainnet)
        KNS_RESOLVER_URL        (http/https) optional, overrides the preset
        KNS_MIRROR_URL          (http/https) optional, overrides the preset
        KNS_TIMEOUT             (float seconds, HTTP)
        KNS_EXCHANGE_RATE_TTL   (float seconds)
        KNS_USER_AGENT          (str)
        """
        return cls(
            network=_parse_network(_env(f"{prefix}NETWORK")),
            resolver_url=_env(f"{prefix}RESOLVER_URL", "") or "",
            mirror_url=_env(f"{prefix}MIRROR_URL", "") or "",
            request_timeout=float(_env(f"{prefix}TIMEOUT", "30.0") or "30.0"),
            exchange_rate_ttl=float(
                _env(f"{prefix}EXCHANGE_RATE_TTL", str(DEFAULT_EXCHANGE_RATE_TTL))
                or DEFAULT_EXCHANGE_RATE_TTL
            ),
            user_agent=_env(f"{prefix}USER_AGENT", "") or f"kns-sdk-py/{__version__}",
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["KnsConfig"] = None, **overrides: Any
    ) -> "KnsConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored. Changing the network re-derives any URL that
        was not explicitly overridden.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        if "network" in overrides and overrides["network"] != base.network:
            data["resolver_url"] = ""
            data["mirror_url"] = ""
        data.update({k: v for k, v in overrides.items() if k in data})
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "resolver_url": self.resolver_url,
            "mirror_url": self.mirror_url,
            "request_timeout": float(self.request_timeout),
            "exchange_rate_ttl": float(self.exchange_rate_ttl),
            "user_agent": self.user_agent,
        }


__all__ = ["KnsConfig", "Network", "DEFAULT_NETWORK", "DEFAULT_EXCHANGE_RATE_TTL"]
