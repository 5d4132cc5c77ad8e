"""
Per-client memoization.

Each `KNS` client owns one `KnsCache`, created with the client and dropped with
it; nothing is process-global. Three maps are kept:

- exchange rate (USD per HBAR), expiring after `exchange_rate_ttl` seconds
- TLD -> current registry contract/token ids, no expiry
- name -> NameId (serials and registry ids), no expiry

Entries are overwritten on refresh (last writer wins). Concurrent refreshes
are not deduplicated; a stampede on expiry just means a few extra resolver
calls.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

from .models import NameId, TldId

__all__ = ["CacheEntry", "TtlCache", "KnsCache", "EXCHANGE_RATE_KEY"]

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]

EXCHANGE_RATE_KEY = "usd"


@dataclass
class CacheEntry(Generic[V]):
    value: V
    expires_at: Optional[float]  # clock timestamp or None (never)


class TtlCache(Generic[K, V]):
    """
    Dict-backed cache with an optional default TTL (seconds).

    `clock` defaults to `time.monotonic` and may be replaced in tests.
    """

    def __init__(self, *, ttl: Optional[float] = None, clock: Optional[Clock] = None) -> None:
        self.ttl = ttl
        self._clock: Clock = clock or time.monotonic
        self._map: Dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> Optional[V]:
        entry = self._map.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock() >= entry.expires_at:
            del self._map[key]
            return None
        return entry.value

    def put(self, key: K, value: V, *, ttl: Optional[float] = None) -> None:
        ttl = self.ttl if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        self._map[key] = CacheEntry(value, expires_at)

    def clear(self) -> None:
        self._map.clear()


@dataclass
class KnsCache:
    exchange_rate_ttl: float = 600.0
    clock: Optional[Clock] = None
    exchange_rate: TtlCache[str, Decimal] = field(init=False)
    tld_ids: TtlCache[str, TldId] = field(init=False)
    name_ids: TtlCache[str, NameId] = field(init=False)

    def __post_init__(self) -> None:
        self.exchange_rate = TtlCache(ttl=self.exchange_rate_ttl, clock=self.clock)
        self.tld_ids = TtlCache(clock=self.clock)
        self.name_ids = TtlCache(clock=self.clock)

    def clear(self) -> None:
        self.exchange_rate.clear()
        self.tld_ids.clear()
        self.name_ids.clear()
