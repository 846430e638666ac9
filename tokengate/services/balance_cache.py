"""In-memory cache for token balances and mint decimals.

Balances expire lazily: a stale entry is dropped when it is read. Mint
decimals are immutable on-chain and are kept for the lifetime of the
process. Balance entries are additionally capped at ``max_entries`` with
least-recently-used eviction so that requests for arbitrary wallets cannot
grow the cache without bound.

The cache is meant to be owned by one resolver on one event loop. Under
concurrent writers the last write wins, which only affects freshness.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

logger = logging.getLogger(__name__)

BalanceKey = tuple[str, str, str]  # (network, mint, owner)
DecimalsKey = tuple[str, str]  # (network, mint)


@dataclass
class BalanceCacheEntry:
    value: Decimal
    timestamp: float


class BalanceCache:
    """TTL cache for (network, mint, owner) balances and (network, mint) decimals."""

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        max_entries: int | None = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._balances: OrderedDict[BalanceKey, BalanceCacheEntry] = OrderedDict()
        self._decimals: dict[DecimalsKey, int] = {}

    def get(self, network: str, mint: str, owner: str) -> Decimal | None:
        key = (network, mint, owner)
        entry = self._balances.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp > self.ttl_seconds:
            del self._balances[key]
            return None
        self._balances.move_to_end(key)
        return entry.value

    def put(self, network: str, mint: str, owner: str, value: Decimal) -> None:
        key = (network, mint, owner)
        self._balances[key] = BalanceCacheEntry(value=value, timestamp=self._clock())
        self._balances.move_to_end(key)
        if self.max_entries is not None:
            while len(self._balances) > self.max_entries:
                evicted, _ = self._balances.popitem(last=False)
                logger.debug(f"Balance cache full, evicted {evicted[0]}:{evicted[1]}")

    def get_decimals(self, network: str, mint: str) -> int | None:
        return self._decimals.get((network, mint))

    def put_decimals(self, network: str, mint: str, value: int) -> None:
        self._decimals[(network, mint)] = value

    def clear(self) -> None:
        self._balances.clear()
        self._decimals.clear()

    def __len__(self) -> int:
        return len(self._balances)
