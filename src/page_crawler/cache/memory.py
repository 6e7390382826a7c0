"""Keyed in-memory cache with pluggable eviction and optional expiry."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar, Union

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_MAX_SIZE = 100


class CacheStrategy(str, Enum):
    LRU = "lru"
    LFU = "lfu"
    FIFO = "fifo"
    RANDOM = "random"


class EvictionPolicy(ABC, Generic[K]):
    """Tracks key bookkeeping for one strategy and picks the next victim."""

    def __init__(self) -> None:
        self._keys: "OrderedDict[K, int]" = OrderedDict()

    def record_get(self, key: K) -> None:
        pass

    def record_set(self, key: K) -> None:
        self._keys.pop(key, None)
        self._keys[key] = 1

    def forget(self, key: K) -> None:
        self._keys.pop(key, None)

    def clear(self) -> None:
        self._keys.clear()

    @abstractmethod
    def victim(self) -> K:
        """Key to evict next. Only called while at least one key is tracked."""


class LRUPolicy(EvictionPolicy[K]):
    def record_get(self, key: K) -> None:
        self._keys.move_to_end(key)

    def victim(self) -> K:
        return next(iter(self._keys))


class FIFOPolicy(EvictionPolicy[K]):
    def victim(self) -> K:
        return next(iter(self._keys))


class LFUPolicy(EvictionPolicy[K]):
    def record_get(self, key: K) -> None:
        self._keys[key] += 1

    def record_set(self, key: K) -> None:
        # Overwrites reset the count but keep the key's position for tie-breaks.
        self._keys[key] = 1

    def victim(self) -> K:
        return min(self._keys, key=self._keys.__getitem__)


class RandomPolicy(EvictionPolicy[K]):
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        super().__init__()
        self._rng = rng or random.Random()

    def victim(self) -> K:
        return self._rng.choice(list(self._keys))


def build_policy(
    strategy: CacheStrategy, rng: Optional[random.Random] = None
) -> EvictionPolicy:
    if strategy is CacheStrategy.LRU:
        return LRUPolicy()
    if strategy is CacheStrategy.LFU:
        return LFUPolicy()
    if strategy is CacheStrategy.FIFO:
        return FIFOPolicy()
    return RandomPolicy(rng)


@dataclass(slots=True)
class _Entry:
    value: Any
    expires_at: Optional[float]


class InMemoryCache(Generic[K, V]):
    """
    Bounded mapping that evicts by ``strategy`` once ``max_size`` keys are stored.

    ``ttl`` is in milliseconds; expired entries are removed lazily on ``get``.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        strategy: Union[CacheStrategy, str] = CacheStrategy.LRU,
        ttl: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be a positive integer")
        self.max_size = max_size
        self.strategy = CacheStrategy(strategy)
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[K, _Entry] = {}
        self._policy: EvictionPolicy = build_policy(self.strategy, rng)

    def get(self, key: K) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock() > entry.expires_at:
            self.delete(key)
            return None
        self._policy.record_get(key)
        return entry.value

    def set(self, key: K, value: V) -> None:
        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict()
        expires_at = self._clock() + self.ttl / 1000 if self.ttl is not None else None
        self._entries[key] = _Entry(value, expires_at)
        self._policy.record_set(key)

    def delete(self, key: K) -> None:
        self._entries.pop(key, None)
        self._policy.forget(key)

    def clear(self) -> None:
        self._entries.clear()
        self._policy.clear()

    def _evict(self) -> None:
        victim = self._policy.victim()
        self.delete(victim)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
