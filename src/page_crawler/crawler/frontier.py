"""FIFO frontier with permanent seen-set deduplication."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, Optional, Set

from .urls import normalize_url

logger = logging.getLogger(__name__)


class Frontier:
    """
    Pending URL queue plus the set of every URL ever enqueued.

    All mutations happen on the event loop thread and never await between the
    seen-check and the insert, so concurrent tasks pushing the same link cannot
    both observe it as new.
    """

    def __init__(self) -> None:
        self._queue: Deque[str] = deque()
        self._seen: Set[str] = set()

    def push(self, urls: Iterable[str], base: Optional[str] = None) -> int:
        """Normalize and enqueue unseen URLs. Returns how many were added."""
        added = 0
        for raw in urls:
            url = normalize_url(raw, base)
            if url is None:
                logger.debug("Skip (not crawlable): %r", raw)
                continue
            if url in self._seen:
                continue
            self._seen.add(url)
            self._queue.append(url)
            added += 1
        return added

    def pop(self) -> Optional[str]:
        """Remove and return the oldest pending URL, or ``None`` when empty."""
        if not self._queue:
            return None
        return self._queue.popleft()

    def has_seen(self, url: str) -> bool:
        normalized = normalize_url(url)
        return normalized is not None and normalized in self._seen

    @property
    def seen(self) -> frozenset[str]:
        return frozenset(self._seen)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
