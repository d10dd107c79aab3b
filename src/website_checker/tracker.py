"""
Visited-set and next-wave bookkeeping shared by the crawl workers.
"""
from __future__ import annotations

import threading
from typing import List, Set


class Tracker:
    """Thread-safe record of every address ever accepted into a wave.

    An address is marked visited when it is admitted, not when its fetch
    completes, so two pages discovering the same link concurrently cannot
    both queue it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._visited: Set[str] = set()
        self._pending: List[str] = []

    def admit(self, url: str) -> bool:
        """Queue ``url`` for the next wave unless it was seen before."""
        with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            self._pending.append(url)
            return True

    def next_wave(self) -> List[str]:
        """Hand over the addresses admitted since the last call."""
        with self._lock:
            wave, self._pending = self._pending, []
            return wave

    def __len__(self) -> int:
        with self._lock:
            return len(self._visited)
