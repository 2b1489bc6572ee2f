"""Stable min-priority worklist used by the A* and fallback searches."""

from __future__ import annotations

import heapq
import itertools
from typing import Generic, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Binary heap ordered by ascending priority.

    Items with equal priority come out in insertion order; a running
    counter breaks ties so the items themselves are never compared.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, T]] = []
        self._counter = itertools.count()

    def enqueue(self, item: T, priority: float) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), item))

    def dequeue(self) -> T | None:
        """Remove and return the minimum-priority item, or ``None`` if empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> T | None:
        return self._heap[0][2] if self._heap else None

    def peek_priority(self) -> float | None:
        return self._heap[0][0] if self._heap else None

    def size(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)
