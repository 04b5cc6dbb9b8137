"""Binary min-heap with a configurable key-extraction function."""

from __future__ import annotations

import heapq
import itertools
from typing import Any, Callable, Generic, List, Tuple, TypeVar

T = TypeVar("T")


class MinPriorityQueue(Generic[T]):
    """Min-priority queue ordered by ``key(item)``.

    Items with equal keys are popped in insertion order, which keeps every
    consumer deterministic without requiring the items to be comparable.

    Parameters
    ----------
    key : Callable[[T], Any]
        Extracts the ordering key from an item.
    """

    def __init__(self, key: Callable[[T], Any]) -> None:
        self._key = key
        self._heap: List[Tuple[Any, int, T]] = []
        self._counter = itertools.count()

    def push(self, item: T) -> None:
        heapq.heappush(self._heap, (self._key(item), next(self._counter), item))

    def pop(self) -> T:
        """Remove and return the item with the smallest key.

        Raises
        ------
        IndexError
            If the queue is empty.
        """
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        return heapq.heappop(self._heap)[2]

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)
