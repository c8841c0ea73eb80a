"""Deferred fire events keyed by simulation time."""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledFire:
    due: float
    seq: int
    action: Callable[[], None] = field(compare=False)
    tag: str | None = field(default=None, compare=False)


class FireScheduler:
    """Min-heap of pending actions, drained by the match tick.

    Events due at the same instant run in the order they were scheduled.
    """

    def __init__(self) -> None:
        self._heap: list[ScheduledFire] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, due: float, action: Callable[[], None], tag: str | None = None) -> ScheduledFire:
        entry = ScheduledFire(due, next(self._counter), action, tag)
        heapq.heappush(self._heap, entry)
        return entry

    def run_due(self, now: float) -> int:
        """Run every event with ``due <= now``. Returns how many ran."""
        ran = 0
        while self._heap and self._heap[0].due <= now:
            entry = heapq.heappop(self._heap)
            entry.action()
            ran += 1
        return ran

    def cancel(self, tag: str | None = None) -> int:
        """Drop pending events carrying ``tag``, or every event when ``tag`` is None."""
        if tag is None:
            dropped = len(self._heap)
            self._heap.clear()
        else:
            kept = [e for e in self._heap if e.tag != tag]
            dropped = len(self._heap) - len(kept)
            self._heap = kept
            heapq.heapify(self._heap)
        if dropped:
            logger.debug("Dropped %d pending fire(s) (tag=%s)", dropped, tag)
        return dropped

    def pending(self, tag: str | None = None) -> int:
        if tag is None:
            return len(self._heap)
        return sum(1 for e in self._heap if e.tag == tag)
