"""Logical simulation clock with cancellable delayed callbacks."""

from __future__ import annotations

import heapq
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledEvent:
    """A callback due at ``due_ms``, tied to the robot and task it affects."""

    def __init__(
        self,
        seq: int,
        due_ms: float,
        callback: Callable[[], None],
        label: str,
        robot_id: str | None = None,
        task_id: str | None = None,
    ) -> None:
        self.seq: int = seq
        self.due_ms: float = due_ms
        self.callback: Callable[[], None] = callback
        self.label: str = label
        self.robot_id: str | None = robot_id
        self.task_id: str | None = task_id
        self.cancelled: bool = False
        self.fired: bool = False

    def __lt__(self, other: ScheduledEvent) -> bool:
        return (self.due_ms, self.seq) < (other.due_ms, other.seq)

    def __repr__(self) -> str:
        return (
            f"ScheduledEvent({self.label!r}, due={self.due_ms}, "
            f"robot={self.robot_id}, task={self.task_id})"
        )


class EventQueue:
    """Single logical clock driving every deferred action of the simulation.

    Events fire in ``(due_ms, seq)`` order from :meth:`advance`. A callback may
    schedule further events; those due inside the current window fire within
    the same call.
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._heap: list[ScheduledEvent] = []
        self._seq: int = 0

    def schedule(
        self,
        delay_ms: float,
        callback: Callable[[], None],
        label: str = "",
        robot_id: str | None = None,
        task_id: str | None = None,
    ) -> ScheduledEvent:
        self._seq += 1
        event = ScheduledEvent(
            self._seq, self.now_ms + max(0.0, delay_ms), callback, label,
            robot_id=robot_id, task_id=task_id,
        )
        heapq.heappush(self._heap, event)
        return event

    def cancel(self, event: ScheduledEvent) -> bool:
        if event.cancelled or event.fired:
            return False
        event.cancelled = True
        return True

    def cancel_for_robot(self, robot_id: str) -> int:
        return self._cancel_where(lambda e: e.robot_id == robot_id)

    def cancel_for_task(self, task_id: str) -> int:
        return self._cancel_where(lambda e: e.task_id == task_id)

    def cancel_all(self) -> int:
        return self._cancel_where(lambda e: True)

    def _cancel_where(self, predicate: Callable[[ScheduledEvent], bool]) -> int:
        count = 0
        for event in self._heap:
            if not event.cancelled and predicate(event):
                event.cancelled = True
                count += 1
        if count:
            logger.debug("Cancelled %d scheduled events", count)
        return count

    def pending(
        self,
        robot_id: str | None = None,
        task_id: str | None = None,
    ) -> list[ScheduledEvent]:
        """Return live events in firing order, optionally filtered."""
        return sorted(
            e for e in self._heap
            if not e.cancelled
            and (robot_id is None or e.robot_id == robot_id)
            and (task_id is None or e.task_id == task_id)
        )

    def advance(self, dt_ms: float) -> int:
        """Move the clock forward by *dt_ms*, firing due events. Returns the count fired."""
        target = self.now_ms + max(0.0, dt_ms)
        fired = 0
        while self._heap and self._heap[0].due_ms <= target:
            event = heapq.heappop(self._heap)
            if event.cancelled:
                continue
            self.now_ms = event.due_ms
            event.fired = True
            event.callback()
            fired += 1
        self.now_ms = target
        return fired

    def __len__(self) -> int:
        return sum(1 for e in self._heap if not e.cancelled)
