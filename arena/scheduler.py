"""
Delayed callbacks for XO Arena.

The engine never sleeps or starts threads. Anything that should happen
later (the AI's reply, the next timer tick) is handed to a Scheduler,
which runs it on the host's single thread.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

Callback = Callable[[], None]


class ScheduledCall(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Make sure the callback never runs."""
        raise NotImplementedError

    @abstractmethod
    def cancelled(self) -> bool:
        raise NotImplementedError


class Scheduler(ABC):
    """Abstract source of delayed callbacks."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        """Run callback once, delay seconds from now."""
        raise NotImplementedError


class ManualCall(ScheduledCall):
    """A callback queued on a ManualScheduler."""

    def __init__(self, when: float, callback: Callback):
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Scheduler driven by a virtual clock.

    Nothing runs until the host calls advance() or run_pending().
    Callbacks fire in due-time order, ties in the order they were
    scheduled, and callbacks scheduled while advancing run in the same
    advance() if they fall due before its end.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ManualCall]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> ManualCall:
        call = ManualCall(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (call.when, next(self._counter), call))
        return call

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running everything that falls due.

        Args:
            seconds: How far to move the clock.

        Returns:
            Number of callbacks that ran.
        """
        target = self.now + max(0.0, seconds)
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            if call.cancelled():
                continue
            self.now = max(self.now, when)
            call.callback()
            ran += 1
        self.now = target
        return ran

    def run_pending(self) -> int:
        """Run whatever is due right now (e.g. zero-delay calls)."""
        return self.advance(0.0)

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting."""
        return sum(1 for _, _, call in self._queue if not call.cancelled())

    def next_due(self) -> Optional[float]:
        """Clock time of the earliest live callback, or None."""
        for when, _, call in sorted(self._queue):
            if not call.cancelled():
                return when
        return None


class AsyncioCall(ScheduledCall):
    """Wraps an asyncio TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Runs callbacks on an asyncio event loop (single thread)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callback) -> AsyncioCall:
        return AsyncioCall(self.loop.call_later(max(0.0, delay), callback))
