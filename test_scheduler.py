"""
Tests for the delayed-callback schedulers and event bus.
"""

import asyncio

from arena.events import EventBus, EventKind, MatchEvent
from arena.scheduler import AsyncioScheduler, ManualScheduler


def test_manual_scheduler_runs_in_due_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(2.0, lambda: calls.append("b"))
    scheduler.call_later(1.0, lambda: calls.append("a"))
    scheduler.call_later(2.0, lambda: calls.append("c"))

    assert scheduler.pending == 3
    assert scheduler.next_due() == 1.0
    assert scheduler.advance(1.5) == 1
    assert calls == ["a"]
    assert scheduler.advance(1.0) == 2
    assert calls == ["a", "b", "c"]
    assert scheduler.now == 2.5
    assert scheduler.pending == 0
    assert scheduler.next_due() is None


def test_zero_delay_needs_run_pending():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(0, lambda: calls.append(1))
    assert calls == []
    assert scheduler.run_pending() == 1
    assert calls == [1]


def test_cancelled_call_never_runs():
    scheduler = ManualScheduler()
    calls = []
    call = scheduler.call_later(1.0, lambda: calls.append(1))
    call.cancel()

    assert call.cancelled()
    assert scheduler.pending == 0
    assert scheduler.advance(5) == 0
    assert calls == []


def test_callbacks_scheduled_while_advancing_run_if_due():
    scheduler = ManualScheduler()
    times = []

    def tick():
        times.append(scheduler.now)
        if len(times) < 5:
            scheduler.call_later(1.0, tick)

    scheduler.call_later(1.0, tick)
    scheduler.advance(3)
    assert times == [1.0, 2.0, 3.0]
    scheduler.advance(10)
    assert times == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_asyncio_scheduler_runs_and_cancels():
    calls = []

    async def scenario():
        scheduler = AsyncioScheduler()
        scheduler.call_later(0.01, lambda: calls.append("run"))
        cancelled = scheduler.call_later(0.01, lambda: calls.append("cancelled"))
        cancelled.cancel()
        assert cancelled.cancelled()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert calls == ["run"]


def test_event_bus_ignores_duplicate_observers():
    bus = EventBus()
    seen = []
    bus.add(seen.append)
    bus.add(seen.append)
    assert len(bus) == 1

    bus.publish(MatchEvent(kind=EventKind.PAUSED))
    assert [event.kind for event in seen] == [EventKind.PAUSED]

    bus.remove(seen.append)
    bus.remove(seen.append)
    assert len(bus) == 0
