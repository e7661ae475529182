"""Summary: Tests for the option-backed scheduler.

Importance: Ensures recurring and one-shot syncs run once and re-arm correctly.
Alternatives: Exercise scheduling only through the manager.
"""

from __future__ import annotations

from insighthub.scheduler import CRON_OPTION, OptionScheduler
from insighthub.storage.memory_store import MemoryOptionStore


def test_recurring_event_is_not_duplicated(clock) -> None:
    scheduler = OptionScheduler(MemoryOptionStore(), clock=clock)
    assert scheduler.schedule_recurring("hook", 3600) is True
    assert scheduler.schedule_recurring("hook", 3600) is False
    assert scheduler.has_recurring("hook") is True
    assert len(scheduler.pending("hook")) == 1


def test_run_due_runs_and_rearms(clock) -> None:
    """Summary: Verify due events run, one-shots drop, and recurring events re-arm.

    Importance: The hourly sync must keep firing after each run.
    Alternatives: Recreate the recurring event after every run.
    """

    options = MemoryOptionStore()
    scheduler = OptionScheduler(options, clock=clock)
    calls: list[dict[str, str]] = []
    scheduler.register("hook", lambda **kwargs: calls.append(kwargs))
    scheduler.schedule_recurring("hook", 3600)
    assert scheduler.schedule_once("hook", 5, {"trigger": "manual"}) is True
    assert scheduler.schedule_once("hook", 5, {"trigger": "manual"}) is False

    assert scheduler.run_due() == 0
    clock.advance(5)
    assert scheduler.run_due() == 1
    assert calls == [{"trigger": "manual"}]

    clock.advance(3600)
    assert scheduler.run_due() == 1
    assert calls[-1] == {}
    pending = scheduler.pending("hook")
    assert len(pending) == 1
    assert pending[0].timestamp == int(clock()) + 3600
    assert len(options.get(CRON_OPTION)) == 1


def test_failing_and_missing_handlers(clock) -> None:
    """Summary: Ensure a failing handler does not block other events.

    Importance: One broken hook must not stall the cron tick.
    Alternatives: Abort the tick on the first failure.
    """

    scheduler = OptionScheduler(MemoryOptionStore(), clock=clock)

    def explode() -> None:
        raise RuntimeError("boom")

    ran: list[bool] = []
    scheduler.register("bad", explode)
    scheduler.register("good", lambda: ran.append(True))
    scheduler.schedule_once("bad", 0)
    scheduler.schedule_once("orphan", 0)
    scheduler.schedule_once("good", 0)
    assert scheduler.run_due() == 1
    assert ran == [True]
    assert scheduler.pending() == []


def test_malformed_cron_option_is_ignored(clock) -> None:
    options = MemoryOptionStore()
    options.set(CRON_OPTION, [{"timestamp": 1}, {"hook": "ok", "timestamp": 5}])
    scheduler = OptionScheduler(options, clock=clock)
    assert [event.hook for event in scheduler.pending()] == ["ok"]
