"""Summary: Scheduled job abstraction and an option-backed implementation.

Importance: Lets the integration manager request recurring and one-shot syncs without a cron daemon.
Alternatives: Use an external scheduler such as system cron or a task queue.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from insighthub.storage.base import Clock, OptionStore


logger = logging.getLogger(__name__)

CRON_OPTION = "insighthub_cron"


@dataclass(frozen=True)
class ScheduledEvent:
    """Summary: One pending job invocation.

    Importance: Records when a hook should run and with which arguments.
    Alternatives: Keep only hook names and compute times on the fly.
    """

    hook: str
    timestamp: int
    interval: int | None = None
    args: dict[str, Any] = field(default_factory=dict)

    @property
    def recurring(self) -> bool:
        return self.interval is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "hook": self.hook,
            "timestamp": self.timestamp,
            "interval": self.interval,
            "args": dict(self.args),
        }

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> "ScheduledEvent":
        interval = payload.get("interval")
        return ScheduledEvent(
            hook=str(payload["hook"]),
            timestamp=int(payload["timestamp"]),
            interval=int(interval) if interval is not None else None,
            args=dict(payload.get("args") or {}),
        )


class Scheduler(ABC):
    """Summary: Interface the core uses to request background work.

    Importance: Keeps the manager scheduler-agnostic and directly testable.
    Alternatives: Call threading timers from the manager.
    """

    @abstractmethod
    def register(self, hook: str, handler: Callable[..., Any]) -> None:
        """Summary: Bind a handler to a hook name."""

    @abstractmethod
    def schedule_recurring(self, hook: str, interval_seconds: int) -> bool:
        """Summary: Ensure a recurring event exists; return False if it already did."""

    @abstractmethod
    def schedule_once(
        self, hook: str, delay_seconds: int, args: dict[str, Any] | None = None
    ) -> bool:
        """Summary: Queue a one-shot event; return False if an identical one is pending."""

    @abstractmethod
    def has_recurring(self, hook: str) -> bool:
        """Summary: Report whether a recurring event exists for a hook."""

    @abstractmethod
    def pending(self, hook: str | None = None) -> list[ScheduledEvent]:
        """Summary: List pending events, optionally filtered by hook."""

    @abstractmethod
    def run_due(self) -> int:
        """Summary: Run every event whose time has come; return how many ran."""


class OptionScheduler(Scheduler):
    """Summary: Scheduler that persists events in the option store.

    Importance: Survives restarts and is driven by explicit run_due calls.
    Alternatives: Keep events in memory only.
    """

    def __init__(self, options: OptionStore, clock: Clock = time.time) -> None:
        self._options = options
        self._clock = clock
        self._handlers: dict[str, Callable[..., Any]] = {}

    def register(self, hook: str, handler: Callable[..., Any]) -> None:
        self._handlers[hook] = handler

    def schedule_recurring(self, hook: str, interval_seconds: int) -> bool:
        if self.has_recurring(hook):
            return False
        events = self._load()
        events.append(
            ScheduledEvent(
                hook=hook,
                timestamp=int(self._clock()) + interval_seconds,
                interval=interval_seconds,
            )
        )
        self._save(events)
        logger.info("Scheduled recurring %s every %s seconds.", hook, interval_seconds)
        return True

    def schedule_once(
        self, hook: str, delay_seconds: int, args: dict[str, Any] | None = None
    ) -> bool:
        payload = dict(args or {})
        events = self._load()
        for event in events:
            if not event.recurring and event.hook == hook and event.args == payload:
                return False
        events.append(
            ScheduledEvent(hook=hook, timestamp=int(self._clock()) + delay_seconds, args=payload)
        )
        self._save(events)
        logger.info("Scheduled one-shot %s in %s seconds.", hook, delay_seconds)
        return True

    def has_recurring(self, hook: str) -> bool:
        return any(event.recurring and event.hook == hook for event in self._load())

    def pending(self, hook: str | None = None) -> list[ScheduledEvent]:
        events = sorted(self._load(), key=lambda event: event.timestamp)
        if hook is None:
            return events
        return [event for event in events if event.hook == hook]

    def run_due(self) -> int:
        """Summary: Run due events and re-arm recurring ones.

        Importance: Acts as the cron tick for web requests and the CLI.
        Alternatives: Run a dedicated scheduler thread.
        """

        now = int(self._clock())
        events = self._load()
        due = [event for event in events if event.timestamp <= now]
        if not due:
            return 0
        remaining = [event for event in events if event.timestamp > now]
        for event in due:
            if event.recurring and event.interval:
                remaining.append(
                    ScheduledEvent(
                        hook=event.hook,
                        timestamp=now + event.interval,
                        interval=event.interval,
                        args=event.args,
                    )
                )
        self._save(remaining)

        ran = 0
        for event in due:
            handler = self._handlers.get(event.hook)
            if handler is None:
                logger.warning("No handler registered for %s; dropping event.", event.hook)
                continue
            try:
                handler(**event.args)
            except Exception:
                logger.exception("Scheduled hook %s failed.", event.hook)
                continue
            ran += 1
        return ran

    def _load(self) -> list[ScheduledEvent]:
        raw = self._options.get(CRON_OPTION, [])
        if not isinstance(raw, list):
            return []
        events: list[ScheduledEvent] = []
        for item in raw:
            try:
                events.append(ScheduledEvent.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed scheduled event: %r", item)
        return events

    def _save(self, events: list[ScheduledEvent]) -> None:
        self._options.set(CRON_OPTION, [event.to_dict() for event in events])
