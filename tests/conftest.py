"""Summary: Shared pytest fixtures for InsightHub tests.

Importance: Gives every test a controllable clock instead of real time.
Alternatives: Patch time.time in each test module.
"""

from __future__ import annotations

import pytest


class FakeClock:
    """Summary: Manually advanced clock returning unix seconds."""

    def __init__(self, now: float = 1_760_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
