"""Summary: Expiring cache of tool summaries fetched during sync.

Importance: Lets the dashboard render provider data without waiting on providers.
Alternatives: Store summaries inside the connection record.
"""

from __future__ import annotations

import time
from typing import Any

from insighthub.models import SummaryEntry
from insighthub.storage.base import Clock, TransientStore


CACHE_PREFIX = "insighthub_summary_"
DEFAULT_TTL_SECONDS = 30 * 60


class SummaryCache:
    """Summary: Per-tool summary entries on top of the transient store.

    Importance: Expires stale provider data automatically.
    Alternatives: Keep summaries until the next sync overwrites them.
    """

    def __init__(
        self,
        transients: TransientStore,
        clock: Clock = time.time,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._transients = transients
        self._clock = clock
        self._ttl_seconds = ttl_seconds

    def get(self, tool: str) -> SummaryEntry:
        payload = self._transients.get(CACHE_PREFIX + tool)
        if not isinstance(payload, dict):
            return SummaryEntry()
        data = payload.get("data")
        return SummaryEntry(
            data=data if isinstance(data, dict) else {},
            cached_at=payload.get("cached_at"),
        )

    def put(self, tool: str, data: dict[str, Any]) -> SummaryEntry:
        entry = SummaryEntry(data=dict(data), cached_at=int(self._clock()))
        self._transients.set(
            CACHE_PREFIX + tool,
            {"data": entry.data, "cached_at": entry.cached_at},
            self._ttl_seconds,
        )
        return entry

    def clear(self, tool: str) -> None:
        self._transients.delete(CACHE_PREFIX + tool)
