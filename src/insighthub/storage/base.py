"""Summary: Storage interfaces used by InsightHub services.

Importance: Keeps the integration manager and stats service independent of a concrete backend.
Alternatives: Call the SQLite store directly from every service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable

from insighthub.models import PostType


Clock = Callable[[], float]


class OptionStore(ABC):
    """Summary: Durable key-value storage for JSON-serialisable values.

    Importance: Backs the credential store and the scheduler event list.
    Alternatives: Keep option values in flat files.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Summary: Return the stored value or the default."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Summary: Store a value, replacing any previous one."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Summary: Remove a value if present."""


class TransientStore(ABC):
    """Summary: Ephemeral key-value storage with per-key expiry.

    Importance: Backs the summary cache, sync lock, sync status, and OAuth nonces.
    Alternatives: Store expiry timestamps inside option values.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Summary: Return a live value or the default when absent or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        """Summary: Store a value that expires after ttl_seconds (never when <= 0)."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Summary: Remove a value if present."""


class ContentStore(ABC):
    """Summary: Read-only counting contract over site content.

    Importance: Gives the stats service the handful of queries it needs.
    Alternatives: Let the stats service run SQL directly.
    """

    @abstractmethod
    def count_published(self, post_type: str) -> int:
        """Summary: Count published items of a type."""

    @abstractmethod
    def count_published_since(self, post_type: str, since: int) -> int:
        """Summary: Count published items of a type created at or after a timestamp."""

    @abstractmethod
    def count_approved_comments(self, since: int | None = None) -> int:
        """Summary: Count approved comments, optionally only those after a timestamp."""

    @abstractmethod
    def count_terms(self, taxonomy: str) -> int:
        """Summary: Count terms in a taxonomy, including empty ones."""

    @abstractmethod
    def count_users(self) -> int:
        """Summary: Count registered users."""

    @abstractmethod
    def list_post_types(self) -> list[PostType]:
        """Summary: List public post types with display labels."""

    @abstractmethod
    def has_orders(self) -> bool:
        """Summary: Report whether order data is available."""

    @abstractmethod
    def order_totals(self, statuses: Iterable[str], since: int) -> tuple[int, float]:
        """Summary: Return order count and sales total for statuses after a timestamp."""
