"""Summary: Shared interface for marketing tool clients.

Importance: Lets the integration manager validate, describe, and sync any tool the same way.
Alternatives: Duplicate connect and sync logic per tool.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Mapping

from insighthub.errors import IntegrationError
from insighthub.storage.base import Clock


class IntegrationClient(ABC):
    """Summary: Abstract client for one marketing tool.

    Importance: Defines the capability set every tool must implement.
    Alternatives: Use duck typing without a base class.
    """

    def __init__(
        self,
        credentials: Mapping[str, Any],
        clock: Clock = time.time,
        token_secret: str = "",
    ) -> None:
        self._clock = clock
        self._token_secret = token_secret
        self._load(credentials)

    @abstractmethod
    def _load(self, credentials: Mapping[str, Any]) -> None:
        """Summary: Read the tool-specific credential fields."""

    @property
    @abstractmethod
    def credentials(self) -> dict[str, Any]:
        """Summary: Current credential mapping, including rotated tokens."""

    @abstractmethod
    def validate_credentials(self) -> bool:
        """Summary: Check the credential shape without contacting the provider."""

    @abstractmethod
    def validate_connection(self) -> IntegrationError | None:
        """Summary: Check connectivity; return an error value on failure."""

    @abstractmethod
    def get_connection_metadata(self) -> dict[str, str]:
        """Summary: Display-only details such as masked keys."""

    @abstractmethod
    def fetch_latest_data(self) -> dict[str, Any]:
        """Summary: Return the latest summary payload for the dashboard.

        Importance: Feeds the summary cache during sync runs.
        Alternatives: Render provider widgets directly.
        """

    def _now(self) -> int:
        return int(self._clock())


def mask_suffix(value: str, keep: int) -> str:
    """Summary: Mask a secret, keeping only its last characters.

    Importance: Shows enough to recognise a key without exposing it.
    Alternatives: Hide the value entirely.
    """

    if not value:
        return ""
    return "****" + value[-keep:]
