"""Summary: Persisted connection records keyed by tool identifier.

Importance: Keeps credentials, metadata, and validation state for every marketing tool.
Alternatives: Store one option per tool or use a dedicated table.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from insighthub.models import ConnectionRecord, ValidationState, optional_int
from insighthub.storage.base import Clock, OptionStore


logger = logging.getLogger(__name__)

OPTION_NAME = "insighthub_integration_tokens"
VALIDATION_FIELDS = ("status", "checked_at", "last_success_at", "message")


class CredentialStore:
    """Summary: Read-modify-write access to the connection records option.

    Importance: Heals records written by older versions transparently on read.
    Alternatives: Run a one-off migration script on upgrade.
    """

    def __init__(self, options: OptionStore, clock: Clock = time.time) -> None:
        self._options = options
        self._clock = clock

    def get(self, tool: str) -> ConnectionRecord | None:
        """Summary: Return the connection record for a tool, migrating legacy shapes.

        Importance: Guarantees every returned record carries all four top-level fields.
        Alternatives: Make every caller handle missing keys.
        """

        connections = self._load()
        if tool not in connections:
            return None
        raw = connections[tool]
        migrated, changed = self._migrate(raw)
        if migrated is None:
            return None
        if changed:
            connections[tool] = migrated
            self._options.set(OPTION_NAME, connections)
            logger.info("Upgraded stored connection record for %s.", tool)
        return ConnectionRecord.from_dict(migrated)

    def put(self, tool: str, record: ConnectionRecord) -> ConnectionRecord:
        """Summary: Persist a connection record, preserving the first stored_at.

        Importance: Keeps the original connection time stable across reconnects.
        Alternatives: Overwrite stored_at on every update.
        """

        connections = self._load()
        existing = connections.get(tool)
        stored_at = record.stored_at
        previous_stored_at = optional_int(existing.get("stored_at")) if isinstance(existing, dict) else None
        if previous_stored_at is not None:
            stored_at = previous_stored_at
        if stored_at is None:
            stored_at = int(self._clock())
        stored = ConnectionRecord(
            credentials=record.credentials,
            metadata=record.metadata,
            validation=record.validation,
            stored_at=stored_at,
        )
        connections[tool] = stored.to_dict()
        self._options.set(OPTION_NAME, connections)
        return stored

    def delete(self, tool: str) -> None:
        connections = self._load()
        if tool in connections:
            del connections[tool]
            self._options.set(OPTION_NAME, connections)

    def all(self) -> dict[str, ConnectionRecord]:
        """Summary: Return every readable connection record.

        Importance: Supports listing views and diagnostics.
        Alternatives: Iterate the tool registry and call get for each tool.
        """

        records: dict[str, ConnectionRecord] = {}
        for tool in list(self._load()):
            record = self.get(tool)
            if record is not None:
                records[tool] = record
        return records

    def _load(self) -> dict[str, Any]:
        connections = self._options.get(OPTION_NAME, {})
        if not isinstance(connections, dict):
            logger.warning("Discarding malformed %s option.", OPTION_NAME)
            return {}
        return connections

    def _migrate(self, raw: Any) -> tuple[dict[str, Any] | None, bool]:
        """Summary: Upgrade a stored value to the structured record shape.

        Importance: Bare-token strings and partial records become full records.
        Alternatives: Treat legacy values as disconnected.
        """

        changed = False
        if isinstance(raw, str):
            raw = {"credentials": {"token": raw}, "metadata": {}}
            changed = True
        if not isinstance(raw, dict):
            return None, False
        record = dict(raw)
        if not isinstance(record.get("credentials"), dict):
            record["credentials"] = {}
            changed = True
        if not isinstance(record.get("metadata"), dict):
            record["metadata"] = {}
            changed = True
        validation = record.get("validation")
        if not isinstance(validation, dict):
            record["validation"] = ValidationState().to_dict()
            changed = True
        elif any(name not in validation for name in VALIDATION_FIELDS):
            record["validation"] = {**ValidationState().to_dict(), **validation}
            changed = True
        if optional_int(record.get("stored_at")) is None:
            record["stored_at"] = int(self._clock())
            changed = True
        return record, changed
