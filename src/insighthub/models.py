"""Summary: Domain model dataclasses for InsightHub.

Importance: Defines the records shared by the stores, the integration manager, and the views.
Alternatives: Use Pydantic models or pass raw dictionaries between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ToolType(str, Enum):
    """Summary: Connection style of a marketing tool.

    Importance: Selects the connect flow the manager runs for a tool.
    Alternatives: Branch on tool identifiers directly.
    """

    OAUTH = "oauth"
    API_KEY = "api_key"
    PROJECT_KEY = "project_key"


class ValidationStatus(str, Enum):
    UNKNOWN = "unknown"
    SUCCESS = "success"
    FAILED = "failed"


class SyncState(str, Enum):
    IDLE = "idle"
    QUEUED = "queued"
    RUNNING = "running"


@dataclass(frozen=True)
class ValidationState:
    """Summary: Last known outcome of contacting a tool.

    Importance: Drives the connected flag and the status shown on the dashboard.
    Alternatives: Store a single boolean connected flag.
    """

    status: ValidationStatus = ValidationStatus.UNKNOWN
    checked_at: int | None = None
    last_success_at: int | None = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "checked_at": self.checked_at,
            "last_success_at": self.last_success_at,
            "message": self.message,
        }

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> "ValidationState":
        """Summary: Build a validation state from stored data.

        Importance: Tolerates partially stored or unknown status values.
        Alternatives: Reject malformed validation blocks outright.
        """

        try:
            status = ValidationStatus(payload.get("status", ValidationStatus.UNKNOWN.value))
        except ValueError:
            status = ValidationStatus.UNKNOWN
        return ValidationState(
            status=status,
            checked_at=optional_int(payload.get("checked_at")),
            last_success_at=optional_int(payload.get("last_success_at")),
            message=str(payload.get("message") or ""),
        )


@dataclass(frozen=True)
class ConnectionRecord:
    """Summary: Persisted credentials, metadata, and validation for one tool.

    Importance: Single source of truth for whether and how a tool is connected.
    Alternatives: Split credentials and status into separate storage keys.
    """

    credentials: dict[str, Any]
    metadata: dict[str, str] = field(default_factory=dict)
    validation: ValidationState = field(default_factory=ValidationState)
    stored_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "credentials": dict(self.credentials),
            "metadata": dict(self.metadata),
            "validation": self.validation.to_dict(),
            "stored_at": self.stored_at,
        }

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> "ConnectionRecord":
        return ConnectionRecord(
            credentials=dict(payload.get("credentials") or {}),
            metadata=dict(payload.get("metadata") or {}),
            validation=ValidationState.from_dict(payload.get("validation") or {}),
            stored_at=optional_int(payload.get("stored_at")),
        )


@dataclass(frozen=True)
class SummaryEntry:
    """Summary: Cached display payload fetched from a tool.

    Importance: Lets the dashboard render tool data without contacting providers.
    Alternatives: Fetch provider data on every page load.
    """

    data: dict[str, Any] = field(default_factory=dict)
    cached_at: int | None = None


@dataclass(frozen=True)
class SyncStatus:
    """Summary: Process-wide state of the background sync job.

    Importance: Lets the dashboard show whether a refresh is pending or running.
    Alternatives: Infer state from the lock alone.
    """

    state: SyncState = SyncState.IDLE
    started_at: int | None = None
    ended_at: int | None = None
    queued_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "queued_at": self.queued_at,
        }

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> "SyncStatus":
        try:
            state = SyncState(payload.get("state", SyncState.IDLE.value))
        except ValueError:
            state = SyncState.IDLE
        return SyncStatus(
            state=state,
            started_at=optional_int(payload.get("started_at")),
            ended_at=optional_int(payload.get("ended_at")),
            queued_at=optional_int(payload.get("queued_at")),
        )


@dataclass(frozen=True)
class PostType:
    """Summary: Public content type known to the content store.

    Importance: Enables per-type totals including custom types.
    Alternatives: Hardcode post and page only.
    """

    name: str
    label: str
    public: bool = True


def optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
