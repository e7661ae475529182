"""Summary: Error values and action results for integration flows.

Importance: Lets callers render expected failures as notices instead of catching exceptions.
Alternatives: Raise custom exceptions for every failure path.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Summary: Stable identifiers for expected integration failures.

    Importance: Gives API clients and templates a machine-readable failure reason.
    Alternatives: Match on message text.
    """

    INVALID_TOOL = "invalid_tool"
    INVALID_CREDENTIALS = "invalid_credentials"
    INSECURE_URL = "insecure_url"
    INVALID_KEY_FORMAT = "invalid_key_format"
    MISSING_TOKENS = "missing_tokens"
    VALIDATION_FAILED = "validation_failed"
    MISSING_CLIENT_CLASS = "missing_client"
    MISSING_CONNECTION = "missing_connection"
    INVALID_OAUTH_PARAMS = "invalid_oauth"
    OAUTH_STATE_MISMATCH = "invalid_oauth_state"


@dataclass(frozen=True)
class IntegrationError:
    """Summary: An expected failure with a user-facing message.

    Importance: Becomes the persisted validation message and the rendered notice.
    Alternatives: Return bare strings for errors.
    """

    code: ErrorCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class Result:
    """Summary: Outcome of a manager action.

    Importance: Carries either success (optionally with a redirect) or an error value.
    Alternatives: Return a union of True, dicts, and errors.
    """

    ok: bool
    error: IntegrationError | None = None
    redirect: str | None = None

    @staticmethod
    def success(redirect: str | None = None) -> "Result":
        return Result(ok=True, redirect=redirect)

    @staticmethod
    def failure(error: IntegrationError) -> "Result":
        return Result(ok=False, error=error)


class StoreError(RuntimeError):
    """Summary: Raised when a backing store cannot complete an operation.

    Importance: Hides driver-specific exceptions from services.
    Alternatives: Let sqlite3 errors propagate directly.
    """


class ClientError(RuntimeError):
    """Summary: Raised when an integration client cannot fetch data.

    Importance: Lets the sync loop skip a failing tool and continue.
    Alternatives: Return empty payloads on failure.
    """
