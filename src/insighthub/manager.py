"""Summary: Integration manager for marketing tool connections and background sync.

Importance: Orchestrates connect/disconnect flows, OAuth state, validation bookkeeping, and cached summaries.
Alternatives: Spread connection logic across API handlers and cron scripts.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from insighthub.config import AppConfig
from insighthub.credential_store import CredentialStore
from insighthub.errors import ClientError, ErrorCode, IntegrationError, Result
from insighthub.integrations.base import IntegrationClient
from insighthub.integrations.google_site_kit import GoogleSiteKitClient
from insighthub.integrations.registry import TOOLS, ToolDefinition, build_client
from insighthub.models import (
    ConnectionRecord,
    SummaryEntry,
    SyncState,
    SyncStatus,
    ToolType,
    ValidationState,
    ValidationStatus,
)
from insighthub.oauth import build_google_auth_url, create_state_token
from insighthub.scheduler import Scheduler
from insighthub.storage.base import Clock, TransientStore
from insighthub.summary_cache import SummaryCache


logger = logging.getLogger(__name__)

SYNC_HOOK = "insighthub_sync_integrations"
SYNC_LOCK_KEY = "insighthub_sync_lock"
SYNC_STATUS_KEY = "insighthub_sync_status"
OAUTH_STATE_PREFIX = "insighthub_oauth_state_"

VALIDATION_SUCCEEDED = "Validation succeeded"
SYNC_SUCCEEDED = "Sync succeeded"


class IntegrationManager:
    """Summary: Coordinates credential storage, clients, summaries, and sync runs.

    Importance: Gives the dashboard one object for every integration read and action.
    Alternatives: Let each view talk to the stores and clients directly.
    """

    def __init__(
        self,
        config: AppConfig,
        credentials: CredentialStore,
        summaries: SummaryCache,
        transients: TransientStore,
        scheduler: Scheduler,
        clock: Clock = time.time,
        tools: Mapping[str, ToolDefinition] = TOOLS,
    ) -> None:
        self._config = config
        self._credentials = credentials
        self._summaries = summaries
        self._transients = transients
        self._scheduler = scheduler
        self._clock = clock
        self._tools = tools

    def register_hooks(self) -> None:
        """Summary: Bind the sync handler and ensure the hourly run exists.

        Importance: Called once per process start without duplicating the recurring event.
        Alternatives: Schedule the recurring run on plugin activation only.
        """

        self._scheduler.register(SYNC_HOOK, self.run_sync)
        if not self._scheduler.has_recurring(SYNC_HOOK):
            self._scheduler.schedule_recurring(SYNC_HOOK, self._config.sync_interval_seconds)

    def get_tools(self) -> dict[str, ToolDefinition]:
        return dict(self._tools)

    def get_connection(self, tool: str) -> ConnectionRecord | None:
        return self._credentials.get(tool)

    def is_connected(self, tool: str) -> bool:
        record = self.get_connection(tool)
        return record is not None and record.validation.status == ValidationStatus.SUCCESS

    def get_connection_metadata(self, tool: str) -> dict[str, str]:
        record = self.get_connection(tool)
        return dict(record.metadata) if record else {}

    def get_validation_state(self, tool: str) -> ValidationState:
        record = self.get_connection(tool)
        return record.validation if record else ValidationState()

    def get_cached_summary(self, tool: str) -> SummaryEntry:
        return self._summaries.get(tool)

    def get_client(self, tool: str) -> IntegrationClient | IntegrationError:
        """Summary: Build a client from stored credentials.

        Importance: Central point that turns a connection record into a usable client.
        Alternatives: Cache client instances per tool.
        """

        definition = self._tools.get(tool)
        if definition is None:
            return _invalid_tool()
        record = self.get_connection(tool)
        if record is None:
            return IntegrationError(
                ErrorCode.MISSING_CONNECTION, "Connect the integration to continue."
            )
        if definition.client_factory is None:
            return IntegrationError(
                ErrorCode.MISSING_CLIENT_CLASS, "Integration client not available."
            )
        try:
            return build_client(definition, record.credentials, self._clock, self._config.token_secret)
        except (TypeError, ValueError) as exc:
            logger.warning("Could not build %s client: %s", tool, exc)
            return IntegrationError(
                ErrorCode.INVALID_CREDENTIALS, "Stored credentials could not be read."
            )

    def connect_tool(self, tool: str, data: Mapping[str, Any] | None = None) -> Result:
        """Summary: Start or complete a connection for a tool.

        Importance: OAuth tools get a consent redirect; key-based tools are validated and stored.
        Alternatives: Expose a separate endpoint per tool.
        """

        definition = self._tools.get(tool)
        if definition is None:
            return Result.failure(_invalid_tool())
        if definition.type == ToolType.OAUTH:
            state = create_state_token()
            self._transients.set(
                OAUTH_STATE_PREFIX + state, tool, self._config.oauth_state_ttl_seconds
            )
            logger.info("Issued OAuth state for %s.", tool)
            return Result.success(redirect=build_google_auth_url(self._config, state))
        if definition.client_factory is None:
            return Result.failure(
                IntegrationError(ErrorCode.MISSING_CLIENT_CLASS, "Integration client not available.")
            )

        submitted = data or {}
        credentials = {name: str(submitted.get(name) or "").strip() for name in definition.credential_fields}
        client = build_client(definition, credentials, self._clock, self._config.token_secret)
        if not client.validate_credentials():
            logger.info("Rejected credentials for %s.", tool)
            return Result.failure(
                IntegrationError(
                    ErrorCode.INVALID_CREDENTIALS, f"Invalid {definition.label} credentials."
                )
            )
        return self._finalize_connection(tool, client)

    def handle_oauth_callback(self, tool: str, code: str, state: str) -> Result:
        """Summary: Complete the OAuth consent flow.

        Importance: Verifies the one-time state nonce before storing tokens.
        Alternatives: Trust the callback parameters as-is.
        """

        definition = self._tools.get(tool)
        if definition is None or definition.type != ToolType.OAUTH:
            return Result.failure(IntegrationError(ErrorCode.INVALID_TOOL, "Unknown OAuth tool."))
        if not code or not state:
            return Result.failure(
                IntegrationError(ErrorCode.INVALID_OAUTH_PARAMS, "Missing authorization details.")
            )
        if not self._verify_oauth_state(tool, state):
            logger.warning("OAuth state mismatch for %s.", tool)
            return Result.failure(
                IntegrationError(
                    ErrorCode.OAUTH_STATE_MISMATCH, "OAuth state did not match. Please retry."
                )
            )
        client = (
            build_client(definition, {}, self._clock, self._config.token_secret)
            if definition.client_factory is not None
            else None
        )
        if not isinstance(client, GoogleSiteKitClient):
            return Result.failure(
                IntegrationError(ErrorCode.MISSING_CLIENT_CLASS, "Integration client not available.")
            )
        client.exchange_code_for_tokens(code)
        return self._finalize_connection(tool, client)

    def validate_tool(self, tool: str) -> Result:
        """Summary: Re-run connection validation on stored credentials.

        Importance: Lets admins recheck a failed tool without re-entering credentials.
        Alternatives: Require a full reconnect.
        """

        if tool not in self._tools:
            return Result.failure(_invalid_tool())
        client = self.get_client(tool)
        if isinstance(client, IntegrationError):
            return Result.failure(client)
        return self._finalize_connection(tool, client)

    def disconnect_tool(self, tool: str) -> Result:
        if tool not in self._tools:
            return Result.failure(_invalid_tool())
        self._credentials.delete(tool)
        self._summaries.clear(tool)
        logger.info("Disconnected %s.", tool)
        return Result.success()

    def trigger_immediate_sync(self) -> Result:
        """Summary: Queue a near-immediate background sync.

        Importance: Refreshes summaries right after a connect or a manual refresh.
        Alternatives: Run the sync inline in the request.
        """

        if not self.is_sync_running():
            self._write_status(SyncStatus(state=SyncState.QUEUED, queued_at=self._now()))
        self._scheduler.schedule_once(
            SYNC_HOOK, self._config.immediate_sync_delay_seconds, {"trigger": "manual"}
        )
        return Result.success()

    def is_sync_running(self) -> bool:
        return bool(self._transients.get(SYNC_LOCK_KEY))

    def get_sync_status(self) -> SyncStatus:
        """Summary: Return the current sync status.

        Importance: A running state left behind by a crashed run reads as idle once the lock expires.
        Alternatives: Report the stored state verbatim.
        """

        payload = self._transients.get(SYNC_STATUS_KEY)
        status = SyncStatus.from_dict(payload) if isinstance(payload, dict) else SyncStatus()
        if status.state == SyncState.RUNNING and not self.is_sync_running():
            return SyncStatus(
                state=SyncState.IDLE,
                started_at=status.started_at,
                ended_at=status.ended_at,
            )
        return status

    def run_sync(self, trigger: str = "scheduled") -> bool:
        """Summary: Refresh cached summaries for every connected tool.

        Importance: Keeps provider work out of user-facing requests.
        Alternatives: Fetch provider data on demand in the dashboard.
        """

        if self.is_sync_running():
            logger.info("Sync already running; skipping %s trigger.", trigger)
            return False
        started_at = self._now()
        self._transients.set(SYNC_LOCK_KEY, True, self._config.sync_lock_ttl_seconds)
        self._write_status(SyncStatus(state=SyncState.RUNNING, started_at=started_at))
        logger.info("Sync started (%s).", trigger)
        synced = 0
        try:
            for tool in self._tools:
                if self._sync_tool(tool):
                    synced += 1
        finally:
            self._transients.delete(SYNC_LOCK_KEY)
            self._write_status(
                SyncStatus(state=SyncState.IDLE, started_at=started_at, ended_at=self._now())
            )
        logger.info("Sync finished: %s of %s tools refreshed.", synced, len(self._tools))
        return True

    def _sync_tool(self, tool: str) -> bool:
        if not self.is_connected(tool):
            self._summaries.clear(tool)
            return False
        client = self.get_client(tool)
        if isinstance(client, IntegrationError):
            logger.warning("Skipping %s: %s", tool, client.message)
            self._summaries.clear(tool)
            return False
        try:
            data = client.fetch_latest_data()
        except ClientError as exc:
            logger.warning("Fetching data for %s failed: %s", tool, exc)
            return False
        self._summaries.put(tool, data)
        record = self.get_connection(tool)
        if record is None:
            return False
        now = self._now()
        self._credentials.put(
            tool,
            ConnectionRecord(
                credentials=client.credentials,
                metadata=client.get_connection_metadata(),
                validation=ValidationState(
                    status=ValidationStatus.SUCCESS,
                    checked_at=now,
                    last_success_at=now,
                    message=SYNC_SUCCEEDED,
                ),
                stored_at=record.stored_at,
            ),
        )
        return True

    def _finalize_connection(self, tool: str, client: IntegrationClient) -> Result:
        """Summary: Validate, record, and persist a connection.

        Importance: Shared by every connect flow so validation bookkeeping stays consistent.
        Alternatives: Duplicate the persistence step in each flow.
        """

        error = client.validate_connection()
        previous = self.get_connection(tool)
        previous_success = previous.validation.last_success_at if previous else None
        now = self._now()
        if error is None:
            validation = ValidationState(
                status=ValidationStatus.SUCCESS,
                checked_at=now,
                last_success_at=now,
                message=VALIDATION_SUCCEEDED,
            )
        else:
            validation = ValidationState(
                status=ValidationStatus.FAILED,
                checked_at=now,
                last_success_at=previous_success,
                message=error.message,
            )
        self._credentials.put(
            tool,
            ConnectionRecord(
                credentials=client.credentials,
                metadata=client.get_connection_metadata(),
                validation=validation,
                stored_at=previous.stored_at if previous else None,
            ),
        )
        if error is not None:
            logger.warning("Validation failed for %s: %s", tool, error.message)
            return Result.failure(error)
        logger.info("Connected %s.", tool)
        self._summaries.clear(tool)
        self.trigger_immediate_sync()
        return Result.success()

    def _verify_oauth_state(self, tool: str, state: str) -> bool:
        key = OAUTH_STATE_PREFIX + state
        stored_tool = self._transients.get(key)
        self._transients.delete(key)
        return stored_tool == tool

    def _write_status(self, status: SyncStatus) -> None:
        self._transients.set(SYNC_STATUS_KEY, status.to_dict())

    def _now(self) -> int:
        return int(self._clock())


def _invalid_tool() -> IntegrationError:
    return IntegrationError(ErrorCode.INVALID_TOOL, "Unknown marketing tool.")
