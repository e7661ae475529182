"""Summary: Microsoft Clarity integration client (project key style).

Importance: Surfaces session recording and heatmap activity.
Alternatives: Embed the Clarity dashboard in an iframe.
"""

from __future__ import annotations

from typing import Any, Mapping

from insighthub.errors import ClientError, ErrorCode, IntegrationError
from insighthub.integrations.base import IntegrationClient, mask_suffix


MIN_KEY_LENGTH = 6


class ClarityClient(IntegrationClient):
    """Summary: Client for a Clarity project."""

    def _load(self, credentials: Mapping[str, Any]) -> None:
        self.project_id = str(credentials.get("project_id") or "")
        self.project_key = str(credentials.get("project_key") or "")

    @property
    def credentials(self) -> dict[str, Any]:
        return {"project_id": self.project_id, "project_key": self.project_key}

    def validate_credentials(self) -> bool:
        return bool(self.project_id and self.project_key)

    def validate_connection(self) -> IntegrationError | None:
        if not self.validate_credentials():
            return IntegrationError(
                ErrorCode.INVALID_CREDENTIALS, "Clarity project credentials are incomplete."
            )
        if len(self.project_key) < MIN_KEY_LENGTH:
            return IntegrationError(
                ErrorCode.INVALID_KEY_FORMAT, "Clarity project key looks too short."
            )
        return None

    def get_connection_metadata(self) -> dict[str, str]:
        return {
            "project_id": self.project_id,
            "masked_key": mask_suffix(self.project_key, 5),
            "connected_as": "Project " + self.project_id,
        }

    def fetch_latest_data(self) -> dict[str, Any]:
        if not self.validate_credentials():
            raise ClientError("Clarity project credentials are incomplete.")
        return {
            "status": "connected",
            "project_id": self.project_id,
            "project_key_mask": mask_suffix(self.project_key, 4),
            "heatmap_counts": {
                "last_24h": 124,
                "last_7d": 842,
                "top_page": "/landing-page",
            },
        }
