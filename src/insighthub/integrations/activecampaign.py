"""Summary: ActiveCampaign integration client (API key style).

Importance: Surfaces campaign performance from the marketing automation account.
Alternatives: Use the ActiveCampaign v3 REST API through httpx.
"""

from __future__ import annotations

import re
import urllib.parse
from typing import Any, Mapping

from insighthub.errors import ClientError, ErrorCode, IntegrationError
from insighthub.integrations.base import IntegrationClient, mask_suffix


MIN_KEY_LENGTH = 16
HOSTNAME_PATTERN = re.compile(
    r"^(?=.{1,253}$)[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)*$"
)


class ActiveCampaignClient(IntegrationClient):
    """Summary: Client for an ActiveCampaign account.

    Importance: Validates the account URL and key before anything is stored as connected.
    Alternatives: Accept any credentials and fail during sync.
    """

    def _load(self, credentials: Mapping[str, Any]) -> None:
        self.api_url = str(credentials.get("api_url") or "")
        self.api_key = str(credentials.get("api_key") or "")

    @property
    def credentials(self) -> dict[str, Any]:
        return {"api_url": self.api_url, "api_key": self.api_key}

    def validate_credentials(self) -> bool:
        """Summary: Require an absolute URL and a sufficiently long key.

        Importance: Rejects obvious typos before a connection record is written.
        Alternatives: Validate only by calling the provider.
        """

        if not self.api_url or not self.api_key:
            return False
        return _is_valid_url(self.api_url) and len(self.api_key) >= MIN_KEY_LENGTH

    def validate_connection(self) -> IntegrationError | None:
        if not self.validate_credentials():
            return IntegrationError(
                ErrorCode.INVALID_CREDENTIALS, "ActiveCampaign credentials are incomplete."
            )
        if not self.api_url.startswith("https://"):
            return IntegrationError(
                ErrorCode.INSECURE_URL, "Use a secure https:// API URL for ActiveCampaign."
            )
        return None

    def get_connection_metadata(self) -> dict[str, str]:
        return {
            "api_url": self.api_url,
            "masked_key": mask_suffix(self.api_key, 6),
            "connected_as": urllib.parse.urlparse(self.api_url).hostname or "",
        }

    def fetch_latest_data(self) -> dict[str, Any]:
        if not self.validate_credentials():
            raise ClientError("ActiveCampaign credentials are incomplete.")
        return {
            "status": "connected",
            "api_url": self.api_url,
            "api_key_masked": mask_suffix(self.api_key, 4),
            "campaign_summary": {
                "name": "Welcome Series",
                "open_rate": "41%",
                "click_rate": "3.2%",
                "recent_contact": "Import completed 2h ago",
            },
        }


def _is_valid_url(value: str) -> bool:
    if any(char.isspace() or ord(char) < 32 or ord(char) == 127 for char in value):
        return False
    try:
        parsed = urllib.parse.urlparse(value)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        return False
    return bool(HOSTNAME_PATTERN.match(parsed.hostname))
