"""Summary: Static registry of supported marketing tools.

Importance: Maps each tool identifier to its label, connect style, and client class.
Alternatives: Discover clients dynamically from installed modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from insighthub.integrations.activecampaign import ActiveCampaignClient
from insighthub.integrations.base import IntegrationClient
from insighthub.integrations.clarity import ClarityClient
from insighthub.integrations.google_site_kit import GoogleSiteKitClient
from insighthub.models import ToolType
from insighthub.storage.base import Clock


ClientFactory = Callable[..., IntegrationClient]


@dataclass(frozen=True)
class ToolDefinition:
    """Summary: Read-only description of one supported tool.

    Importance: Drives the connect flow, the dashboard listing, and client construction.
    Alternatives: Keep tool details in separate lookup tables.
    """

    label: str
    description: str
    type: ToolType
    client_factory: ClientFactory | None
    credential_fields: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "description": self.description,
            "type": self.type.value,
            "credential_fields": list(self.credential_fields),
        }


TOOLS: Mapping[str, ToolDefinition] = {
    "google_site_kit": ToolDefinition(
        label="Google Site Kit",
        description="Connect Google Analytics and Search Console insights.",
        type=ToolType.OAUTH,
        client_factory=GoogleSiteKitClient,
    ),
    "activecampaign": ToolDefinition(
        label="ActiveCampaign",
        description="Sync marketing automation and campaign performance.",
        type=ToolType.API_KEY,
        client_factory=ActiveCampaignClient,
        credential_fields=("api_url", "api_key"),
    ),
    "clarity": ToolDefinition(
        label="Microsoft Clarity",
        description="View session recordings and heatmap highlights.",
        type=ToolType.PROJECT_KEY,
        client_factory=ClarityClient,
        credential_fields=("project_id", "project_key"),
    ),
}


def build_client(
    definition: ToolDefinition,
    credentials: Mapping[str, Any],
    clock: Clock,
    token_secret: str,
) -> IntegrationClient:
    """Summary: Construct the client for a tool definition.

    Importance: Gives every client the same clock and secret.
    Alternatives: Let each caller instantiate clients itself.
    """

    if definition.client_factory is None:
        raise LookupError(f"No client registered for {definition.label}")
    return definition.client_factory(credentials, clock=clock, token_secret=token_secret)
