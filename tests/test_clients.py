"""Summary: Tests for the key-based integration clients.

Importance: Ensures credential checks and masking match what the dashboard shows.
Alternatives: Cover clients only through the manager.
"""

from __future__ import annotations

import pytest

from insighthub.errors import ClientError, ErrorCode
from insighthub.integrations.activecampaign import ActiveCampaignClient
from insighthub.integrations.base import mask_suffix
from insighthub.integrations.clarity import ClarityClient


def test_mask_suffix_keeps_tail() -> None:
    """Summary: Verify masking preserves only the requested suffix.

    Importance: Users recognise keys without seeing them in full.
    Alternatives: Hide keys entirely.
    """

    key = "abcdefghijklmnopqrstuvwx"
    masked = mask_suffix(key, 6)
    assert masked == "****stuvwx"
    assert masked.endswith(key[-6:])
    assert mask_suffix("", 4) == ""


@pytest.mark.parametrize(
    "credentials",
    [
        {"api_url": "", "api_key": "k" * 16},
        {"api_url": "not a url", "api_key": "k" * 16},
        {"api_url": "https://acct.api-us1.com", "api_key": "short"},
    ],
)
def test_activecampaign_rejects_bad_credentials(credentials: dict[str, str]) -> None:
    client = ActiveCampaignClient(credentials)
    assert client.validate_credentials() is False
    assert client.validate_connection().code == ErrorCode.INVALID_CREDENTIALS
    with pytest.raises(ClientError):
        client.fetch_latest_data()


def test_activecampaign_requires_https() -> None:
    """Summary: Ensure plain http URLs pass shape checks but fail validation.

    Importance: Keys must never travel over an insecure connection.
    Alternatives: Upgrade the URL to https silently.
    """

    client = ActiveCampaignClient({"api_url": "http://insecure.example.com", "api_key": "k" * 16})
    assert client.validate_credentials() is True
    assert client.validate_connection().code == ErrorCode.INSECURE_URL


def test_activecampaign_metadata_and_data() -> None:
    client = ActiveCampaignClient(
        {"api_url": "https://acct.api-us1.com", "api_key": "1234567890abcdef"}
    )
    assert client.validate_connection() is None
    metadata = client.get_connection_metadata()
    assert metadata["masked_key"] == "****abcdef"
    assert metadata["connected_as"] == "acct.api-us1.com"
    data = client.fetch_latest_data()
    assert data["api_key_masked"] == "****cdef"
    assert "campaign_summary" in data


def test_clarity_key_format() -> None:
    """Summary: Verify short Clarity keys fail with a key-format error.

    Importance: Distinguishes typos from missing fields.
    Alternatives: Treat every failure as invalid credentials.
    """

    assert ClarityClient({"project_id": "", "project_key": "abcdef"}).validate_connection().code == (
        ErrorCode.INVALID_CREDENTIALS
    )
    short = ClarityClient({"project_id": "proj123", "project_key": "abc"})
    assert short.validate_credentials() is True
    assert short.validate_connection().code == ErrorCode.INVALID_KEY_FORMAT

    client = ClarityClient({"project_id": "proj123", "project_key": "abcdef123456"})
    assert client.validate_connection() is None
    assert client.get_connection_metadata() == {
        "project_id": "proj123",
        "masked_key": "****23456",
        "connected_as": "Project proj123",
    }
    assert client.fetch_latest_data()["project_key_mask"] == "****3456"


@pytest.mark.parametrize(
    "api_url",
    [
        "https://exa mple.com",
        "https://example.com/\tpath",
        "https://exa\x00mple.com",
        "https://-bad-.example.com",
        "https://example.com:99999",
        "ftp://example.com",
    ],
)
def test_activecampaign_rejects_malformed_urls(api_url: str) -> None:
    """Summary: Ensure URLs with whitespace, control characters, or bad hosts are rejected.

    Importance: Only syntactically valid account URLs may be stored.
    Alternatives: Let the provider reject them during sync.
    """

    client = ActiveCampaignClient({"api_url": api_url, "api_key": "0123456789012345"})
    assert client.validate_credentials() is False
