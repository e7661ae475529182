"""Summary: Tests for OAuth helpers and the Google Site Kit client.

Importance: Ensures consent URLs and token rotation behave predictably.
Alternatives: Test OAuth only through the API.
"""

from __future__ import annotations

import urllib.parse

from insighthub.config import AppConfig
from insighthub.errors import ErrorCode
from insighthub.integrations.google_site_kit import GoogleSiteKitClient
from insighthub.oauth import (
    ACCESS_TOKEN_LIFETIME_SECONDS,
    build_google_auth_url,
    create_state_token,
    derive_token,
)


def _config() -> AppConfig:
    return AppConfig(
        db_path="unused.db",
        api_host="127.0.0.1",
        api_port=8000,
        admin_api_key="",
        site_url="http://localhost:8000",
        google_client_id="client-123",
        oauth_redirect_uri="http://localhost:8000/oauth/callback?tool=google_site_kit",
        token_secret="secret",
    )


def test_google_auth_url_contains_state() -> None:
    """Summary: Verify the consent URL carries client, redirect, scope, and state.

    Importance: The callback depends on the state nonce round-tripping.
    Alternatives: Build URLs by string concatenation in the manager.
    """

    state = create_state_token()
    url = build_google_auth_url(_config(), state)
    query = urllib.parse.parse_qs(urllib.parse.urlparse(url).query)
    assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
    assert query["state"] == [state]
    assert query["client_id"] == ["client-123"]
    assert query["response_type"] == ["code"]
    assert "analytics.readonly" in query["scope"][0]


def test_state_tokens_are_unique() -> None:
    assert create_state_token() != create_state_token()


def test_derive_token_is_deterministic() -> None:
    assert derive_token("secret", "code", 1) == derive_token("secret", "code", 1)
    assert derive_token("secret", "code", 1) != derive_token("other", "code", 1)


def test_exchange_and_refresh(clock) -> None:
    """Summary: Ensure exchanged tokens rotate once they expire.

    Importance: Sync runs must keep working past the first hour.
    Alternatives: Force a reconnect when tokens expire.
    """

    client = GoogleSiteKitClient({}, clock=clock, token_secret="secret")
    assert client.validate_connection().code == ErrorCode.MISSING_TOKENS
    credentials = client.exchange_code_for_tokens("auth-code")
    assert credentials["access_token"].startswith("ya29.")
    assert credentials["refresh_token"].startswith("1//")
    assert credentials["expires_at"] == int(clock()) + ACCESS_TOKEN_LIFETIME_SECONDS
    assert client.maybe_refresh_token() is False

    first_token = client.access_token
    clock.advance(ACCESS_TOKEN_LIFETIME_SECONDS)
    assert client.validate_connection() is None
    assert client.access_token != first_token
    assert client.expires_at == int(clock()) + ACCESS_TOKEN_LIFETIME_SECONDS
    assert client.get_connection_metadata()["connected_as"] == "analytics@example.com"
