"""Summary: OAuth helper utilities for the Google Site Kit integration.

Importance: Generates consent URLs, state nonces, and simulated tokens without extra dependencies.
Alternatives: Use provider SDKs for OAuth flows.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import urllib.parse
from dataclasses import dataclass
from typing import Any

from insighthub.config import AppConfig


GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_SCOPES = (
    "https://www.googleapis.com/auth/siteverification "
    "https://www.googleapis.com/auth/analytics.readonly"
)
ACCESS_TOKEN_LIFETIME_SECONDS = 60 * 60


@dataclass(frozen=True)
class OAuthTokenResult:
    """Summary: Normalized OAuth token data.

    Importance: Provides a consistent token representation for storage and refresh logic.
    Alternatives: Store the raw provider response without normalization.
    """

    access_token: str
    refresh_token: str
    expires_at: int
    account_email: str

    def to_credentials(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "account_email": self.account_email,
        }


def create_state_token() -> str:
    """Summary: Generate a CSRF state token.

    Importance: Protects OAuth flows from CSRF attacks.
    Alternatives: Use server-side session storage with pre-generated tokens.
    """

    return secrets.token_urlsafe(24)


def build_google_auth_url(config: AppConfig, state: str) -> str:
    """Summary: Build a Google OAuth authorization URL.

    Importance: Enables read-only Analytics and Search Console authorization.
    Alternatives: Use a different OAuth helper library.
    """

    params = {
        "response_type": "code",
        "client_id": config.google_client_id,
        "redirect_uri": config.oauth_redirect_uri,
        "scope": GOOGLE_SCOPES,
        "state": state,
    }
    return GOOGLE_AUTH_URL + "?" + urllib.parse.urlencode(params)


def derive_token(secret: str, *parts: object) -> str:
    """Summary: Derive a deterministic token from a secret and inputs.

    Importance: Stands in for provider token issuance while no real exchange exists.
    Alternatives: Call the provider token endpoint.
    """

    message = "".join(str(part) for part in parts).encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.md5).hexdigest()
