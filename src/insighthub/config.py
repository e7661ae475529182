"""Summary: Application configuration for InsightHub.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for storage, integrations, and sync timing.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    api_host: str
    api_port: int
    admin_api_key: str
    site_url: str
    google_client_id: str
    oauth_redirect_uri: str
    token_secret: str
    summary_cache_ttl_seconds: int = 30 * 60
    sync_lock_ttl_seconds: int = 5 * 60
    oauth_state_ttl_seconds: int = 10 * 60
    sync_interval_seconds: int = 60 * 60
    immediate_sync_delay_seconds: int = 5
    woocommerce_enabled: bool = False
    woocommerce_statuses: tuple[str, ...] = ("processing", "completed")

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("INSIGHTHUB_DB_PATH", defaults["db_path"]),
            api_host=os.getenv("INSIGHTHUB_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("INSIGHTHUB_API_PORT", defaults["api_port"])),
            admin_api_key=os.getenv("INSIGHTHUB_ADMIN_API_KEY", defaults["admin_api_key"]),
            site_url=os.getenv("INSIGHTHUB_SITE_URL", defaults["site_url"]),
            google_client_id=os.getenv("INSIGHTHUB_GOOGLE_CLIENT_ID", defaults["google_client_id"]),
            oauth_redirect_uri=os.getenv(
                "INSIGHTHUB_OAUTH_REDIRECT_URI", defaults["oauth_redirect_uri"]
            ),
            token_secret=os.getenv("INSIGHTHUB_TOKEN_SECRET", defaults["token_secret"]),
            summary_cache_ttl_seconds=int(
                os.getenv("INSIGHTHUB_SUMMARY_CACHE_TTL", defaults["summary_cache_ttl_seconds"])
            ),
            sync_lock_ttl_seconds=int(
                os.getenv("INSIGHTHUB_SYNC_LOCK_TTL", defaults["sync_lock_ttl_seconds"])
            ),
            oauth_state_ttl_seconds=int(
                os.getenv("INSIGHTHUB_OAUTH_STATE_TTL", defaults["oauth_state_ttl_seconds"])
            ),
            sync_interval_seconds=int(
                os.getenv("INSIGHTHUB_SYNC_INTERVAL", defaults["sync_interval_seconds"])
            ),
            immediate_sync_delay_seconds=int(
                os.getenv("INSIGHTHUB_IMMEDIATE_SYNC_DELAY", defaults["immediate_sync_delay_seconds"])
            ),
            woocommerce_enabled=_parse_bool(
                os.getenv("INSIGHTHUB_WOOCOMMERCE_ENABLED", defaults["woocommerce_enabled"])
            ),
            woocommerce_statuses=_parse_list(
                os.getenv("INSIGHTHUB_WOOCOMMERCE_STATUSES", defaults["woocommerce_statuses"])
            ),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps secrets out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())
