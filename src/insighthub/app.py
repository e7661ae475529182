"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from insighthub.config import AppConfig
from insighthub.credential_store import CredentialStore
from insighthub.manager import IntegrationManager
from insighthub.scheduler import OptionScheduler, Scheduler
from insighthub.services import StatsService
from insighthub.storage.base import Clock, OptionStore, TransientStore
from insighthub.storage.sqlite_store import SqliteOptionStore, SqliteStore, SqliteTransientStore
from insighthub.summary_cache import SummaryCache


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for InsightHub.

    Importance: Simplifies passing dependencies to UI or API layers.
    Alternatives: Use a dependency injection container.
    """

    config: AppConfig
    store: SqliteStore
    options: OptionStore
    transients: TransientStore
    scheduler: Scheduler
    integrations: IntegrationManager
    stats: StatsService


def build_services(config: AppConfig, clock: Clock = time.time) -> AppServices:
    """Summary: Build core services from configuration.

    Importance: Provides a single construction path and registers the sync hooks once.
    Alternatives: Instantiate services directly within each entrypoint.
    """

    store = SqliteStore(config.db_path)
    store.initialize()
    options = SqliteOptionStore(store)
    transients = SqliteTransientStore(store, clock=clock)
    scheduler = OptionScheduler(options, clock=clock)
    integrations = IntegrationManager(
        config=config,
        credentials=CredentialStore(options, clock=clock),
        summaries=SummaryCache(transients, clock=clock, ttl_seconds=config.summary_cache_ttl_seconds),
        transients=transients,
        scheduler=scheduler,
        clock=clock,
    )
    integrations.register_hooks()
    stats = StatsService(
        content=store,
        clock=clock,
        woocommerce_enabled=config.woocommerce_enabled,
        woocommerce_statuses=config.woocommerce_statuses,
    )
    return AppServices(
        config=config,
        store=store,
        options=options,
        transients=transients,
        scheduler=scheduler,
        integrations=integrations,
        stats=stats,
    )
