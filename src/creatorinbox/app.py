"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from creatorinbox.capacity import DEFAULT_CAPACITY
from creatorinbox.config import AppConfig
from creatorinbox.draft_analytics import DraftAnalyticsService
from creatorinbox.drafts import DraftLifecycleManager
from creatorinbox.services import CapacityPlanner, CapacityReportService
from creatorinbox.storage.document_store import DocumentStore, InMemoryDocumentStore
from creatorinbox.storage.sqlite_store import SqliteDocumentStore, default_store_path


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for CreatorInbox.

    Importance: Simplifies passing dependencies to UI or API layers.
    Alternatives: Use a dependency injection container.
    """

    store: DocumentStore
    drafts: DraftLifecycleManager
    analytics: DraftAnalyticsService
    planner: CapacityPlanner
    reports: CapacityReportService
    user_id: str


def build_store(config: AppConfig) -> DocumentStore:
    """Summary: Construct the configured document store.

    Importance: Keeps backend selection in one place.
    Alternatives: Hardcode SQLite in every entrypoint.
    """

    if config.store_backend == "memory":
        return InMemoryDocumentStore()
    if config.store_backend == "sqlite":
        store = SqliteDocumentStore(config.db_path or default_store_path())
        store.initialize()
        return store
    raise ValueError(f"Unknown store backend: {config.store_backend}")


def build_services(config: AppConfig) -> AppServices:
    """Summary: Build core services from configuration.

    Importance: Provides a single construction path for the application.
    Alternatives: Instantiate services directly within the CLI entrypoint.
    """

    store = build_store(config)
    return AppServices(
        store=store,
        drafts=DraftLifecycleManager(store),
        analytics=DraftAnalyticsService(store),
        planner=CapacityPlanner(
            daily_limit=config.daily_limit or DEFAULT_CAPACITY, faq_rate=config.faq_rate
        ),
        reports=CapacityReportService(store=store),
        user_id=config.default_user_id,
    )
