"""
FastAPI dependency injection wiring.

Collaborators are process-wide singletons; tests swap any of them out with
``app.dependency_overrides``.
"""
from functools import lru_cache

from campus_bazar.config import settings
from campus_bazar.infrastructure.auth.file_auth_store import FileAuthStore
from campus_bazar.infrastructure.listings.in_memory_listing_endpoint import (
    InMemoryListingEndpoint,
)
from campus_bazar.infrastructure.messaging.logging_publisher import LoggingEventPublisher
from campus_bazar.infrastructure.previews.object_url_registry import ObjectUrlRegistry
from campus_bazar.infrastructure.sessions.wizard_session_registry import WizardSessionRegistry


@lru_cache
def get_auth_store() -> FileAuthStore:
    return FileAuthStore(settings.auth_store_path)


@lru_cache
def get_preview_provider() -> ObjectUrlRegistry:
    return ObjectUrlRegistry(scheme=settings.preview_uri_scheme, origin=settings.preview_uri_origin)


@lru_cache
def get_listing_endpoint() -> InMemoryListingEndpoint:
    return InMemoryListingEndpoint(
        latency_seconds=settings.simulated_latency_seconds,
        id_prefix=settings.listing_id_prefix,
    )


@lru_cache
def get_event_publisher() -> LoggingEventPublisher:
    return LoggingEventPublisher()


@lru_cache
def get_session_registry() -> WizardSessionRegistry:
    return WizardSessionRegistry()
