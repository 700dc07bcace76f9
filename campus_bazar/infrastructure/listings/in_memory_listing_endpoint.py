"""
Mock listing backend.

There is no real listing service yet; this endpoint waits a moment like a
network call would, mints an ``item-`` ID and keeps the created listing in
memory so the detail view can read it back.
"""
import asyncio
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from campus_bazar.application.interfaces.listing_creation_endpoint import (
    ListingCreationEndpoint,
    ListingCreationRequest,
)
from campus_bazar.config import settings

logger = structlog.get_logger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 9


class ListingCreationError(Exception):
    pass


def generate_listing_id(prefix: str = settings.listing_id_prefix) -> str:
    return prefix + "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StoredListing:
    id: str
    request: ListingCreationRequest
    status: str = "active"
    posted_date: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:  # type: ignore[type-arg]
        r = self.request
        return {
            "id": self.id,
            "title": r.title,
            "description": r.description,
            "price": r.price,
            "category": r.category,
            "condition": r.condition,
            "images": list(r.images),
            "contact_method": r.contact_method,
            "phone": r.phone,
            "location": r.location,
            "seller": {
                "id": r.seller_id,
                "name": r.seller_name,
                "university": r.seller_university,
            },
            "status": self.status,
            "posted_date": self.posted_date.isoformat(),
        }


class InMemoryListingEndpoint(ListingCreationEndpoint):
    """Accepts listings after a simulated delay and remembers them by ID."""

    def __init__(
        self,
        latency_seconds: float = settings.simulated_latency_seconds,
        id_prefix: str = settings.listing_id_prefix,
    ) -> None:
        self._latency = latency_seconds
        self._id_prefix = id_prefix
        self._listings: dict[str, StoredListing] = {}
        self._fail_next: int = 0

    def fail_next(self, times: int = 1) -> None:
        """Make the next ``times`` calls fail, to exercise the retry path."""
        self._fail_next = times

    async def create_listing(self, request: ListingCreationRequest) -> str:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

        if self._fail_next > 0:
            self._fail_next -= 1
            logger.warning("mock_listing_creation_failed", title=request.title)
            raise ListingCreationError("Listing service unavailable.")

        listing_id = generate_listing_id(self._id_prefix)
        while listing_id in self._listings:
            listing_id = generate_listing_id(self._id_prefix)

        self._listings[listing_id] = StoredListing(id=listing_id, request=request)
        logger.info("mock_listing_stored", listing_id=listing_id, seller_id=request.seller_id)
        return listing_id

    def get(self, listing_id: str) -> StoredListing | None:
        return self._listings.get(listing_id)

    def __len__(self) -> int:
        return len(self._listings)
