"""
Structured-log event publisher.

There is no message bus behind the wizard, so events are serialised the way a
bus would carry them and written to the structlog stream. The most recent
payloads are kept in memory for inspection.
"""
import json
from collections import deque

import structlog

from campus_bazar.application.interfaces.event_publisher import EventPublisher
from campus_bazar.domain.events.domain_events import (
    DomainEvent,
    ListingSubmittedEvent,
    SubmissionFailedEvent,
    WizardDisposedEvent,
    WizardStepChangedEvent,
)

logger = structlog.get_logger(__name__)


def event_to_routing_key(event: DomainEvent) -> str:
    if isinstance(event, WizardStepChangedEvent):
        return f"wizard.step.{event.to_step.name.lower()}"
    if isinstance(event, ListingSubmittedEvent):
        return "listing.created"
    if isinstance(event, SubmissionFailedEvent):
        return "listing.submission_failed"
    if isinstance(event, WizardDisposedEvent):
        return "wizard.disposed"
    return "event.unknown"


def serialise_event(event: DomainEvent) -> str:
    payload: dict = {  # type: ignore[type-arg]
        "event_type": event_to_routing_key(event),
        "event_id": str(event.event_id),
        "occurred_at": event.occurred_at.isoformat(),
    }

    if isinstance(event, WizardStepChangedEvent):
        payload.update(
            {
                "session_id": str(event.session_id),
                "from_step": event.from_step.name,
                "to_step": event.to_step.name,
                "triggered_by": event.triggered_by,
            }
        )
    elif isinstance(event, ListingSubmittedEvent):
        payload.update(
            {
                "session_id": str(event.session_id),
                "listing_id": event.listing_id,
                "seller_id": event.seller_id,
                "image_count": event.image_count,
            }
        )
    elif isinstance(event, SubmissionFailedEvent):
        payload.update({"session_id": str(event.session_id), "error": event.error.value})
    elif isinstance(event, WizardDisposedEvent):
        payload.update(
            {
                "session_id": str(event.session_id),
                "step": event.step.name,
                "released_images": event.released_images,
            }
        )

    return json.dumps(payload, default=str)


class LoggingEventPublisher(EventPublisher):
    """Writes each domain event to the log as a serialised payload."""

    def __init__(self, keep_last: int = 100) -> None:
        self.published: deque[str] = deque(maxlen=keep_last)

    async def publish(self, event: DomainEvent) -> None:
        routing_key = event_to_routing_key(event)
        body = serialise_event(event)
        self.published.append(body)
        logger.info("event_published", routing_key=routing_key, event_id=str(event.event_id))
