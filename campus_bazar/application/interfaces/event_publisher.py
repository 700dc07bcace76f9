from abc import ABC, abstractmethod
from collections.abc import Iterable

from campus_bazar.domain.events.domain_events import DomainEvent


class EventPublisher(ABC):
    """
    Port for announcing what happened inside a wizard session.

    The wizard hands over the events buffered by one command, oldest first.
    Publishing is fire-and-forget from the wizard's point of view.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    async def publish_many(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)
