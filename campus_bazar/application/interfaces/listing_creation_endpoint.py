from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ListingCreationRequest:
    title: str
    description: str
    price: float
    category: str
    condition: str
    images: list[str]
    contact_method: str
    location: str
    seller_id: str
    seller_name: str
    seller_university: str
    phone: str | None = None

    def to_dict(self) -> dict:  # type: ignore[type-arg]
        return asdict(self)


class ListingCreationEndpoint(ABC):
    """Port for the backend call that accepts a new listing."""

    @abstractmethod
    async def create_listing(self, request: ListingCreationRequest) -> str:
        """Returns the new listing's ID. Any exception means the call failed."""
        ...
