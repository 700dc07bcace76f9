from abc import ABC, abstractmethod


class NavigationCollaborator(ABC):
    """Port for moving the surrounding application to another view."""

    @abstractmethod
    def navigate_to_listing(self, listing_id: str) -> None:
        ...

    @abstractmethod
    def redirect_to_login(self, return_to: str) -> None:
        ...
