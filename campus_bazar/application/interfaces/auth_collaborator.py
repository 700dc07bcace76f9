from abc import ABC, abstractmethod

from campus_bazar.domain.entities.user import CurrentUser


class AuthCollaborator(ABC):
    """Port for reading who is signed in. The wizard never writes through it."""

    @abstractmethod
    def current_user(self) -> CurrentUser | None:
        ...
