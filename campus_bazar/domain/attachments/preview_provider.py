from abc import ABC, abstractmethod
from typing import Any

from campus_bazar.domain.entities.image_attachment import PreviewHandle


class PreviewProvider(ABC):
    """Port for turning a selected file into a displayable preview URI."""

    @abstractmethod
    def acquire(self, source: Any) -> PreviewHandle:
        ...

    @abstractmethod
    def release(self, handle: PreviewHandle) -> None:
        ...
