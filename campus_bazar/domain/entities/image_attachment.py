from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True)
class PreviewHandle:
    """A displayable reference to a locally selected file.

    Must be handed back to the provider that issued it exactly once.
    """

    uri: str
    handle_id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class ImageAttachment:
    source: Any  # opaque selected-file handle, never read
    preview: PreviewHandle

    @property
    def uri(self) -> str:
        return self.preview.uri


@dataclass(frozen=True)
class SelectedFile:
    """What a file picker reports about a chosen file."""

    name: str
    content_type: str = "image/jpeg"
    size: int = 0
