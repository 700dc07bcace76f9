"""
In-process preview provider.

Stands in for the browser's URL.createObjectURL / revokeObjectURL pair: each
acquired handle gets a unique ``blob:`` URI that stays resolvable until it is
released.
"""
from typing import Any
from uuid import uuid4

import structlog

from campus_bazar.domain.attachments.preview_provider import PreviewProvider
from campus_bazar.domain.entities.image_attachment import PreviewHandle

logger = structlog.get_logger(__name__)


class PreviewReleaseError(Exception):
    def __init__(self, handle: PreviewHandle) -> None:
        self.handle = handle
        super().__init__(f"Preview {handle.uri} is not live (never issued or already released).")


class ObjectUrlRegistry(PreviewProvider):
    """Issues and revokes preview URIs, keeping track of which are live."""

    def __init__(self, scheme: str = "blob", origin: str = "campus-bazar") -> None:
        self._prefix = f"{scheme}:{origin}/"
        self._live: dict[str, Any] = {}
        self.acquired_count = 0
        self.released_count = 0

    def acquire(self, source: Any) -> PreviewHandle:
        handle_id = uuid4()
        handle = PreviewHandle(uri=f"{self._prefix}{handle_id}", handle_id=handle_id)
        self._live[handle.uri] = source
        self.acquired_count += 1
        logger.debug("preview_acquired", uri=handle.uri)
        return handle

    def release(self, handle: PreviewHandle) -> None:
        if handle.uri not in self._live:
            raise PreviewReleaseError(handle)
        del self._live[handle.uri]
        self.released_count += 1
        logger.debug("preview_released", uri=handle.uri)

    def resolve(self, uri: str) -> Any | None:
        """Return the source behind a live URI, or None once it is released."""
        return self._live.get(uri)

    def is_live(self, handle: PreviewHandle) -> bool:
        return handle.uri in self._live

    @property
    def live_count(self) -> int:
        return len(self._live)
