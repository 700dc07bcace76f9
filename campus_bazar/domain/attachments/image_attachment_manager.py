from collections.abc import Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from campus_bazar.domain.attachments.preview_provider import PreviewProvider
from campus_bazar.domain.entities.image_attachment import ImageAttachment, PreviewHandle
from campus_bazar.domain.errors.wizard_errors import WizardError

MAX_IMAGES = 5


@dataclass(frozen=True)
class AttachmentResult:
    success: bool
    count: int
    error: WizardError | None = None


class ImageAttachmentManager:
    """
    Sole owner of a wizard's selected images and their preview handles.

    A preview is acquired when an image is added and released exactly once,
    on removal, replacement or disposal. The first attachment is the main
    image. Use as a context manager to guarantee release on teardown.
    """

    def __init__(self, provider: PreviewProvider, max_images: int = MAX_IMAGES) -> None:
        self._provider = provider
        self._max_images = max_images
        self._attachments: list[ImageAttachment] = []

    # -------------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._attachments)

    @property
    def max_images(self) -> int:
        return self._max_images

    @property
    def attachments(self) -> tuple[ImageAttachment, ...]:
        return tuple(self._attachments)

    @property
    def uris(self) -> list[str]:
        return [attachment.uri for attachment in self._attachments]

    @property
    def main_image(self) -> ImageAttachment | None:
        return self._attachments[0] if self._attachments else None

    @property
    def live_handle_count(self) -> int:
        return len({a.preview.handle_id for a in self._attachments})

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_images(self, sources: Sequence[Any]) -> AttachmentResult:
        """Attach a batch of selected files, all or nothing."""
        if len(self._attachments) + len(sources) > self._max_images:
            return AttachmentResult(
                success=False, count=len(self._attachments), error=WizardError.TOO_MANY_IMAGES
            )

        acquired: list[ImageAttachment] = []
        try:
            for source in sources:
                acquired.append(ImageAttachment(source=source, preview=self._provider.acquire(source)))
        except Exception:
            # Keep the batch atomic: hand back what this batch already took
            for attachment in acquired:
                self._release(attachment.preview)
            raise

        self._attachments.extend(acquired)
        return AttachmentResult(success=True, count=len(self._attachments))

    def remove_image(self, index: int) -> AttachmentResult:
        if not 0 <= index < len(self._attachments):
            return AttachmentResult(
                success=False, count=len(self._attachments), error=WizardError.INDEX_OUT_OF_RANGE
            )

        self._release(self._attachments[index].preview)
        del self._attachments[index]
        return AttachmentResult(success=True, count=len(self._attachments))

    def replace_image(self, index: int, source: Any) -> AttachmentResult:
        """Swap the file at ``index`` for ``source``, keeping its position."""
        if not 0 <= index < len(self._attachments):
            return AttachmentResult(
                success=False, count=len(self._attachments), error=WizardError.INDEX_OUT_OF_RANGE
            )

        replacement = ImageAttachment(source=source, preview=self._provider.acquire(source))
        previous = self._attachments[index]
        self._attachments[index] = replacement
        self._release(previous.preview)
        return AttachmentResult(success=True, count=len(self._attachments))

    def dispose_all(self) -> None:
        """Release every preview and forget all attachments. Safe to repeat."""
        attachments, self._attachments = self._attachments, []
        for attachment in attachments:
            self._release(attachment.preview)

    def _release(self, handle: PreviewHandle) -> None:
        self._provider.release(handle)

    # -------------------------------------------------------------------------
    # Scoped ownership
    # -------------------------------------------------------------------------

    def __enter__(self) -> "ImageAttachmentManager":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose_all()
