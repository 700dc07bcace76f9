import structlog

from campus_bazar.application.interfaces.navigation_collaborator import NavigationCollaborator

logger = structlog.get_logger(__name__)


class RecordingNavigator(NavigationCollaborator):
    """Remembers where the app should go next; the HTTP shell reports it as ``redirect_to``."""

    def __init__(self) -> None:
        self.history: list[str] = []

    @property
    def location(self) -> str | None:
        return self.history[-1] if self.history else None

    def navigate_to_listing(self, listing_id: str) -> None:
        self._go(f"/listing/{listing_id}")

    def redirect_to_login(self, return_to: str) -> None:
        self._go(f"/login?from={return_to}")

    def _go(self, path: str) -> None:
        self.history.append(path)
        logger.debug("navigated", path=path)
