"""In-process home for open create-listing wizards, keyed by session ID."""
from dataclasses import dataclass
from uuid import UUID

import structlog

from campus_bazar.application.interfaces.auth_collaborator import AuthCollaborator
from campus_bazar.application.interfaces.event_publisher import EventPublisher
from campus_bazar.application.interfaces.listing_creation_endpoint import ListingCreationEndpoint
from campus_bazar.application.use_cases.create_listing_wizard import CreateListingWizard
from campus_bazar.domain.attachments.preview_provider import PreviewProvider
from campus_bazar.infrastructure.navigation.recording_navigator import RecordingNavigator

logger = structlog.get_logger(__name__)


class WizardSessionNotFoundError(Exception):
    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Wizard session {session_id} not found.")


@dataclass
class WizardSession:
    wizard: CreateListingWizard
    navigator: RecordingNavigator


class WizardSessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[UUID, WizardSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(
        self,
        *,
        auth: AuthCollaborator,
        preview_provider: PreviewProvider,
        endpoint: ListingCreationEndpoint,
        event_publisher: EventPublisher,
        max_images: int,
        submission_timeout: float | None,
        navigator: RecordingNavigator | None = None,
    ) -> WizardSession:
        """Open a wizard for the signed-in user. Raises NotAuthenticatedError otherwise."""
        navigator = navigator or RecordingNavigator()
        wizard = CreateListingWizard.open(
            auth=auth,
            navigation=navigator,
            preview_provider=preview_provider,
            endpoint=endpoint,
            event_publisher=event_publisher,
            max_images=max_images,
            submission_timeout=submission_timeout,
        )
        session = WizardSession(wizard=wizard, navigator=navigator)
        self._sessions[wizard.session_id] = session
        return session

    def get(self, session_id: UUID) -> WizardSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise WizardSessionNotFoundError(session_id)
        return session

    async def close(self, session_id: UUID) -> int:
        """Dispose the wizard and forget it; returns how many previews were released."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise WizardSessionNotFoundError(session_id)
        return await session.wizard.dispose()

    def discard(self, session_id: UUID) -> None:
        """Forget a finished wizard. Its previews were released when it closed."""
        if self._sessions.pop(session_id, None) is not None:
            logger.info("wizard_session_discarded", session_id=str(session_id))

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)
        logger.info("wizard_sessions_closed")
