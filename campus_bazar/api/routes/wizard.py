from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from campus_bazar.api.dependencies import (
    get_auth_store,
    get_event_publisher,
    get_listing_endpoint,
    get_preview_provider,
    get_session_registry,
)
from campus_bazar.api.schemas.wizard_schemas import (
    CommandResponse,
    DisposeResponse,
    WizardCommandRequest,
    WizardResponse,
)
from campus_bazar.application.interfaces.auth_collaborator import AuthCollaborator
from campus_bazar.application.interfaces.event_publisher import EventPublisher
from campus_bazar.application.interfaces.listing_creation_endpoint import ListingCreationEndpoint
from campus_bazar.application.use_cases.create_listing_wizard import NotAuthenticatedError
from campus_bazar.config import settings
from campus_bazar.domain.attachments.preview_provider import PreviewProvider
from campus_bazar.infrastructure.navigation.recording_navigator import RecordingNavigator
from campus_bazar.infrastructure.sessions.wizard_session_registry import (
    WizardSession,
    WizardSessionNotFoundError,
    WizardSessionRegistry,
)

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/wizard", tags=["wizard"])


def _get_session(registry: WizardSessionRegistry, session_id: UUID) -> WizardSession:
    try:
        return registry.get(session_id)
    except WizardSessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("", response_model=WizardResponse, status_code=status.HTTP_201_CREATED)
async def open_wizard(
    registry: WizardSessionRegistry = Depends(get_session_registry),
    auth: AuthCollaborator = Depends(get_auth_store),
    previews: PreviewProvider = Depends(get_preview_provider),
    endpoint: ListingCreationEndpoint = Depends(get_listing_endpoint),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> WizardResponse:
    """Start a new listing. Anonymous visitors are sent to the login page."""
    navigator = RecordingNavigator()
    try:
        session = registry.open(
            auth=auth,
            preview_provider=previews,
            endpoint=endpoint,
            event_publisher=publisher,
            max_images=settings.max_images,
            submission_timeout=settings.submission_timeout_seconds,
            navigator=navigator,
        )
    except NotAuthenticatedError as exc:
        logger.info("wizard_open_refused", redirect_to=navigator.location)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": str(exc), "redirect_to": navigator.location},
        )
    return WizardResponse.from_snapshot(session.wizard.snapshot())


@router.get("/{session_id}", response_model=WizardResponse)
async def get_wizard(
    session_id: UUID,
    registry: WizardSessionRegistry = Depends(get_session_registry),
) -> WizardResponse:
    return WizardResponse.from_snapshot(_get_session(registry, session_id).wizard.snapshot())


@router.post("/{session_id}/commands", response_model=CommandResponse)
async def dispatch_command(
    session_id: UUID,
    body: WizardCommandRequest,
    registry: WizardSessionRegistry = Depends(get_session_registry),
) -> CommandResponse:
    """Apply one form action. Refused actions still return 200 with ``accepted: false``."""
    session = _get_session(registry, session_id)
    result = await session.wizard.dispatch(body.to_command())
    redirect_to = None
    if result.listing_id:
        redirect_to = session.navigator.location
        registry.discard(session_id)
    return CommandResponse.from_result(result, session.wizard.snapshot(), redirect_to)


@router.delete("/{session_id}", response_model=DisposeResponse)
async def dispose_wizard(
    session_id: UUID,
    registry: WizardSessionRegistry = Depends(get_session_registry),
) -> DisposeResponse:
    try:
        released = await registry.close(session_id)
    except WizardSessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return DisposeResponse(released_images=released)
