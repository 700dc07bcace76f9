import asyncio
from dataclasses import dataclass
from typing import Any
from uuid import UUID

import structlog

from campus_bazar.application.interfaces.auth_collaborator import AuthCollaborator
from campus_bazar.application.interfaces.event_publisher import EventPublisher
from campus_bazar.application.interfaces.listing_creation_endpoint import ListingCreationEndpoint
from campus_bazar.application.interfaces.navigation_collaborator import NavigationCollaborator
from campus_bazar.application.use_cases.submit_listing import SubmissionPipeline
from campus_bazar.domain.attachments.image_attachment_manager import (
    MAX_IMAGES,
    ImageAttachmentManager,
)
from campus_bazar.domain.attachments.preview_provider import PreviewProvider
from campus_bazar.domain.commands.wizard_commands import (
    AddImages,
    Back,
    EditField,
    Next,
    RemoveImage,
    ReplaceImage,
    Submit,
    WizardCommand,
)
from campus_bazar.domain.entities.listing_draft import ListingDraft
from campus_bazar.domain.entities.user import CurrentUser
from campus_bazar.domain.enums.submission_state import SubmissionState
from campus_bazar.domain.enums.wizard_step import WizardStep
from campus_bazar.domain.errors.wizard_errors import WizardError
from campus_bazar.domain.state_machine.wizard_state_machine import WizardStateMachine

logger = structlog.get_logger(__name__)

CREATE_LISTING_PATH = "/create-listing"


class NotAuthenticatedError(Exception):
    def __init__(self, return_to: str) -> None:
        self.return_to = return_to
        super().__init__(f"Sign in required to open {return_to}.")


@dataclass(frozen=True)
class CommandResult:
    accepted: bool
    step: WizardStep
    error: WizardError | None = None
    listing_id: str | None = None

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error else None


@dataclass(frozen=True)
class WizardSnapshot:
    """Everything the stepper, the form and the review pane need to render."""

    session_id: UUID
    step: WizardStep
    completed_steps: list[WizardStep]
    draft: dict[str, Any]
    image_uris: list[str]
    main_image_uri: str | None
    max_images: int
    last_error: WizardError | None
    submission_state: SubmissionState
    listing_id: str | None
    seller: CurrentUser
    closed: bool = False


class CreateListingWizard:
    """
    Use case: one seller's pass through the four-step create-listing form.

    Commands go through dispatch(), which returns a CommandResult and never
    raises for validation problems. A successful submission releases every
    image preview and navigates to the new listing exactly once.
    """

    def __init__(
        self,
        machine: WizardStateMachine,
        pipeline: SubmissionPipeline,
        seller: CurrentUser,
        navigation: NavigationCollaborator,
        event_publisher: EventPublisher,
    ) -> None:
        self._machine = machine
        self._pipeline = pipeline
        self._seller = seller
        self._navigation = navigation
        self._event_publisher = event_publisher

    @classmethod
    def open(
        cls,
        *,
        auth: AuthCollaborator,
        navigation: NavigationCollaborator,
        preview_provider: PreviewProvider,
        endpoint: ListingCreationEndpoint,
        event_publisher: EventPublisher,
        max_images: int = MAX_IMAGES,
        submission_timeout: float | None = None,
    ) -> "CreateListingWizard":
        user = auth.current_user()
        if user is None:
            navigation.redirect_to_login(CREATE_LISTING_PATH)
            raise NotAuthenticatedError(CREATE_LISTING_PATH)

        machine = WizardStateMachine(
            images=ImageAttachmentManager(preview_provider, max_images=max_images),
            draft=ListingDraft.open_for(user),
        )
        logger.info("wizard_opened", session_id=str(machine.session_id), seller_id=user.id)
        return cls(
            machine,
            SubmissionPipeline(endpoint, timeout_seconds=submission_timeout),
            user,
            navigation,
            event_publisher,
        )

    @property
    def session_id(self) -> UUID:
        return self._machine.session_id

    @property
    def machine(self) -> WizardStateMachine:
        return self._machine

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def dispatch(self, command: WizardCommand) -> CommandResult:
        if isinstance(command, EditField):
            error = self._machine.edit_field(command.name, command.value)
            result = self._result(error is None, error)
        elif isinstance(command, AddImages):
            attached = self._machine.add_images(list(command.sources))
            result = self._result(attached.success, attached.error)
        elif isinstance(command, RemoveImage):
            removed = self._machine.remove_image(command.index)
            result = self._result(removed.success, removed.error)
        elif isinstance(command, ReplaceImage):
            replaced = self._machine.replace_image(command.index, command.source)
            result = self._result(replaced.success, replaced.error)
        elif isinstance(command, Next):
            step = self._machine.next()
            if step.submit_requested:
                return await self.submit()
            result = self._result(step.success, step.error)
        elif isinstance(command, Back):
            step = self._machine.back()
            result = self._result(step.success, step.error)
        elif isinstance(command, Submit):
            return await self.submit()
        else:
            raise TypeError(f"Unsupported wizard command: {type(command).__name__}")

        if not result.accepted:
            logger.info(
                "wizard_command_rejected",
                session_id=str(self.session_id),
                command=type(command).__name__,
                step=result.step.name,
                error=result.error.value if result.error else None,
            )
        await self._publish_events()
        return result

    async def submit(self) -> CommandResult:
        step = self._machine.begin_submission()
        if not step.submit_requested:
            await self._publish_events()
            return self._result(step.success, step.error)

        try:
            outcome = await self._pipeline.submit(self._machine.draft, self._seller)
        except asyncio.CancelledError:
            # A cancelled call counts as a failed one; the draft stays for a retry
            logger.warning("submission_cancelled", session_id=str(self.session_id))
            self._machine.fail_submission()
            await self._publish_events()
            raise
        torn_down = self._machine.disposed

        if not outcome.success or outcome.listing_id is None:
            self._machine.fail_submission(outcome.error or WizardError.SUBMISSION_FAILED)
            await self._publish_events()
            return self._result(False, self._machine.last_error)

        listing_id = outcome.listing_id
        self._machine.complete_submission(listing_id, seller_id=self._seller.id)
        self._machine.dispose()
        await self._publish_events()

        if not torn_down:
            self._navigation.navigate_to_listing(listing_id)
        else:
            logger.info(
                "submission_resolved_after_dispose",
                session_id=str(self.session_id),
                listing_id=listing_id,
            )
        return self._result(True, None, listing_id=listing_id)

    async def dispose(self) -> int:
        """Tear the wizard down (cancel, or the page going away)."""
        released = self._machine.dispose()
        logger.info("wizard_disposed", session_id=str(self.session_id), released_images=released)
        await self._publish_events()
        return released

    # -------------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------------

    def snapshot(self) -> WizardSnapshot:
        machine = self._machine
        draft = machine.draft
        main_image = machine.images.main_image
        return WizardSnapshot(
            session_id=machine.session_id,
            step=machine.current_step,
            completed_steps=[s for s in WizardStep if s < machine.current_step],
            draft={
                "title": draft.title,
                "description": draft.description,
                "price": draft.price,
                "category": draft.category.value,
                "condition": draft.condition.value,
                "contact_method": draft.contact_method.value,
                "phone": draft.phone,
                "location": draft.location,
            },
            image_uris=machine.images.uris,
            main_image_uri=main_image.uri if main_image else None,
            max_images=machine.images.max_images,
            last_error=machine.last_error,
            submission_state=machine.submission_state,
            listing_id=machine.listing_id,
            seller=self._seller,
            closed=machine.closed,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _result(
        self, accepted: bool, error: WizardError | None, listing_id: str | None = None
    ) -> CommandResult:
        return CommandResult(
            accepted=accepted,
            step=self._machine.current_step,
            error=error,
            listing_id=listing_id,
        )

    async def _publish_events(self) -> None:
        await self._event_publisher.publish_many(self._machine.collect_events())
