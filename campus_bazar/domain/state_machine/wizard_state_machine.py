from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from campus_bazar.domain.attachments.image_attachment_manager import (
    AttachmentResult,
    ImageAttachmentManager,
)
from campus_bazar.domain.entities.listing_draft import ListingDraft
from campus_bazar.domain.enums.submission_state import SubmissionState
from campus_bazar.domain.enums.wizard_step import WizardStep
from campus_bazar.domain.errors.wizard_errors import WizardError
from campus_bazar.domain.events.domain_events import (
    DomainEvent,
    ListingSubmittedEvent,
    SubmissionFailedEvent,
    WizardDisposedEvent,
    WizardStepChangedEvent,
)
from campus_bazar.domain.validation.validation_rules import validate_all, validate_step


# Mapping of valid transitions: from_step -> set of allowed to_steps
STEP_TRANSITIONS: dict[WizardStep, frozenset[WizardStep]] = {
    WizardStep.DETAILS: frozenset({WizardStep.PHOTOS}),
    WizardStep.PHOTOS: frozenset({WizardStep.DETAILS, WizardStep.CONTACT}),
    WizardStep.CONTACT: frozenset({WizardStep.PHOTOS, WizardStep.REVIEW}),
    # Review can fall back to any earlier step when submission re-validation fails
    WizardStep.REVIEW: frozenset(
        {WizardStep.DETAILS, WizardStep.PHOTOS, WizardStep.CONTACT, WizardStep.SUBMITTED}
    ),
    # Terminal: no outgoing transitions
    WizardStep.SUBMITTED: frozenset(),
}


@dataclass(frozen=True)
class StepResult:
    success: bool
    from_step: WizardStep
    to_step: WizardStep
    error: WizardError | None = None
    submit_requested: bool = False


class InvalidStepTransitionError(Exception):
    """Raised when code forces a step change the wizard does not allow."""

    def __init__(self, from_step: WizardStep, to_step: WizardStep) -> None:
        self.from_step = from_step
        self.to_step = to_step
        super().__init__(
            f"Invalid transition from {from_step.name} to {to_step.name}. "
            f"Allowed transitions: {sorted(s.name for s in STEP_TRANSITIONS.get(from_step, frozenset()))}"
        )


def can_transition(from_step: WizardStep, to_step: WizardStep) -> bool:
    if from_step.is_terminal:
        return False
    return to_step in STEP_TRANSITIONS.get(from_step, frozenset())


@dataclass
class WizardStateMachine:
    """
    Current step, draft and submission progress of one create-listing wizard.

    Every mutating operation is refused while a submission is pending or once
    the wizard is closed; refusals leave all state untouched. Validation
    failures are returned, never raised. Emits domain events on step changes
    and submission outcomes, which callers collect and publish.
    """

    images: ImageAttachmentManager
    draft: ListingDraft = field(default_factory=ListingDraft)
    session_id: UUID = field(default_factory=uuid4)
    current_step: WizardStep = WizardStep.DETAILS
    last_error: WizardError | None = None
    submission_state: SubmissionState = SubmissionState.IDLE
    listing_id: str | None = None
    disposed: bool = False

    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.draft.images = self.images.attachments

    @property
    def closed(self) -> bool:
        return self.disposed or self.current_step.is_terminal

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def rejection(self) -> WizardError | None:
        """Why a mutating command cannot run right now, if it cannot."""
        if self.closed:
            return WizardError.SESSION_CLOSED
        if self.submission_state == SubmissionState.PENDING:
            return WizardError.SUBMISSION_PENDING
        return None

    def _refused(self, error: WizardError) -> StepResult:
        return StepResult(
            success=False, from_step=self.current_step, to_step=self.current_step, error=error
        )

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def next(self) -> StepResult:
        refused = self.rejection()
        if refused:
            return self._refused(refused)

        if self.current_step == WizardStep.REVIEW:
            return StepResult(
                success=True,
                from_step=self.current_step,
                to_step=self.current_step,
                submit_requested=True,
            )

        self.last_error = None
        error = validate_step(self.draft, self.current_step)
        if error is not None:
            self.last_error = error
            return self._refused(error)

        from_step = self.current_step
        self._move_to(WizardStep(from_step + 1), triggered_by="next")
        return StepResult(success=True, from_step=from_step, to_step=self.current_step)

    def back(self) -> StepResult:
        refused = self.rejection()
        if refused:
            return self._refused(refused)

        from_step = self.current_step
        if from_step != WizardStep.DETAILS:
            self._move_to(WizardStep(from_step - 1), triggered_by="back")
        return StepResult(success=True, from_step=from_step, to_step=self.current_step)

    # -------------------------------------------------------------------------
    # Draft edits
    # -------------------------------------------------------------------------

    def edit_field(self, name: str, value: Any) -> WizardError | None:
        """Apply an edit as-is; never validates or advances."""
        return self.rejection() or self.draft.apply_edit(name, value)

    def add_images(self, sources: Sequence[Any]) -> AttachmentResult:
        refused = self.rejection()
        if refused:
            return AttachmentResult(success=False, count=len(self.images), error=refused)
        return self._sync_images(self.images.add_images(sources))

    def remove_image(self, index: int) -> AttachmentResult:
        refused = self.rejection()
        if refused:
            return AttachmentResult(success=False, count=len(self.images), error=refused)
        return self._sync_images(self.images.remove_image(index))

    def replace_image(self, index: int, source: Any) -> AttachmentResult:
        refused = self.rejection()
        if refused:
            return AttachmentResult(success=False, count=len(self.images), error=refused)
        return self._sync_images(self.images.replace_image(index, source))

    def _sync_images(self, result: AttachmentResult) -> AttachmentResult:
        self.draft.images = self.images.attachments
        if result.error is not None:
            self.last_error = result.error
        return result

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def begin_submission(self) -> StepResult:
        """
        Re-validate every step before handing the draft to the pipeline.

        Before the review step this behaves like next(). On a validation
        failure the wizard returns to the first failing step; on success it
        enters PENDING and reports submit_requested.
        """
        refused = self.rejection()
        if refused:
            return self._refused(refused)
        if self.current_step != WizardStep.REVIEW:
            return self.next()

        self.last_error = None
        failure = validate_all(self.draft)
        if failure is not None:
            step, error = failure
            from_step = self.current_step
            self._move_to(step, triggered_by="submit_validation")
            self.last_error = error
            return StepResult(success=False, from_step=from_step, to_step=step, error=error)

        self.submission_state = SubmissionState.PENDING
        return StepResult(
            success=True,
            from_step=self.current_step,
            to_step=self.current_step,
            submit_requested=True,
        )

    def complete_submission(self, listing_id: str, seller_id: str) -> None:
        self._require_pending(WizardStep.SUBMITTED)
        self.listing_id = listing_id
        self.submission_state = SubmissionState.SUCCEEDED
        self._events.append(
            ListingSubmittedEvent(
                session_id=self.session_id,
                listing_id=listing_id,
                seller_id=seller_id,
                image_count=len(self.images),
            )
        )
        self._move_to(WizardStep.SUBMITTED, triggered_by="submission")

    def fail_submission(self, error: WizardError = WizardError.SUBMISSION_FAILED) -> None:
        """Record a failed creation call; the draft and images stay for a retry."""
        self._require_pending(self.current_step)
        self.submission_state = SubmissionState.FAILED
        self.last_error = error
        self._events.append(SubmissionFailedEvent(session_id=self.session_id, error=error))

    def _require_pending(self, to_step: WizardStep) -> None:
        if self.submission_state != SubmissionState.PENDING:
            raise InvalidStepTransitionError(self.current_step, to_step)

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def dispose(self) -> int:
        """Close the wizard and release every image preview it holds."""
        released = len(self.images)
        self.images.dispose_all()
        self.draft.images = ()
        if not self.closed:
            self._events.append(
                WizardDisposedEvent(
                    session_id=self.session_id, step=self.current_step, released_images=released
                )
            )
        self.disposed = True
        return released

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _move_to(self, to_step: WizardStep, triggered_by: str) -> None:
        from_step = self.current_step
        if from_step == to_step:
            return
        if not can_transition(from_step, to_step):
            raise InvalidStepTransitionError(from_step, to_step)
        self.current_step = to_step
        self._events.append(
            WizardStepChangedEvent(
                session_id=self.session_id,
                from_step=from_step,
                to_step=to_step,
                triggered_by=triggered_by,
            )
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events
