from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from campus_bazar.domain.enums.wizard_step import WizardStep
from campus_bazar.domain.errors.wizard_errors import WizardError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class WizardStepChangedEvent(DomainEvent):
    """Published whenever the wizard moves between steps."""

    session_id: UUID = field(default_factory=uuid4)
    from_step: WizardStep = WizardStep.DETAILS
    to_step: WizardStep = WizardStep.DETAILS
    triggered_by: str = ""


@dataclass(frozen=True)
class ListingSubmittedEvent(DomainEvent):
    """Published when the listing-creation call accepts the draft."""

    session_id: UUID = field(default_factory=uuid4)
    listing_id: str = ""
    seller_id: str = ""
    image_count: int = 0


@dataclass(frozen=True)
class SubmissionFailedEvent(DomainEvent):
    session_id: UUID = field(default_factory=uuid4)
    error: WizardError = WizardError.SUBMISSION_FAILED


@dataclass(frozen=True)
class WizardDisposedEvent(DomainEvent):
    """Published when a wizard is torn down without being submitted."""

    session_id: UUID = field(default_factory=uuid4)
    step: WizardStep = WizardStep.DETAILS
    released_images: int = 0
