import asyncio
from dataclasses import dataclass

import structlog

from campus_bazar.application.interfaces.listing_creation_endpoint import (
    ListingCreationEndpoint,
    ListingCreationRequest,
)
from campus_bazar.domain.entities.listing_draft import ListingDraft
from campus_bazar.domain.entities.user import CurrentUser
from campus_bazar.domain.enums.listing_fields import ContactMethod
from campus_bazar.domain.errors.wizard_errors import WizardError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    listing_id: str | None = None
    error: WizardError | None = None


def build_request(draft: ListingDraft, seller: CurrentUser) -> ListingCreationRequest:
    price = draft.parsed_price()
    if price is None:
        raise ValueError("Cannot build a listing request from a draft without a valid price.")

    return ListingCreationRequest(
        title=draft.title.strip(),
        description=draft.description.strip(),
        price=float(price),
        category=draft.category.value,
        condition=draft.condition.value,
        images=[attachment.uri for attachment in draft.images],
        contact_method=draft.contact_method.value,
        phone=draft.phone.strip() if draft.contact_method == ContactMethod.PHONE else None,
        location=draft.location.strip(),
        seller_id=seller.id,
        seller_name=seller.name,
        seller_university=seller.university,
    )


class SubmissionPipeline:
    """
    Use case: hand a validated draft to the listing-creation endpoint.

    At most one call is in flight per pipeline; a second submit while one is
    pending returns SUBMISSION_PENDING without touching the endpoint. Every
    endpoint failure, including a timeout, comes back as SUBMISSION_FAILED.
    """

    def __init__(self, endpoint: ListingCreationEndpoint, timeout_seconds: float | None = None) -> None:
        self._endpoint = endpoint
        self._timeout = timeout_seconds
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    async def submit(self, draft: ListingDraft, seller: CurrentUser) -> SubmissionResult:
        if self._pending:
            logger.warning("submission_already_pending", seller_id=seller.id)
            return SubmissionResult(success=False, error=WizardError.SUBMISSION_PENDING)

        request = build_request(draft, seller)
        self._pending = True
        try:
            listing_id = await asyncio.wait_for(
                self._endpoint.create_listing(request), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.error("listing_creation_timed_out", seller_id=seller.id, timeout=self._timeout)
            return SubmissionResult(success=False, error=WizardError.SUBMISSION_FAILED)
        except Exception:
            logger.exception("listing_creation_failed", seller_id=seller.id, title=request.title)
            return SubmissionResult(success=False, error=WizardError.SUBMISSION_FAILED)
        finally:
            self._pending = False

        logger.info(
            "listing_created",
            listing_id=listing_id,
            seller_id=seller.id,
            image_count=len(request.images),
        )
        return SubmissionResult(success=True, listing_id=listing_id)
