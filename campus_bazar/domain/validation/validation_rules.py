"""
Per-step checks for a ListingDraft.

Each rule returns the first violated WizardError in its declared order, or
None when the draft passes. Rules never modify the draft.
"""
from collections.abc import Callable

from campus_bazar.domain.entities.listing_draft import ListingDraft
from campus_bazar.domain.enums.listing_fields import ContactMethod
from campus_bazar.domain.enums.wizard_step import WizardStep
from campus_bazar.domain.errors.wizard_errors import WizardError

MIN_DESCRIPTION_LENGTH = 20

Rule = Callable[[ListingDraft], WizardError | None]


def validate_details(
    draft: ListingDraft, min_description_length: int = MIN_DESCRIPTION_LENGTH
) -> WizardError | None:
    if not draft.title.strip():
        return WizardError.EMPTY_TITLE
    price = draft.parsed_price()
    if price is None or price <= 0:
        return WizardError.INVALID_PRICE
    if len(draft.description.strip()) < min_description_length:
        return WizardError.DESCRIPTION_TOO_SHORT
    return None


def validate_photos(draft: ListingDraft) -> WizardError | None:
    if not draft.images:
        return WizardError.NO_PHOTOS
    return None


def validate_contact(draft: ListingDraft) -> WizardError | None:
    """Only consulted at submission; never blocks leaving the contact step."""
    if draft.contact_method == ContactMethod.PHONE and not draft.phone.strip():
        return WizardError.MISSING_PHONE
    if not draft.location.strip():
        return WizardError.MISSING_LOCATION
    return None


# Rules that block next() from a step
STEP_RULES: dict[WizardStep, Rule] = {
    WizardStep.DETAILS: validate_details,
    WizardStep.PHOTOS: validate_photos,
}

# Rules re-run on submit(), in order, with the step to return to on failure
SUBMISSION_RULES: tuple[tuple[WizardStep, Rule], ...] = (
    (WizardStep.DETAILS, validate_details),
    (WizardStep.PHOTOS, validate_photos),
    (WizardStep.CONTACT, validate_contact),
)


def validate_step(draft: ListingDraft, step: WizardStep) -> WizardError | None:
    rule = STEP_RULES.get(step)
    return rule(draft) if rule else None


def validate_all(draft: ListingDraft) -> tuple[WizardStep, WizardError] | None:
    """Return the first failing step and its error, or None if all pass."""
    for step, rule in SUBMISSION_RULES:
        error = rule(draft)
        if error is not None:
            return step, error
    return None
