from enum import Enum


class WizardError(str, Enum):
    """Every reason a wizard command can be refused.

    Validation failures are returned as values, never raised; callers show
    ``error.message`` to the user.
    """

    EMPTY_TITLE = "EMPTY_TITLE"
    INVALID_PRICE = "INVALID_PRICE"
    DESCRIPTION_TOO_SHORT = "DESCRIPTION_TOO_SHORT"
    NO_PHOTOS = "NO_PHOTOS"
    TOO_MANY_IMAGES = "TOO_MANY_IMAGES"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    MISSING_PHONE = "MISSING_PHONE"
    MISSING_LOCATION = "MISSING_LOCATION"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"

    # Command-surface errors
    SUBMISSION_PENDING = "SUBMISSION_PENDING"
    SESSION_CLOSED = "SESSION_CLOSED"
    UNKNOWN_FIELD = "UNKNOWN_FIELD"
    INVALID_CHOICE = "INVALID_CHOICE"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[WizardError, str] = {
    WizardError.EMPTY_TITLE: "Please enter a title for your listing",
    WizardError.INVALID_PRICE: "Please enter a valid price",
    WizardError.DESCRIPTION_TOO_SHORT: (
        "Please provide a detailed description (at least 20 characters)"
    ),
    WizardError.NO_PHOTOS: "Please add at least one photo of your item",
    WizardError.TOO_MANY_IMAGES: "You can upload a maximum of 5 images",
    WizardError.INDEX_OUT_OF_RANGE: "That photo is no longer attached",
    WizardError.MISSING_PHONE: "Please enter a phone number buyers can call",
    WizardError.MISSING_LOCATION: "Please enter where buyers can meet you",
    WizardError.SUBMISSION_FAILED: "Failed to create listing. Please try again.",
    WizardError.SUBMISSION_PENDING: "Your listing is being published, please wait",
    WizardError.SESSION_CLOSED: "This listing form is no longer active",
    WizardError.UNKNOWN_FIELD: "That field is not part of a listing",
    WizardError.INVALID_CHOICE: "Please choose one of the available options",
}
