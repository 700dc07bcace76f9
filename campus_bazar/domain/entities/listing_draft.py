import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from campus_bazar.domain.entities.image_attachment import ImageAttachment
from campus_bazar.domain.entities.user import CurrentUser
from campus_bazar.domain.enums.listing_fields import Category, Condition, ContactMethod
from campus_bazar.domain.errors.wizard_errors import WizardError

# Browser form names -> draft attributes
_FIELD_ALIASES: dict[str, str] = {
    "title": "title",
    "description": "description",
    "price": "price",
    "category": "category",
    "condition": "condition",
    "contact_method": "contact_method",
    "contactMethod": "contact_method",
    "phone": "phone",
    "location": "location",
}

_CHOICE_FIELDS: dict[str, type[Enum]] = {
    "category": Category,
    "condition": Condition,
    "contact_method": ContactMethod,
}


def parse_price(raw: Any) -> Decimal | None:
    """Return ``raw`` as a finite Decimal, or None if it is not a number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or not math.isfinite(float(value)):
        return None
    return value


@dataclass
class ListingDraft:
    """
    The listing being assembled across the wizard steps.

    Field values are kept exactly as entered; nothing here validates them.
    ``images`` is a read-only view owned by the ImageAttachmentManager.
    """

    title: str = ""
    description: str = ""
    price: Any = ""
    category: Category = Category.TEXTBOOKS
    condition: Condition = Condition.GOOD
    contact_method: ContactMethod = ContactMethod.IN_APP
    phone: str = ""
    location: str = ""
    images: tuple[ImageAttachment, ...] = field(default_factory=tuple)

    @classmethod
    def open_for(cls, user: CurrentUser | None) -> "ListingDraft":
        return cls(location=user.university if user else "")

    def parsed_price(self) -> Decimal | None:
        return parse_price(self.price)

    def apply_edit(self, name: str, value: Any) -> WizardError | None:
        attr = _FIELD_ALIASES.get(name)
        if attr is None:
            return WizardError.UNKNOWN_FIELD

        choices = _CHOICE_FIELDS.get(attr)
        if choices is not None:
            try:
                value = choices(value)
            except ValueError:
                return WizardError.INVALID_CHOICE
        elif attr != "price":
            value = "" if value is None else str(value)

        setattr(self, attr, value)
        return None

    @staticmethod
    def editable_fields() -> frozenset[str]:
        return frozenset(_FIELD_ALIASES)
