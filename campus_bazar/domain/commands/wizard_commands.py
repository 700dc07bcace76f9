"""Everything a user can do to a create-listing wizard, as plain values."""
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class EditField:
    name: str
    value: Any


@dataclass(frozen=True)
class AddImages:
    sources: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RemoveImage:
    index: int


@dataclass(frozen=True)
class ReplaceImage:
    index: int
    source: Any


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Submit:
    pass


WizardCommand = Union[EditField, AddImages, RemoveImage, ReplaceImage, Next, Back, Submit]
