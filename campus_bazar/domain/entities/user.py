from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """The signed-in student, as seen (read-only) by the listing wizard."""

    id: str
    name: str
    university: str
    email: str | None = None
