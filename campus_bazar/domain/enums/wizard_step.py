from enum import Enum


class WizardStep(int, Enum):
    """Stages of the create-listing wizard, in the order they are visited."""

    DETAILS = 1
    PHOTOS = 2
    CONTACT = 3
    REVIEW = 4
    SUBMITTED = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def is_terminal(self) -> bool:
        """Once submitted, the wizard accepts no further commands."""
        return self is WizardStep.SUBMITTED
