"""Shared fixtures for wizard tests."""
import pytest

from campus_bazar.domain.attachments.image_attachment_manager import ImageAttachmentManager
from campus_bazar.domain.entities.listing_draft import ListingDraft
from campus_bazar.domain.entities.user import CurrentUser
from campus_bazar.domain.state_machine.wizard_state_machine import WizardStateMachine
from campus_bazar.infrastructure.previews.object_url_registry import ObjectUrlRegistry


@pytest.fixture()
def seller() -> CurrentUser:
    return CurrentUser(id="user123", name="Alex Johnson", university="State University")


@pytest.fixture()
def previews() -> ObjectUrlRegistry:
    return ObjectUrlRegistry()


@pytest.fixture()
def images(previews: ObjectUrlRegistry) -> ImageAttachmentManager:
    return ImageAttachmentManager(previews)


@pytest.fixture()
def machine(images: ImageAttachmentManager, seller: CurrentUser) -> WizardStateMachine:
    return WizardStateMachine(images=images, draft=ListingDraft.open_for(seller))
