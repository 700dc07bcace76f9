"""Unit tests for application use cases; collaborators are mocked."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from campus_bazar.application.interfaces.listing_creation_endpoint import ListingCreationRequest
from campus_bazar.application.use_cases.create_listing_wizard import (
    CreateListingWizard,
    NotAuthenticatedError,
)
from campus_bazar.application.use_cases.submit_listing import SubmissionPipeline, build_request
from campus_bazar.domain.commands.wizard_commands import (
    AddImages,
    Back,
    EditField,
    Next,
    RemoveImage,
    ReplaceImage,
    Submit,
)
from campus_bazar.domain.entities.image_attachment import SelectedFile
from campus_bazar.domain.entities.listing_draft import ListingDraft
from campus_bazar.domain.entities.user import CurrentUser
from campus_bazar.domain.enums.submission_state import SubmissionState
from campus_bazar.domain.enums.wizard_step import WizardStep
from campus_bazar.domain.errors.wizard_errors import WizardError
from campus_bazar.domain.events.domain_events import ListingSubmittedEvent
from campus_bazar.infrastructure.auth.file_auth_store import InMemoryAuthStore
from campus_bazar.infrastructure.previews.object_url_registry import ObjectUrlRegistry

SELLER = CurrentUser(id="user123", name="Alex Johnson", university="State University")
DESCRIPTION = "A" * 25


def _make_endpoint(listing_id: str = "item-abc123") -> MagicMock:
    endpoint = MagicMock()
    endpoint.create_listing = AsyncMock(return_value=listing_id)
    return endpoint


def _make_publisher() -> MagicMock:
    pub = MagicMock()
    pub.publish_many = AsyncMock()
    return pub


def _open_wizard(
    endpoint: MagicMock | None = None,
    previews: ObjectUrlRegistry | None = None,
    navigation: MagicMock | None = None,
    publisher: MagicMock | None = None,
    timeout: float | None = None,
) -> CreateListingWizard:
    return CreateListingWizard.open(
        auth=InMemoryAuthStore(SELLER),
        navigation=navigation or MagicMock(),
        preview_provider=previews or ObjectUrlRegistry(),
        endpoint=endpoint or _make_endpoint(),
        event_publisher=publisher or _make_publisher(),
        submission_timeout=timeout,
    )


async def _reach_review(wizard: CreateListingWizard) -> None:
    await wizard.dispatch(EditField("title", "Calc Book"))
    await wizard.dispatch(EditField("price", "30"))
    await wizard.dispatch(EditField("description", DESCRIPTION))
    await wizard.dispatch(Next())
    await wizard.dispatch(AddImages((SelectedFile(name="f1.jpg"),)))
    await wizard.dispatch(Next())
    await wizard.dispatch(Next())
    assert wizard.machine.current_step == WizardStep.REVIEW


def _valid_draft() -> ListingDraft:
    draft = ListingDraft.open_for(SELLER)
    draft.apply_edit("title", "  Calc Book ")
    draft.apply_edit("price", "30")
    draft.apply_edit("description", DESCRIPTION)
    return draft


class TestBuildRequest:
    def test_maps_draft_and_seller(self) -> None:
        draft = _valid_draft()
        request = build_request(draft, SELLER)
        assert request.title == "Calc Book"
        assert request.price == 30.0
        assert request.category == "Textbooks"
        assert request.condition == "Good"
        assert request.contact_method == "in-app"
        assert request.phone is None
        assert request.location == "State University"
        assert request.seller_id == "user123"
        assert request.seller_name == "Alex Johnson"
        assert request.seller_university == "State University"

    def test_phone_included_only_for_phone_contact(self) -> None:
        draft = _valid_draft()
        draft.apply_edit("phone", "(123) 456-7890")
        assert build_request(draft, SELLER).phone is None
        draft.apply_edit("contact_method", "phone")
        assert build_request(draft, SELLER).phone == "(123) 456-7890"


class TestSubmissionPipeline:
    @pytest.mark.asyncio
    async def test_returns_listing_id_on_success(self) -> None:
        endpoint = _make_endpoint("item-xyz")
        result = await SubmissionPipeline(endpoint).submit(_valid_draft(), SELLER)
        assert result.success is True
        assert result.listing_id == "item-xyz"
        endpoint.create_listing.assert_awaited_once()
        assert isinstance(endpoint.create_listing.await_args.args[0], ListingCreationRequest)

    @pytest.mark.asyncio
    async def test_endpoint_error_maps_to_submission_failed(self) -> None:
        endpoint = MagicMock()
        endpoint.create_listing = AsyncMock(side_effect=RuntimeError("boom"))
        pipeline = SubmissionPipeline(endpoint)

        result = await pipeline.submit(_valid_draft(), SELLER)

        assert result.success is False
        assert result.error == WizardError.SUBMISSION_FAILED
        assert pipeline.pending is False

    @pytest.mark.asyncio
    async def test_timeout_maps_to_submission_failed(self) -> None:
        async def _slow(request: ListingCreationRequest) -> str:
            await asyncio.sleep(1)
            return "item-late"

        endpoint = MagicMock()
        endpoint.create_listing = _slow
        result = await SubmissionPipeline(endpoint, timeout_seconds=0.01).submit(
            _valid_draft(), SELLER
        )
        assert result.error == WizardError.SUBMISSION_FAILED

    @pytest.mark.asyncio
    async def test_refuses_reentry_while_pending(self) -> None:
        release = asyncio.Event()

        async def _blocked(request: ListingCreationRequest) -> str:
            await release.wait()
            return "item-1"

        endpoint = MagicMock()
        endpoint.create_listing = AsyncMock(side_effect=_blocked)
        pipeline = SubmissionPipeline(endpoint)

        first = asyncio.create_task(pipeline.submit(_valid_draft(), SELLER))
        await asyncio.sleep(0)
        second = await pipeline.submit(_valid_draft(), SELLER)
        release.set()

        assert second.error == WizardError.SUBMISSION_PENDING
        assert (await first).listing_id == "item-1"
        assert endpoint.create_listing.await_count == 1


class TestOpenWizard:
    def test_prefills_location(self) -> None:
        wizard = _open_wizard()
        assert wizard.machine.draft.location == "State University"
        assert wizard.machine.current_step == WizardStep.DETAILS

    def test_redirects_anonymous_users(self) -> None:
        navigation = MagicMock()
        with pytest.raises(NotAuthenticatedError):
            CreateListingWizard.open(
                auth=InMemoryAuthStore(None),
                navigation=navigation,
                preview_provider=ObjectUrlRegistry(),
                endpoint=_make_endpoint(),
                event_publisher=_make_publisher(),
            )
        navigation.redirect_to_login.assert_called_once_with("/create-listing")


class TestWizardScenarios:
    @pytest.mark.asyncio
    async def test_empty_draft_stays_on_details(self) -> None:
        wizard = _open_wizard()
        result = await wizard.dispatch(Next())
        assert result.accepted is False
        assert result.step == WizardStep.DETAILS
        assert result.error == WizardError.EMPTY_TITLE
        assert result.error_message == "Please enter a title for your listing"

    @pytest.mark.asyncio
    async def test_valid_details_advance_to_photos(self) -> None:
        wizard = _open_wizard()
        await wizard.dispatch(EditField("title", "Calc Book"))
        await wizard.dispatch(EditField("price", 30))
        await wizard.dispatch(EditField("description", DESCRIPTION))
        result = await wizard.dispatch(Next())
        assert result.accepted is True
        assert result.step == WizardStep.PHOTOS

    @pytest.mark.asyncio
    async def test_photos_step_needs_an_image(self) -> None:
        wizard = _open_wizard()
        await wizard.dispatch(EditField("title", "Calc Book"))
        await wizard.dispatch(EditField("price", 30))
        await wizard.dispatch(EditField("description", DESCRIPTION))
        await wizard.dispatch(Next())

        blocked = await wizard.dispatch(Next())
        assert blocked.error == WizardError.NO_PHOTOS
        assert blocked.step == WizardStep.PHOTOS

        await wizard.dispatch(AddImages((SelectedFile(name="f1.jpg"),)))
        advanced = await wizard.dispatch(Next())
        assert advanced.step == WizardStep.CONTACT

    @pytest.mark.asyncio
    async def test_missing_phone_returns_to_contact(self) -> None:
        endpoint = _make_endpoint()
        wizard = _open_wizard(endpoint=endpoint)
        await _reach_review(wizard)
        await wizard.dispatch(EditField("contactMethod", "phone"))
        await wizard.dispatch(EditField("phone", ""))

        result = await wizard.dispatch(Submit())

        assert result.accepted is False
        assert result.error == WizardError.MISSING_PHONE
        assert result.step == WizardStep.CONTACT
        assert wizard.machine.submission_state == SubmissionState.IDLE
        endpoint.create_listing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_submission_disposes_and_navigates_once(self) -> None:
        previews = ObjectUrlRegistry()
        navigation = MagicMock()
        wizard = _open_wizard(
            endpoint=_make_endpoint("item-abc123"), previews=previews, navigation=navigation
        )
        await _reach_review(wizard)
        assert previews.live_count == 1

        result = await wizard.dispatch(Submit())

        assert result.accepted is True
        assert result.listing_id == "item-abc123"
        assert wizard.machine.current_step == WizardStep.SUBMITTED
        assert wizard.machine.submission_state == SubmissionState.SUCCEEDED
        assert previews.live_count == 0
        navigation.navigate_to_listing.assert_called_once_with("item-abc123")

    @pytest.mark.asyncio
    async def test_next_on_review_submits(self) -> None:
        endpoint = _make_endpoint()
        wizard = _open_wizard(endpoint=endpoint)
        await _reach_review(wizard)

        result = await wizard.dispatch(Next())

        assert result.listing_id == "item-abc123"
        endpoint.create_listing.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_submit_sends_images_in_order(self) -> None:
        endpoint = _make_endpoint()
        wizard = _open_wizard(endpoint=endpoint)
        await _reach_review(wizard)
        await wizard.dispatch(Back())
        await wizard.dispatch(Back())
        await wizard.dispatch(AddImages((SelectedFile(name="f2.jpg"), SelectedFile(name="f3.jpg"))))
        await wizard.dispatch(RemoveImage(0))
        expected = wizard.machine.images.uris
        await wizard.dispatch(Next())
        await wizard.dispatch(Next())

        await wizard.dispatch(Submit())

        request = endpoint.create_listing.await_args.args[0]
        assert request.images == expected
        assert len(request.images) == 2

    @pytest.mark.asyncio
    async def test_replaced_image_keeps_main_slot(self) -> None:
        previews = ObjectUrlRegistry()
        wizard = _open_wizard(previews=previews)
        await wizard.dispatch(AddImages((SelectedFile(name="a.jpg"), SelectedFile(name="b.jpg"))))
        old_main = wizard.machine.images.uris[0]

        result = await wizard.dispatch(ReplaceImage(0, SelectedFile(name="c.jpg")))

        assert result.accepted is True
        snapshot = wizard.snapshot()
        assert snapshot.main_image_uri == snapshot.image_uris[0] != old_main
        assert previews.resolve(old_main) is None
        assert previews.live_count == 2

    @pytest.mark.asyncio
    async def test_failed_submission_keeps_everything_for_retry(self) -> None:
        previews = ObjectUrlRegistry()
        navigation = MagicMock()
        endpoint = MagicMock()
        endpoint.create_listing = AsyncMock(side_effect=[RuntimeError("down"), "item-retry"])
        wizard = _open_wizard(endpoint=endpoint, previews=previews, navigation=navigation)
        await _reach_review(wizard)

        failed = await wizard.dispatch(Submit())

        assert failed.accepted is False
        assert failed.error == WizardError.SUBMISSION_FAILED
        assert wizard.machine.submission_state == SubmissionState.FAILED
        assert wizard.machine.draft.title == "Calc Book"
        assert previews.live_count == 1
        navigation.navigate_to_listing.assert_not_called()

        retried = await wizard.dispatch(Submit())

        assert retried.listing_id == "item-retry"
        navigation.navigate_to_listing.assert_called_once_with("item-retry")

    @pytest.mark.asyncio
    async def test_pending_submission_blocks_commands_and_duplicates(self) -> None:
        release = asyncio.Event()

        async def _blocked(request: ListingCreationRequest) -> str:
            await release.wait()
            return "item-abc123"

        endpoint = MagicMock()
        endpoint.create_listing = AsyncMock(side_effect=_blocked)
        navigation = MagicMock()
        wizard = _open_wizard(endpoint=endpoint, navigation=navigation)
        await _reach_review(wizard)

        first = asyncio.create_task(wizard.dispatch(Submit()))
        await asyncio.sleep(0)
        assert wizard.machine.submission_state == SubmissionState.PENDING

        duplicate = await wizard.dispatch(Submit())
        edit = await wizard.dispatch(EditField("title", "Changed"))
        back = await wizard.dispatch(Back())
        removal = await wizard.dispatch(RemoveImage(0))
        release.set()
        done = await first

        assert duplicate.error == WizardError.SUBMISSION_PENDING
        assert edit.error == WizardError.SUBMISSION_PENDING
        assert back.error == WizardError.SUBMISSION_PENDING
        assert removal.error == WizardError.SUBMISSION_PENDING
        assert done.listing_id == "item-abc123"
        assert endpoint.create_listing.await_count == 1
        navigation.navigate_to_listing.assert_called_once_with("item-abc123")
        request = endpoint.create_listing.await_args.args[0]
        assert request.title == "Calc Book"

    @pytest.mark.asyncio
    async def test_cancelled_submission_can_be_retried(self) -> None:
        started = asyncio.Event()

        async def _first_call_hangs(request: ListingCreationRequest) -> str:
            if endpoint.create_listing.await_count == 1:
                started.set()
                await asyncio.sleep(60)
            return "item-retry"

        endpoint = MagicMock()
        endpoint.create_listing = AsyncMock(side_effect=_first_call_hangs)
        navigation = MagicMock()
        wizard = _open_wizard(endpoint=endpoint, navigation=navigation)
        await _reach_review(wizard)

        task = asyncio.create_task(wizard.dispatch(Submit()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert wizard.machine.submission_state == SubmissionState.FAILED
        assert wizard.machine.last_error == WizardError.SUBMISSION_FAILED
        assert wizard.machine.current_step == WizardStep.REVIEW
        assert len(wizard.machine.images) == 1
        back = await wizard.dispatch(Back())
        assert back.accepted is True
        await wizard.dispatch(Next())

        retried = await wizard.dispatch(Submit())

        assert retried.listing_id == "item-retry"
        navigation.navigate_to_listing.assert_called_once_with("item-retry")

    @pytest.mark.asyncio
    async def test_publishes_submission_event(self) -> None:
        publisher = _make_publisher()
        wizard = _open_wizard(publisher=publisher)
        await _reach_review(wizard)

        await wizard.dispatch(Submit())

        published = [
            event
            for call in publisher.publish_many.await_args_list
            for event in call.args[0]
        ]
        assert any(isinstance(e, ListingSubmittedEvent) for e in published)


class TestDisposeWizard:
    @pytest.mark.asyncio
    async def test_dispose_releases_previews(self) -> None:
        previews = ObjectUrlRegistry()
        wizard = _open_wizard(previews=previews)
        await wizard.dispatch(AddImages((SelectedFile(name="a"), SelectedFile(name="b"))))

        assert await wizard.dispose() == 2

        assert previews.live_count == 0
        result = await wizard.dispatch(EditField("title", "x"))
        assert result.error == WizardError.SESSION_CLOSED

    @pytest.mark.asyncio
    async def test_no_navigation_if_disposed_while_pending(self) -> None:
        release = asyncio.Event()

        async def _blocked(request: ListingCreationRequest) -> str:
            await release.wait()
            return "item-late"

        endpoint = MagicMock()
        endpoint.create_listing = AsyncMock(side_effect=_blocked)
        navigation = MagicMock()
        previews = ObjectUrlRegistry()
        wizard = _open_wizard(endpoint=endpoint, navigation=navigation, previews=previews)
        await _reach_review(wizard)

        pending = asyncio.create_task(wizard.dispatch(Submit()))
        await asyncio.sleep(0)
        await wizard.dispose()
        release.set()
        result = await pending

        assert result.listing_id == "item-late"
        assert previews.live_count == 0
        navigation.navigate_to_listing.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_command_type_raises(self) -> None:
        wizard = _open_wizard()
        with pytest.raises(TypeError):
            await wizard.dispatch("next")  # type: ignore[arg-type]
