from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from campus_bazar.api.schemas.auth_schemas import UserResponse
from campus_bazar.application.use_cases.create_listing_wizard import (
    CommandResult,
    WizardSnapshot,
)
from campus_bazar.domain.commands.wizard_commands import (
    AddImages,
    Back,
    EditField,
    Next,
    RemoveImage,
    ReplaceImage,
    Submit,
    WizardCommand,
)
from campus_bazar.domain.entities.image_attachment import SelectedFile
from campus_bazar.domain.enums.submission_state import SubmissionState
from campus_bazar.domain.errors.wizard_errors import WizardError

CommandType = Literal[
    "edit_field", "add_images", "remove_image", "replace_image", "next", "back", "submit"
]


class SelectedFileSchema(BaseModel):
    name: str
    content_type: str = "image/jpeg"
    size: int = Field(default=0, ge=0)

    def to_selected_file(self) -> SelectedFile:
        return SelectedFile(name=self.name, content_type=self.content_type, size=self.size)


class WizardCommandRequest(BaseModel):
    """One user action on the form, tagged by ``type``."""

    type: CommandType
    name: str | None = None
    value: Any = None
    files: list[SelectedFileSchema] = Field(default_factory=list)
    index: int | None = None

    @model_validator(mode="after")
    def _check_arguments(self) -> "WizardCommandRequest":
        if self.type == "edit_field" and not self.name:
            raise ValueError("edit_field requires 'name'")
        if self.type in ("remove_image", "replace_image") and self.index is None:
            raise ValueError(f"{self.type} requires 'index'")
        if self.type == "replace_image" and len(self.files) != 1:
            raise ValueError("replace_image requires exactly one file")
        return self

    def to_command(self) -> WizardCommand:
        if self.type == "edit_field":
            return EditField(name=self.name or "", value=self.value)
        if self.type == "add_images":
            return AddImages(sources=tuple(f.to_selected_file() for f in self.files))
        if self.type == "remove_image":
            return RemoveImage(index=self.index if self.index is not None else -1)
        if self.type == "replace_image":
            return ReplaceImage(
                index=self.index if self.index is not None else -1,
                source=self.files[0].to_selected_file(),
            )
        if self.type == "next":
            return Next()
        if self.type == "back":
            return Back()
        return Submit()


class WizardResponse(BaseModel):
    session_id: UUID
    step: int
    step_label: str
    completed_steps: list[int]
    draft: dict[str, Any]
    images: list[str]
    main_image: str | None = None
    max_images: int
    last_error: WizardError | None = None
    error_message: str | None = None
    submission_state: SubmissionState
    listing_id: str | None = None
    seller: UserResponse
    closed: bool

    @classmethod
    def from_snapshot(cls, snapshot: WizardSnapshot) -> "WizardResponse":
        draft = dict(snapshot.draft)
        draft["price"] = None if draft["price"] is None else str(draft["price"])
        return cls(
            session_id=snapshot.session_id,
            step=snapshot.step.value,
            step_label=snapshot.step.label,
            completed_steps=[s.value for s in snapshot.completed_steps],
            draft=draft,
            images=snapshot.image_uris,
            main_image=snapshot.main_image_uri,
            max_images=snapshot.max_images,
            last_error=snapshot.last_error,
            error_message=snapshot.last_error.message if snapshot.last_error else None,
            submission_state=snapshot.submission_state,
            listing_id=snapshot.listing_id,
            seller=UserResponse.from_user(snapshot.seller),
            closed=snapshot.closed,
        )


class CommandResponse(BaseModel):
    accepted: bool
    error: WizardError | None = None
    error_message: str | None = None
    listing_id: str | None = None
    redirect_to: str | None = None
    wizard: WizardResponse

    @classmethod
    def from_result(
        cls, result: CommandResult, snapshot: WizardSnapshot, redirect_to: str | None
    ) -> "CommandResponse":
        return cls(
            accepted=result.accepted,
            error=result.error,
            error_message=result.error_message,
            listing_id=result.listing_id,
            redirect_to=redirect_to,
            wizard=WizardResponse.from_snapshot(snapshot),
        )


class DisposeResponse(BaseModel):
    released_images: int
