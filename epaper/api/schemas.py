from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from epaper.domain.entities import (
    Edition,
    EditionLanguage,
    EditionStatus,
    MoveDirection,
    Page,
    User,
    UserRole,
)
from epaper.rules.models import CatalogRules
from epaper.services.publish import PublishOutput


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class LoginRequest(ApiModel):
    email: str = ""
    password: str = ""
    role: UserRole = "Editor"


class LoginResponse(ApiModel):
    user: User
    token: str


class EditionSummary(ApiModel):
    id: str
    title: str
    language: EditionLanguage
    status: EditionStatus
    created_by: str
    last_modified: datetime
    page_count: int
    actions: list[str]


class CreateEditionRequest(ApiModel):
    title: str = ""


class MoveRequest(ApiModel):
    direction: MoveDirection


class AddSectionRequest(ApiModel):
    type: str
    title: str


class AddBlockRequest(ApiModel):
    kind: str = Field(pattern="^(article|image|ad)$")


class TextAssistRequest(ApiModel):
    content: str


class ImageAssistRequest(ApiModel):
    description: str


class ThumbnailRequest(ApiModel):
    data_url: str


class CompressRequest(ApiModel):
    data: str = Field(description="Base64-encoded image bytes")
    max_width: int | None = Field(default=None, gt=0)
    quality: float | None = Field(default=None, gt=0, le=1)


class DataUrlResponse(ApiModel):
    data_url: str


class ExportedImageResponse(ApiModel):
    filename: str
    data_url: str


class PublishErrorItem(ApiModel):
    code: str
    message: str
    field: str


class PublishResponse(ApiModel):
    success: bool
    status: EditionStatus | None = None
    message: str
    edition: Edition | None = None
    errors: list[PublishErrorItem] = Field(default_factory=list)

    @classmethod
    def from_output(cls, output: PublishOutput) -> "PublishResponse":
        return cls(
            success=output.success,
            status=output.status,
            message=output.message,
            edition=output.edition,
            errors=[
                PublishErrorItem(code=e.code, message=e.message, field=e.field)
                for e in output.errors
            ],
        )


class WorkspaceState(ApiModel):
    user: User | None = None
    edition: Edition | None = None
    page: Page | None = None
    error: str | None = None


class AssistResponse(ApiModel):
    applied: bool
    error: str | None = None
    page: Page | None = None


UpdatePayload = dict[str, Any]


class CatalogResponse(ApiModel):
    """Option sets for the editor pickers."""

    catalog: CatalogRules
    text_models: list[str]
    image_models: list[str]
