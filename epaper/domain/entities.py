from datetime import UTC, datetime
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# --- Enums / Literals ---
BlockType = Literal["article", "image", "ad"]
TextAlignment = Literal["left", "center", "right", "justify"]
UserRole = Literal["Admin", "Editor"]
EditionStatus = Literal["Draft", "Pending Approval", "Published", "Scheduled"]
EditionLanguage = Literal["en", "te", "hi"]
MoveDirection = Literal["up", "down"]

EDITION_STATUSES: tuple[EditionStatus, ...] = (
    "Draft",
    "Pending Approval",
    "Published",
    "Scheduled",
)


def new_id(prefix: str) -> str:
    """Process-unique identifier, never reused."""
    return f"{prefix}-{uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(UTC)


class EPaperModel(BaseModel):
    """
    Base for every content model.

    Instances are frozen; updates go through model_copy/model_validate and
    always produce a new object. Camel-case aliases keep the JSON shape of
    the browser editor (``subHeadline``, ``pageNumber``...).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


# --- Blocks ---

class BlockBase(EPaperModel):
    width: str = "w-full"
    height: str = "h-auto"
    rotation: float = 0
    # Placement placeholders, not used by the layout
    x: float | None = None
    y: float | None = None


class ArticleBlock(BlockBase):
    id: str = Field(default_factory=lambda: new_id("article"))
    type: Literal["article"] = "article"
    headline: str = ""
    sub_headline: str = ""
    content: str = ""
    byline: str = ""
    category: str = "Local News"
    location: str = ""
    article_image_url: str | None = None
    text_alignment: TextAlignment = "left"
    font_size: str = "text-base"
    line_spacing: str = "leading-normal"


class ImageBlock(BlockBase):
    id: str = Field(default_factory=lambda: new_id("image"))
    type: Literal["image"] = "image"
    image_url: str
    caption: str = ""


class AdBlock(BlockBase):
    id: str = Field(default_factory=lambda: new_id("ad"))
    type: Literal["ad"] = "ad"
    ad_content: str = ""
    ad_image_url: str | None = None
    target_url: str | None = None


Block = Annotated[ArticleBlock | ImageBlock | AdBlock, Field(discriminator="type")]


# --- Layout ---

class Section(EPaperModel):
    id: str = Field(default_factory=lambda: new_id("section"))
    type: str
    title: str
    blocks: list[Block] = Field(default_factory=list)
    # Display order is list order


class Page(EPaperModel):
    id: str = Field(default_factory=lambda: new_id("page"))
    page_number: int = Field(default=1, ge=1)
    sections: list[Section] = Field(default_factory=list)
    thumbnail: str | None = None
    is_uploaded_pdf_page: bool = False


class Edition(EPaperModel):
    id: str = Field(default_factory=lambda: new_id("edition"))
    title: str
    pages: list[Page] = Field(default_factory=list)
    language: EditionLanguage = "en"
    scheduled_publish_date: datetime | None = None
    status: EditionStatus = "Draft"
    created_by: str
    last_modified: datetime = Field(default_factory=utcnow)

    def find_page(self, page_id: str) -> Page | None:
        return next((p for p in self.pages if p.id == page_id), None)

    def all_ids(self) -> set[str]:
        """Every page, section and block identifier in the edition."""
        ids: set[str] = set()
        for page in self.pages:
            ids.add(page.id)
            for section in page.sections:
                ids.add(section.id)
                ids.update(block.id for block in section.blocks)
        return ids


# --- Users ---

class User(EPaperModel):
    id: str = Field(default_factory=lambda: new_id("user"))
    name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == "Admin"


def field_aliases(model_cls: type[BaseModel]) -> dict[str, str]:
    """Map field names and their camel-case aliases to field names."""
    names: dict[str, str] = {}
    for name, info in model_cls.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names
