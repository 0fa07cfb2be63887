"""
Page and edition mutation functions.

Sections are edited on a Page, pages on an Edition. Every edition-level
function returns a new Edition with ``last_modified`` set to ``now`` and,
after any structural change to the page list, pages renumbered so that
``pages[i].page_number == i + 1``.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from epaper.domain.blocks import clone_block
from epaper.domain.entities import (
    Edition,
    MoveDirection,
    Page,
    Section,
    field_aliases,
    new_id,
)

# Status moves only through the publish workflow; page numbers follow position.
IMMUTABLE_PAGE_FIELDS = ("id", "page_number")
IMMUTABLE_EDITION_FIELDS = ("id", "status", "created_by", "last_modified")


def _normalize_updates(
    model_cls: type[Page] | type[Edition],
    updates: Mapping[str, Any],
    immutable: Sequence[str],
) -> dict[str, Any]:
    names = field_aliases(model_cls)
    changes: dict[str, Any] = {}
    for key, value in updates.items():
        field = names.get(key)
        if field is None:
            raise ValueError(f"Unknown field '{key}'.")
        if field in immutable:
            raise ValueError(f"Field '{field}' cannot be updated directly.")
        changes[field] = value
    return changes


# --- Sections on a page ---


def add_section(page: Page, section_type: str, title: str) -> tuple[Page, Section]:
    section = Section(id=new_id("section"), type=section_type, title=title, blocks=[])
    return page.model_copy(update={"sections": [*page.sections, section]}), section


def remove_section(page: Page, section_id: str) -> Page:
    sections = [s for s in page.sections if s.id != section_id]
    return page.model_copy(update={"sections": sections})


def replace_section(page: Page, section: Section) -> Page:
    """Swap in a new version of a section (matched by id)."""
    if not any(s.id == section.id for s in page.sections):
        return page
    sections = [section if s.id == section.id else s for s in page.sections]
    return page.model_copy(update={"sections": sections})


def update_page(page: Page, updates: Mapping[str, Any]) -> Page:
    """Merge thumbnail/sections/is_uploaded_pdf_page updates into a page."""
    changes = _normalize_updates(Page, updates, IMMUTABLE_PAGE_FIELDS)
    return Page.model_validate({**dict(page), **changes})


def clone_section(section: Section) -> Section:
    return section.model_copy(
        update={
            "id": new_id("section"),
            "blocks": [clone_block(b) for b in section.blocks],
        }
    )


def clone_page(page: Page) -> Page:
    """Deep copy with fresh page, section and block ids."""
    return page.model_copy(
        update={
            "id": new_id("page"),
            "sections": [clone_section(s) for s in page.sections],
        }
    )


# --- Pages on an edition ---


def renumber(pages: Sequence[Page]) -> list[Page]:
    return [
        p if p.page_number == i + 1 else p.model_copy(update={"page_number": i + 1})
        for i, p in enumerate(pages)
    ]


def touch(edition: Edition, now: datetime, **changes: Any) -> Edition:
    """Apply field changes and bump ``last_modified``."""
    return edition.model_copy(update={**changes, "last_modified": now})


def update_edition(edition: Edition, updates: Mapping[str, Any], now: datetime) -> Edition:
    """Merge title/language/scheduled date/pages updates into an edition."""
    changes = _normalize_updates(Edition, updates, IMMUTABLE_EDITION_FIELDS)
    updated = Edition.model_validate({**dict(edition), **changes, "last_modified": now})
    if "pages" in changes:
        updated = updated.model_copy(update={"pages": renumber(updated.pages)})
    return updated


def replace_page(edition: Edition, page: Page, now: datetime) -> Edition:
    """Fold an edited page back into its edition (matched by id)."""
    if edition.find_page(page.id) is None:
        return edition
    pages = [page if p.id == page.id else p for p in edition.pages]
    return touch(edition, now, pages=renumber(pages))


def add_page(edition: Edition, now: datetime) -> tuple[Edition, Page]:
    page = Page(
        id=new_id("page"),
        page_number=len(edition.pages) + 1,
        sections=[],
        thumbnail="",
    )
    return touch(edition, now, pages=renumber([*edition.pages, page])), page


def delete_page(edition: Edition, page_id: str, now: datetime) -> Edition:
    if edition.find_page(page_id) is None:
        return edition
    pages = [p for p in edition.pages if p.id != page_id]
    return touch(edition, now, pages=renumber(pages))


def duplicate_page(edition: Edition, page_id: str, now: datetime) -> Edition:
    """
    Append a deep copy of a page under fresh ids.

    The list is stable-sorted by the current page numbers before renumbering,
    so the copy lands last and ties keep their insertion order.
    """
    source = edition.find_page(page_id)
    if source is None:
        return edition

    duplicate = clone_page(source).model_copy(update={"page_number": len(edition.pages) + 1})
    pages = sorted([*edition.pages, duplicate], key=lambda p: p.page_number)
    return touch(edition, now, pages=renumber(pages))


def reorder_page(
    edition: Edition, page_id: str, direction: MoveDirection, now: datetime
) -> Edition:
    """Swap a page with its neighbour; at either end the order is kept."""
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid direction '{direction}'.")

    idx = next((i for i, p in enumerate(edition.pages) if p.id == page_id), -1)
    if idx == -1:
        return edition

    pages = list(edition.pages)
    moved = pages.pop(idx)

    if direction == "up" and idx > 0:
        pages.insert(idx - 1, moved)
    elif direction == "down" and idx < len(pages):
        pages.insert(idx + 1, moved)
    else:
        pages.insert(idx, moved)

    return touch(edition, now, pages=renumber(pages))
