from datetime import UTC, datetime

import pytest

from epaper.domain.entities import Page, Section
from epaper.domain.pages import (
    add_page,
    add_section,
    clone_page,
    delete_page,
    duplicate_page,
    remove_section,
    renumber,
    reorder_page,
    replace_page,
    replace_section,
    update_edition,
    update_page,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def page_ids(edition):
    return [p.id for p in edition.pages]


def numbers(edition):
    return [p.page_number for p in edition.pages]


# --- Sections ---


def test_add_and_remove_section():
    page = Page(id="p")
    updated, section = add_section(page, "sports", "Cricket")
    assert updated.sections == [section]
    assert section.blocks == []
    assert section.id.startswith("section-")
    assert remove_section(updated, section.id).sections == []
    assert page.sections == []


def test_replace_section(section):
    page = Page(id="p", sections=[section])
    renamed = section.model_copy(update={"title": "Renamed"})
    assert replace_section(page, renamed).sections[0].title == "Renamed"


def test_replace_unknown_section_is_noop(section):
    page = Page(id="p", sections=[section])
    assert replace_section(page, Section(id="other", type="x", title="y")) is page


def test_update_page_accepts_aliases():
    page = update_page(Page(id="p"), {"thumbnail": "data:x", "isUploadedPdfPage": True})
    assert page.thumbnail == "data:x"
    assert page.is_uploaded_pdf_page is True


@pytest.mark.parametrize("field", ["id", "pageNumber"])
def test_update_page_rejects_structural_fields(field):
    with pytest.raises(ValueError, match="cannot be updated"):
        update_page(Page(id="p"), {field: 7})


def test_update_page_rejects_unknown_field():
    with pytest.raises(ValueError, match="Unknown field"):
        update_page(Page(id="p"), {"colour": "red"})


# --- Pages ---


def test_renumber():
    pages = [Page(id="a", page_number=3), Page(id="b", page_number=1)]
    assert [p.page_number for p in renumber(pages)] == [1, 2]


def test_add_page(edition):
    updated, page = add_page(edition, NOW)
    assert updated.pages[-1] == page
    assert page.page_number == 4
    assert page.sections == []
    assert updated.last_modified == NOW
    assert len(edition.pages) == 3


def test_delete_page_renumbers(edition):
    updated = delete_page(edition, "page-1", NOW)
    assert page_ids(updated) == ["page-2", "page-3"]
    assert numbers(updated) == [1, 2]
    assert updated.last_modified == NOW


def test_delete_unknown_page_keeps_edition(edition):
    assert delete_page(edition, "nope", NOW) is edition


def test_duplicate_page_appends_fresh_copy(edition):
    updated = duplicate_page(edition, "page-1", NOW)
    assert numbers(updated) == [1, 2, 3, 4]
    copy = updated.pages[-1]
    source = edition.pages[0]
    assert copy.id != source.id
    assert copy.sections[0].id != source.sections[0].id
    assert [b.id for b in copy.sections[0].blocks] != [b.id for b in source.sections[0].blocks]
    assert [b.model_dump(exclude={"id"}) for b in copy.sections[0].blocks] == [
        b.model_dump(exclude={"id"}) for b in source.sections[0].blocks
    ]
    # one page, one section, three blocks
    assert len(updated.all_ids() - edition.all_ids()) == 5


def test_duplicate_unknown_page(edition):
    assert duplicate_page(edition, "nope", NOW) is edition


def test_clone_page_ids_are_disjoint(edition):
    copy = clone_page(edition.pages[0])
    original_ids = edition.all_ids()
    assert copy.id not in original_ids
    for section in copy.sections:
        assert section.id not in original_ids
        assert not {b.id for b in section.blocks} & original_ids


def test_reorder_page(edition):
    updated = reorder_page(edition, "page-2", "up", NOW)
    assert page_ids(updated) == ["page-2", "page-1", "page-3"]
    assert numbers(updated) == [1, 2, 3]

    updated = reorder_page(edition, "page-2", "down", NOW)
    assert page_ids(updated) == ["page-1", "page-3", "page-2"]


@pytest.mark.parametrize("page_id, direction", [("page-1", "up"), ("page-3", "down")])
def test_reorder_page_at_boundary_keeps_order(edition, page_id, direction):
    assert page_ids(reorder_page(edition, page_id, direction, NOW)) == page_ids(edition)


def test_reorder_page_invalid_direction(edition):
    with pytest.raises(ValueError):
        reorder_page(edition, "page-1", "left", NOW)


def test_replace_page_bumps_timestamp(edition):
    page = edition.pages[1].model_copy(update={"thumbnail": "thumb"})
    updated = replace_page(edition, page, NOW)
    assert updated.pages[1].thumbnail == "thumb"
    assert updated.last_modified == NOW


def test_replace_unknown_page(edition):
    assert replace_page(edition, Page(id="other"), NOW) is edition


def test_update_edition_details(edition):
    scheduled = datetime(2024, 6, 1, 8, 0, tzinfo=UTC)
    updated = update_edition(
        edition, {"title": "Evening", "language": "te", "scheduledPublishDate": scheduled}, NOW
    )
    assert updated.title == "Evening"
    assert updated.language == "te"
    assert updated.scheduled_publish_date == scheduled
    assert updated.last_modified == NOW


def test_update_edition_pages_are_renumbered(edition):
    pages = list(reversed(edition.pages))
    updated = update_edition(edition, {"pages": pages}, NOW)
    assert page_ids(updated) == ["page-3", "page-2", "page-1"]
    assert numbers(updated) == [1, 2, 3]


@pytest.mark.parametrize("field", ["status", "createdBy", "id", "lastModified"])
def test_update_edition_rejects_protected_fields(edition, field):
    with pytest.raises(ValueError, match="cannot be updated"):
        update_edition(edition, {field: "x"}, NOW)


def test_update_edition_rejects_bad_language(edition):
    with pytest.raises(ValueError):
        update_edition(edition, {"language": "fr"}, NOW)
