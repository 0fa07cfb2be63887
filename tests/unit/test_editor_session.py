from datetime import timedelta

import pytest

from epaper.domain.entities import ArticleBlock
from epaper.services.editor import UPLOADED_PDF_THUMBNAIL, EditorSession


@pytest.fixture
def loaded(session, repo, edition):
    repo.save(edition)
    session.load_edition(edition.id)
    return session


# --- Session & editions ---


def test_create_edition_defaults(session, repo, clock):
    edition = session.create_edition()
    assert edition.title == "New Edition - 2024-04-23"
    assert edition.status == "Draft"
    assert edition.language == "en"
    assert edition.created_by == "Editor User"
    assert [p.page_number for p in edition.pages] == [1]
    assert session.current_page == edition.pages[0]
    assert repo.get_by_id(edition.id) == edition


def test_create_edition_requires_user(repo, clock, rules):
    session = EditorSession(repo, clock, rules)
    with pytest.raises(PermissionError):
        session.create_edition("x")


def test_load_edition_selects_first_page(loaded, edition):
    assert loaded.current_edition == edition
    assert loaded.current_page.id == "page-1"


def test_load_unknown_edition(session):
    with pytest.raises(LookupError):
        session.load_edition("missing")


def test_editor_cannot_open_pending(session, repo, edition):
    repo.save(edition.model_copy(update={"status": "Pending Approval"}))
    with pytest.raises(PermissionError):
        session.load_edition(edition.id)


def test_sign_out_closes_edition(loaded):
    loaded.sign_out()
    assert loaded.current_user is None
    assert loaded.current_edition is None
    assert loaded.current_page is None


def test_update_edition_details_writes_back(loaded, repo, clock):
    clock.advance(minutes=5)
    updated = loaded.update_edition_details({"title": "Evening Edition"})
    assert repo.get_by_id(updated.id).title == "Evening Edition"
    assert updated.last_modified == clock.now()


def test_save_edition_bumps_timestamp(loaded, clock):
    before = loaded.current_edition.last_modified
    clock.advance(seconds=1)
    assert loaded.save_edition().last_modified > before


def test_publish_current_closes_on_success(loaded, repo):
    result = loaded.publish_current()
    assert result.success
    assert result.status == "Pending Approval"
    assert loaded.current_edition is None
    assert repo.get_by_id("edition-1").status == "Pending Approval"


def test_operations_require_open_edition(session):
    with pytest.raises(LookupError):
        session.add_page()
    with pytest.raises(LookupError):
        session.add_section("sports", "x")


def test_configure_generation(session):
    config = session.configure_generation({"temperature": 0.2, "topK": 10})
    assert config.temperature == 0.2
    assert config.top_k == 10
    assert config.model_name == "gemini-2.5-flash"


def test_configure_generation_rejects_bad_values(session):
    with pytest.raises(ValueError, match="Unknown generation settings"):
        session.configure_generation({"seed": 1})
    with pytest.raises(ValueError):
        session.configure_generation({"temperature": 3})


# --- Pages ---


def test_add_page_selects_it(loaded):
    page = loaded.add_page()
    assert loaded.current_page == page
    assert page.page_number == 4


def test_delete_current_page_falls_back_to_first(loaded):
    loaded.open_page("page-2")
    loaded.delete_page("page-2")
    assert loaded.current_page.id == "page-1"
    assert [p.page_number for p in loaded.current_edition.pages] == [1, 2]


def test_delete_other_page_keeps_selection(loaded):
    loaded.open_page("page-3")
    loaded.delete_page("page-1")
    assert loaded.current_page.id == "page-3"
    assert loaded.current_page.page_number == 2


def test_delete_all_pages(loaded):
    for page_id in ("page-1", "page-2", "page-3"):
        loaded.delete_page(page_id)
    assert loaded.current_page is None
    assert loaded.current_edition.pages == []


def test_duplicate_and_reorder(loaded):
    loaded.duplicate_page("page-1")
    assert len(loaded.current_edition.pages) == 4
    loaded.reorder_page("page-3", "up")
    assert [p.id for p in loaded.current_edition.pages][:3] == ["page-1", "page-3", "page-2"]


def test_open_unknown_page(loaded):
    with pytest.raises(LookupError):
        loaded.open_page("nope")


def test_thumbnail_only_for_current_page(loaded):
    assert loaded.upload_page_thumbnail("page-2", "data:image/png;base64,AA") is None
    page = loaded.upload_page_thumbnail("page-1", "data:image/png;base64,AA")
    assert page.thumbnail == "data:image/png;base64,AA"


def test_upload_pdf_page(loaded, repo):
    page = loaded.upload_pdf_page("page-1")
    assert page.is_uploaded_pdf_page
    assert page.thumbnail == UPLOADED_PDF_THUMBNAIL
    assert repo.get_by_id("edition-1").pages[0].is_uploaded_pdf_page


# --- Sections & blocks ---


def test_section_lifecycle(loaded):
    section = loaded.add_section("sports", "Cricket")
    assert loaded.current_page.sections[-1] == section
    loaded.remove_section(section.id)
    assert section.id not in {s.id for s in loaded.current_page.sections}


def test_add_block_uses_session_user(loaded):
    block = loaded.add_block("sec-1", "article")
    assert isinstance(block, ArticleBlock)
    assert block.byline == "By Editor User"
    assert loaded.current_page.sections[0].blocks[-1] == block


def test_add_block_unknown_section(loaded):
    before = loaded.current_edition
    assert loaded.add_block("nope", "article") is None
    assert loaded.current_edition.pages == before.pages


def test_update_block_refreshes_current_page(loaded, repo):
    loaded.update_block("sec-1", "art-1", {"headline": "Updated"})
    assert loaded.current_page.sections[0].blocks[0].headline == "Updated"
    stored = repo.get_by_id("edition-1")
    assert stored.pages[0].sections[0].blocks[0].headline == "Updated"


def test_move_and_remove_block(loaded):
    loaded.move_block("sec-1", "art-2", "up")
    assert [b.id for b in loaded.current_page.sections[0].blocks] == ["art-1", "art-2", "img-1"]
    loaded.remove_block("sec-1", "art-1")
    assert [b.id for b in loaded.current_page.sections[0].blocks] == ["art-2", "img-1"]


def test_find_block(loaded):
    assert loaded.find_block("sec-1", "img-1").type == "image"
    assert loaded.find_block("sec-1", "nope") is None
    assert loaded.find_block("nope", "img-1") is None


def test_every_edit_bumps_last_modified(loaded, clock):
    stamps = []
    for action in (
        lambda: loaded.add_section("sports", "x"),
        lambda: loaded.update_block("sec-1", "art-1", {"headline": "y"}),
        lambda: loaded.add_page(),
    ):
        clock.advance(minutes=1)
        action()
        stamps.append(loaded.current_edition.last_modified)
    assert stamps == sorted(stamps)
    assert stamps[-1] - stamps[0] == timedelta(minutes=2)


# --- Workflow on the open edition ---


def test_approve_refreshes_open_edition(session, repo, edition, admin):
    repo.save(edition.model_copy(update={"status": "Pending Approval"}))
    session.sign_in(admin)
    session.load_edition(edition.id)
    session.open_page("page-2")

    result = session.approve_edition(edition.id)

    assert result.success
    assert session.current_edition.status == "Published"
    assert session.current_page.id == "page-2"


def test_edit_after_approve_keeps_published(session, repo, edition, admin):
    repo.save(edition.model_copy(update={"status": "Pending Approval"}))
    session.sign_in(admin)
    session.load_edition(edition.id)
    session.approve_edition(edition.id)

    session.update_block("sec-1", "art-1", {"headline": "After approval"})

    stored = repo.get_by_id(edition.id)
    assert stored.status == "Published"
    assert stored.pages[0].sections[0].blocks[0].headline == "After approval"


def test_failed_approve_leaves_working_copy(loaded, edition):
    result = loaded.approve_edition(edition.id)
    assert result.errors[0].code == "PERMISSION_DENIED"
    assert loaded.current_edition.status == "Draft"


def test_approve_other_edition_keeps_working_copy(session, repo, edition, admin):
    other = edition.model_copy(update={"id": "edition-2", "status": "Pending Approval"})
    repo.save(edition)
    repo.save(other)
    session.sign_in(admin)
    session.load_edition(edition.id)

    assert session.approve_edition("edition-2").success
    assert session.current_edition.id == edition.id
    assert session.current_edition.status == "Draft"


def test_publish_open_edition_by_id_closes_it(session, repo, edition, admin):
    repo.save(edition)
    session.sign_in(admin)
    session.load_edition(edition.id)

    assert session.publish_edition(edition.id).status == "Published"
    assert session.current_edition is None


def test_published_edition_opens_as_working_copy(session, repo, edition):
    repo.save(edition.model_copy(update={"status": "Published"}))
    session.load_edition(edition.id)
    session.update_block("sec-1", "art-1", {"headline": "changed"})
    stored = repo.get_by_id(edition.id)
    assert stored.pages[0].sections[0].blocks[0].headline == "changed"
    assert stored.status == "Published"
