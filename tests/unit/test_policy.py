import pytest

from epaper.domain.entities import Edition, User
from epaper.domain.policy import (
    available_actions,
    can_approve,
    can_edit,
    can_publish_directly,
    can_view,
    filter_editions,
)

ADMIN = User(name="Admin User", role="Admin")
EDITOR = User(name="Editor User", role="Editor")


def edition(status, title="Daily", created_by="Editor User"):
    return Edition(title=title, status=status, created_by=created_by)


@pytest.mark.parametrize(
    "status, user, expected",
    [
        ("Draft", EDITOR, {"edit"}),
        ("Draft", ADMIN, {"edit", "publish"}),
        ("Scheduled", EDITOR, {"edit"}),
        ("Scheduled", ADMIN, {"edit", "publish"}),
        ("Pending Approval", EDITOR, set()),
        ("Pending Approval", ADMIN, {"edit", "approve"}),
        ("Published", EDITOR, {"view"}),
        ("Published", ADMIN, {"view"}),
    ],
)
def test_available_actions(status, user, expected):
    assert available_actions(edition(status), user) == expected


def test_individual_rules():
    pending = edition("Pending Approval")
    assert can_edit(pending, ADMIN) and not can_edit(pending, EDITOR)
    assert can_approve(pending, ADMIN) and not can_approve(pending, EDITOR)
    assert can_view(edition("Published"))
    assert not can_publish_directly(edition("Published"), ADMIN)


def test_filter_editions():
    editions = [
        edition("Draft", title="Sports Weekly"),
        edition("Published", title="Daily News", created_by="Admin User"),
        edition("Pending Approval", title="Editorial"),
    ]
    assert [e.title for e in filter_editions(editions, "sports")] == ["Sports Weekly"]
    assert [e.title for e in filter_editions(editions, "ADMIN")] == ["Daily News"]
    assert [e.title for e in filter_editions(editions, None, "Draft")] == ["Sports Weekly"]
    assert len(filter_editions(editions, "", "All")) == 3
    assert filter_editions(editions, "editor", "Published") == []


def test_published_is_view_only_on_dashboard():
    published = edition("Published")
    assert available_actions(published, ADMIN) == {"view"}
    assert not can_edit(published, ADMIN)
