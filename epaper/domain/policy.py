"""
Role rules for edition actions.

Editors may open drafts and scheduled editions; Admins may also open, approve
or publish editions waiting in the approval queue. Published editions are
offered as "view" on the dashboard, but opening one gives an ordinary working
copy: edits are not blocked.
"""

from collections.abc import Iterable
from typing import Literal

from epaper.domain.entities import Edition, User

EditionAction = Literal["edit", "view", "approve", "publish"]


def can_edit(edition: Edition, user: User) -> bool:
    if edition.status in ("Draft", "Scheduled"):
        return True
    return user.is_admin and edition.status == "Pending Approval"


def can_view(edition: Edition) -> bool:
    return edition.status == "Published"


def can_approve(edition: Edition, user: User) -> bool:
    return user.is_admin and edition.status == "Pending Approval"


def can_publish_directly(edition: Edition, user: User) -> bool:
    """Admins get a one-click publish on drafts and scheduled editions."""
    return user.is_admin and edition.status in ("Draft", "Scheduled")


def available_actions(edition: Edition, user: User) -> set[EditionAction]:
    actions: set[EditionAction] = set()
    if can_edit(edition, user):
        actions.add("edit")
    if can_view(edition):
        actions.add("view")
    if can_approve(edition, user):
        actions.add("approve")
    if can_publish_directly(edition, user):
        actions.add("publish")
    return actions


# --- Dashboard ---


def filter_editions(
    editions: Iterable[Edition], search: str | None = None, status: str | None = None
) -> list[Edition]:
    """Case-insensitive match on title or creator; status None or "All" means any."""
    term = (search or "").lower()
    return [
        e
        for e in editions
        if (term in e.title.lower() or term in e.created_by.lower())
        and (status in (None, "All") or e.status == status)
    ]
