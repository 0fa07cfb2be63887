from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from epaper.domain.entities import Edition, EditionStatus, User

# Published has no outgoing transition.
ALLOWED_TRANSITIONS: dict[EditionStatus, tuple[EditionStatus, ...]] = {
    "Draft": ("Scheduled", "Published", "Pending Approval"),
    "Pending Approval": ("Scheduled", "Published", "Pending Approval"),
    "Scheduled": ("Scheduled", "Published", "Pending Approval"),
    "Published": (),
}


@dataclass(frozen=True)
class PublishDecision:
    status: EditionStatus
    message: str


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def can_transition(current: EditionStatus, new: EditionStatus) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, ())


def transition(edition: Edition, new_status: EditionStatus, now: datetime) -> Edition:
    """
    Return a NEW Edition with the updated status and ``last_modified``.
    Raises ValueError if the transition is invalid.
    """
    if not can_transition(edition.status, new_status):
        raise ValueError(f"Invalid transition from {edition.status} to {new_status}")
    return edition.model_copy(update={"status": new_status, "last_modified": now})


def decide_publish_outcome(edition: Edition, user: User, now: datetime) -> PublishDecision:
    """
    Decide where a publish request sends the edition.

    1. A scheduled date strictly in the future schedules it.
    2. Otherwise an Admin publishes it.
    3. Otherwise it goes to the approval queue.
    """
    scheduled = edition.scheduled_publish_date
    if scheduled is not None and as_utc(scheduled) > as_utc(now):
        when = as_utc(scheduled)
        return PublishDecision(
            status="Scheduled",
            message=(
                f'Edition "{edition.title}" scheduled for publication on '
                f"{when:%Y-%m-%d} at {when:%H:%M} UTC."
            ),
        )

    if user.role == "Admin":
        return PublishDecision(status="Published", message=f'Edition "{edition.title}" published!')

    return PublishDecision(
        status="Pending Approval",
        message=f'Edition "{edition.title}" sent for approval.',
    )


def apply_publish(edition: Edition, decision: PublishDecision, now: datetime) -> Edition:
    return transition(edition, decision.status, now)


def approve(edition: Edition, user: User, now: datetime) -> Edition:
    """
    Approve an edition waiting for review.

    Raises:
        PermissionError: the acting user is not an Admin.
        ValueError: the edition is not pending approval.
    """
    if user.role != "Admin":
        raise PermissionError("Only Admins can approve editions.")
    if edition.status != "Pending Approval":
        raise ValueError("Edition is not in pending approval status.")
    return transition(edition, "Published", now)


def find_overdue_scheduled(editions: Iterable[Edition], now: datetime) -> list[Edition]:
    """
    Scheduled editions whose date has passed.

    Nothing publishes these automatically; they are reported so a user can
    run the publish action again.
    """
    current = as_utc(now)
    return [
        e
        for e in editions
        if e.status == "Scheduled"
        and e.scheduled_publish_date is not None
        and as_utc(e.scheduled_publish_date) <= current
    ]
