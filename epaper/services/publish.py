"""
Publish workflow orchestration.

Loads an edition from the collection, runs the domain decision, saves the
result. Rejections (unknown edition, wrong role, wrong state) come back as
PublishValidationError records and leave the collection untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from epaper.domain.entities import Edition, EditionStatus, User
from epaper.domain.state import (
    apply_publish,
    approve,
    decide_publish_outcome,
    find_overdue_scheduled,
)
from epaper.ports.clock import ClockPort
from epaper.ports.repo import EditionRepoPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishValidationError:
    """Validation error details for publish operations."""

    code: str
    message: str
    field: str


@dataclass(frozen=True)
class PublishOutput:
    """Outcome of a publish or approve request."""

    edition: Edition | None = None
    status: EditionStatus | None = None
    message: str = ""
    errors: list[PublishValidationError] = field(default_factory=list)
    success: bool = False


def _failure(code: str, message: str, field_name: str) -> PublishOutput:
    return PublishOutput(
        message=message,
        errors=[PublishValidationError(code=code, message=message, field=field_name)],
        success=False,
    )


class PublishService:
    def __init__(self, repo: EditionRepoPort, clock: ClockPort):
        self.repo = repo
        self.clock = clock

    def publish(self, user: User | None, edition: Edition) -> PublishOutput:
        """Schedule, publish or queue for approval the given working copy."""
        if user is None:
            return _failure(
                "NOT_AUTHENTICATED", "You must be logged in to publish an edition.", "user"
            )

        now = self.clock.now()
        decision = decide_publish_outcome(edition, user, now)
        try:
            updated = apply_publish(edition, decision, now)
        except ValueError as e:
            logger.warning("Publish of %s rejected: %s", edition.id, e)
            return _failure("TRANSITION_ERROR", str(e), "status")

        self.repo.save(updated)
        logger.info("Edition %s moved %s -> %s", edition.id, edition.status, updated.status)
        return PublishOutput(
            edition=updated, status=updated.status, message=decision.message, success=True
        )

    def publish_by_id(self, user: User | None, edition_id: str) -> PublishOutput:
        edition = self.repo.get_by_id(edition_id)
        if edition is None:
            return _failure("EDITION_NOT_FOUND", "Edition not found.", "edition_id")
        return self.publish(user, edition)

    def approve(self, user: User | None, edition_id: str) -> PublishOutput:
        if user is None or user.role != "Admin":
            return _failure("PERMISSION_DENIED", "Only Admins can approve editions.", "user")

        edition = self.repo.get_by_id(edition_id)
        if edition is None:
            return _failure("EDITION_NOT_FOUND", "Edition not found.", "edition_id")

        try:
            updated = approve(edition, user, self.clock.now())
        except PermissionError as e:
            return _failure("PERMISSION_DENIED", str(e), "user")
        except ValueError as e:
            logger.warning("Approval of %s rejected: %s", edition_id, e)
            return _failure("INVALID_STATE", str(e), "status")

        self.repo.save(updated)
        logger.info("Edition %s approved by %s", edition_id, user.name)
        return PublishOutput(
            edition=updated,
            status=updated.status,
            message=f'Edition "{updated.title}" approved and published!',
            success=True,
        )

    def overdue(self) -> list[Edition]:
        """Scheduled editions whose publish date has passed."""
        return find_overdue_scheduled(self.repo.list_editions(), self.clock.now())
