"""
Editor session: the working copy and everything that edits it.

One EditorSession holds the acting user, the edition currently open for
editing and the page within it. Every change is computed with the pure
functions in ``epaper.domain`` and then committed: the new edition replaces
its counterpart in the collection (last writer wins) and the current page
reference is refreshed to the new object with the same id.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from epaper.domain import blocks as block_ops
from epaper.domain import pages as page_ops
from epaper.domain import policy
from epaper.domain.entities import (
    Block,
    Edition,
    MoveDirection,
    Page,
    Section,
    User,
    field_aliases,
    new_id,
)
from epaper.ports.clock import ClockPort
from epaper.ports.generation import GenerationConfig
from epaper.ports.repo import EditionRepoPort
from epaper.rules.models import Rules
from epaper.services.publish import PublishOutput, PublishService

logger = logging.getLogger(__name__)

UPLOADED_PDF_THUMBNAIL = "https://via.placeholder.com/150x200?text=PDF+Page"


class EditorSession:
    def __init__(
        self,
        repo: EditionRepoPort,
        clock: ClockPort,
        rules: Rules,
        publish_service: PublishService | None = None,
        user: User | None = None,
    ) -> None:
        self.repo = repo
        self.clock = clock
        self.rules = rules
        self.publish_service = publish_service or PublishService(repo, clock)
        self.current_user = user
        self.current_edition: Edition | None = None
        self.current_page: Page | None = None
        self.generation_config = GenerationConfig(
            model_name=rules.generation.model_name,
            image_model_name=rules.generation.image_model_name,
            temperature=rules.generation.temperature,
            top_k=rules.generation.top_k,
            top_p=rules.generation.top_p,
        )
        # Transient banner for collaborator failures
        self.error: str | None = None

    # --- Session ---

    def sign_in(self, user: User) -> None:
        self.current_user = user

    def sign_out(self) -> None:
        self.current_user = None
        self.close_edition()

    def configure_generation(self, updates: Mapping[str, Any]) -> GenerationConfig:
        names = field_aliases(GenerationConfig)
        unknown = [k for k in updates if k not in names]
        if unknown:
            raise ValueError(f"Unknown generation settings: {', '.join(unknown)}")
        changes = {names[k]: v for k, v in updates.items()}
        self.generation_config = GenerationConfig.model_validate(
            {**self.generation_config.model_dump(), **changes}
        )
        return self.generation_config

    def _require_user(self) -> User:
        if self.current_user is None:
            raise PermissionError("Please log in first.")
        return self.current_user

    def _require_edition(self) -> Edition:
        if self.current_edition is None:
            raise LookupError("No edition is currently being edited.")
        return self.current_edition

    def _require_page(self) -> Page:
        self._require_edition()
        if self.current_page is None:
            raise LookupError("No page selected for editing.")
        return self.current_page

    # --- Working copy ---

    def _commit(self, edition: Edition, select_page_id: str | None = None) -> Edition:
        """Write the edition back and re-point the current page at fresh data."""
        self.repo.save(edition)
        self.current_edition = edition

        page_id = select_page_id or (self.current_page.id if self.current_page else None)
        page = edition.find_page(page_id) if page_id else None
        if page is None and self.current_page is not None:
            # Current page is gone; fall back to the first remaining one
            page = edition.pages[0] if edition.pages else None
        self.current_page = page
        return edition

    def create_edition(self, title: str = "") -> Edition:
        user = self._require_user()
        now = self.clock.now()
        page = Page(id=new_id("page"), page_number=1, sections=[], thumbnail="")
        edition = Edition(
            id=new_id("edition"),
            title=title or f"New Edition - {now:%Y-%m-%d}",
            pages=[page],
            language=self.rules.catalog.default_language,
            scheduled_publish_date=None,
            status="Draft",
            created_by=user.name,
            last_modified=now,
        )
        self.repo.save(edition)
        self.current_edition = edition
        self.current_page = page
        logger.info("Created edition %s (%s)", edition.id, edition.title)
        return edition

    def load_edition(self, edition_id: str) -> Edition:
        edition = self.repo.get_by_id(edition_id)
        if edition is None:
            raise LookupError("Edition not found.")
        user = self.current_user
        if user is not None and not (policy.can_edit(edition, user) or policy.can_view(edition)):
            raise PermissionError("This edition is waiting for an Admin review.")
        self.current_edition = edition
        self.current_page = edition.pages[0] if edition.pages else None
        return edition

    def close_edition(self) -> None:
        self.current_edition = None
        self.current_page = None

    def update_edition_details(self, updates: Mapping[str, Any]) -> Edition:
        edition = self._require_edition()
        return self._commit(page_ops.update_edition(edition, updates, self.clock.now()))

    def save_edition(self) -> Edition:
        """Re-commit the working copy with a fresh timestamp."""
        edition = self._require_edition()
        return self._commit(page_ops.touch(edition, self.clock.now()))

    def publish_current(self) -> PublishOutput:
        """Run the publish rule on the working copy and close it on success."""
        edition = self._require_edition()
        result = self.publish_service.publish(self.current_user, edition)
        if result.success:
            self.close_edition()
        return result

    def publish_edition(self, edition_id: str) -> PublishOutput:
        """Publish an edition from the collection; closes it if it is the open one."""
        result = self.publish_service.publish_by_id(self.current_user, edition_id)
        if result.success and self.current_edition is not None:
            if self.current_edition.id == edition_id:
                self.close_edition()
        return result

    def approve_edition(self, edition_id: str) -> PublishOutput:
        result = self.publish_service.approve(self.current_user, edition_id)
        if result.success and result.edition is not None:
            self._reconcile(result.edition)
        return result

    def _reconcile(self, edition: Edition) -> None:
        """Point the working copy at a version another service has saved."""
        if self.current_edition is None or self.current_edition.id != edition.id:
            return
        page_id = self.current_page.id if self.current_page else None
        self.current_edition = edition
        page = edition.find_page(page_id) if page_id else None
        self.current_page = page or (edition.pages[0] if edition.pages else None)

    # --- Pages ---

    def add_page(self) -> Page:
        edition = self._require_edition()
        updated, page = page_ops.add_page(edition, self.clock.now())
        self._commit(updated, select_page_id=page.id)
        return page

    def delete_page(self, page_id: str) -> Edition:
        edition = self._require_edition()
        return self._commit(page_ops.delete_page(edition, page_id, self.clock.now()))

    def duplicate_page(self, page_id: str) -> Edition:
        edition = self._require_edition()
        return self._commit(page_ops.duplicate_page(edition, page_id, self.clock.now()))

    def reorder_page(self, page_id: str, direction: MoveDirection) -> Edition:
        edition = self._require_edition()
        return self._commit(page_ops.reorder_page(edition, page_id, direction, self.clock.now()))

    def open_page(self, page_id: str) -> Page:
        edition = self._require_edition()
        page = edition.find_page(page_id)
        if page is None:
            raise LookupError("Page not found.")
        self.current_page = page
        return page

    def update_page_details(self, updates: Mapping[str, Any]) -> Page:
        page = self._require_page()
        updated = page_ops.update_page(page, updates)
        self._commit(page_ops.replace_page(self._require_edition(), updated, self.clock.now()))
        return self._require_page()

    def upload_page_thumbnail(self, page_id: str, data_url: str) -> Page | None:
        """Only the page currently open can receive a thumbnail."""
        if self.current_page is None or self.current_page.id != page_id:
            return None
        return self.update_page_details({"thumbnail": data_url})

    def upload_pdf_page(self, page_id: str) -> Page | None:
        # Simulated: the PDF itself is not kept, only the flag and a stock thumbnail
        if self.current_page is None or self.current_page.id != page_id:
            return None
        return self.update_page_details(
            {"thumbnail": UPLOADED_PDF_THUMBNAIL, "is_uploaded_pdf_page": True}
        )

    # --- Sections ---

    def _edit_sections(self, change: Callable[[Page], Page]) -> Page:
        page = self._require_page()
        updated = change(page)
        self._commit(page_ops.replace_page(self._require_edition(), updated, self.clock.now()))
        return self._require_page()

    def add_section(self, section_type: str, title: str) -> Section:
        page = self._require_page()
        updated, section = page_ops.add_section(page, section_type, title)
        self._edit_sections(lambda _: updated)
        return section

    def remove_section(self, section_id: str) -> Page:
        return self._edit_sections(lambda p: page_ops.remove_section(p, section_id))

    def _edit_section(self, section_id: str, change: Callable[[Section], Section]) -> Page:
        def apply(page: Page) -> Page:
            section = next((s for s in page.sections if s.id == section_id), None)
            if section is None:
                return page
            return page_ops.replace_section(page, change(section))

        return self._edit_sections(apply)

    # --- Blocks ---

    def add_block(self, section_id: str, kind: str) -> Block | None:
        author = self.current_user.name if self.current_user else None
        created: list[Block] = []

        def change(section: Section) -> Section:
            updated, block = block_ops.add_block(
                section, kind, author, self.rules.block_defaults
            )
            created.append(block)
            return updated

        self._edit_section(section_id, change)
        return created[0] if created else None

    def update_block(self, section_id: str, block_id: str, updates: Mapping[str, Any]) -> Page:
        return self._edit_section(
            section_id, lambda s: block_ops.update_block(s, block_id, updates)
        )

    def remove_block(self, section_id: str, block_id: str) -> Page:
        return self._edit_section(section_id, lambda s: block_ops.remove_block(s, block_id))

    def move_block(self, section_id: str, block_id: str, direction: MoveDirection) -> Page:
        return self._edit_section(
            section_id, lambda s: block_ops.move_block(s, block_id, direction)
        )

    def find_block(self, section_id: str, block_id: str) -> Block | None:
        if self.current_page is None:
            return None
        for section in self.current_page.sections:
            if section.id == section_id:
                return next((b for b in section.blocks if b.id == block_id), None)
        return None
