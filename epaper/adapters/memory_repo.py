"""In-memory edition collection.

Holds "all editions" for the lifetime of the process. Saving replaces an
existing edition in place (by id) so listing order stays insertion order.
"""

from epaper.domain.entities import Edition, EditionStatus
from epaper.domain.policy import filter_editions


class InMemoryEditionRepo:
    def __init__(self, editions: list[Edition] | None = None) -> None:
        self._editions: dict[str, Edition] = {}
        for edition in editions or []:
            self.save(edition)

    def save(self, edition: Edition) -> Edition:
        self._editions[edition.id] = edition
        return edition

    def get_by_id(self, edition_id: str) -> Edition | None:
        return self._editions.get(edition_id)

    def list_editions(
        self, search: str | None = None, status: EditionStatus | None = None
    ) -> list[Edition]:
        return filter_editions(self._editions.values(), search, status)

    def clear(self) -> None:
        self._editions.clear()
