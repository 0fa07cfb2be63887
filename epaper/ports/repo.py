from typing import Protocol

from epaper.domain.entities import Edition, EditionStatus


class EditionRepoPort(Protocol):
    def save(self, edition: Edition) -> Edition:
        """Insert or replace by id."""
        ...

    def get_by_id(self, edition_id: str) -> Edition | None:
        ...

    def list_editions(
        self, search: str | None = None, status: EditionStatus | None = None
    ) -> list[Edition]:
        ...


class TokenStorePort(Protocol):
    """Durable key-value storage for the session token."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...
