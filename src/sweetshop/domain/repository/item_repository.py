"""Abstract repository for the Item aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (in-memory, JSON) live in the
infrastructure layer.

There is deliberately no plain ``save``: an existing item can only be
overwritten through ``compare_and_set``, which is the single write path
for ``stock_quantity``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sweetshop.domain.model.item import Item


class ItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> Item | None:
        """Return an item by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Item | None:
        """Return an item by name (trimmed, case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Item]:
        """Return a snapshot of every item in the catalog."""

    @abstractmethod
    def add(self, item: Item) -> Item:
        """Store a new item and return it with its assigned ID.

        Raises ConflictError if another item already has the same name.
        The check and the insert happen atomically.
        """

    @abstractmethod
    def compare_and_set(self, item: Item, expected_version: int) -> bool:
        """Replace the stored item only if its version is still *expected_version*.

        Returns False, writing nothing, when the stored version differs or
        the item no longer exists.
        """

    @abstractmethod
    def remove(self, item_id: str) -> bool:
        """Delete an item.  Returns False if it did not exist."""
