"""Domain service: Inventory Ledger.

The ledger owns every item record and is the only code that changes
``stock_quantity``.  It never checks who is calling: by the time a call
gets here the access guard has already admitted it.

Writes to an existing item go through an optimistic loop:

  1. read the current snapshot (and its version),
  2. compute the new snapshot in the domain model,
  3. ``compare_and_set`` it against the version read in step 1,
  4. on a lost race, start over from step 1.

Business rejections raised in step 2 (insufficient stock, bad input) end
the loop immediately; only version conflicts are retried.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import structlog

from sweetshop.domain.exceptions import (
    ConcurrentModificationError,
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from sweetshop.domain.model.item import Item, StockMutationKind, StockMutationRequest
from sweetshop.domain.model.value_objects import Money, Quantity
from sweetshop.domain.repository.item_repository import ItemRepository

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 50


class InventoryLedger:

    def __init__(
        self,
        item_repo: ItemRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._item_repo = item_repo
        self._max_attempts = max_attempts

    # --- Queries --------------------------------------------------------------

    def get_all(self) -> list[Item]:
        return self._item_repo.list_all()

    def get_by_id(self, item_id: str) -> Item:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            raise _not_found(item_id)
        return item

    def search(
        self,
        name: str | None = None,
        category: str | None = None,
        min_price: str | int | Decimal | None = None,
        max_price: str | int | Decimal | None = None,
    ) -> list[Item]:
        """Return the items matching every filter that was given.

        - ``name``: case-insensitive substring of the item name
        - ``category``: case-insensitive exact match
        - ``min_price`` / ``max_price``: inclusive bounds on the unit price

        Missing (or blank) filters match everything.  No match is an empty
        list, not an error.
        """
        name_part = name.strip().casefold() if name and name.strip() else None
        category_key = (
            category.strip().casefold() if category and category.strip() else None
        )
        low = Money.of(min_price) if min_price is not None else None
        high = Money.of(max_price) if max_price is not None else None
        if low is not None and high is not None and low > high:
            raise ValidationError(
                f"Minimum price {low} is greater than maximum price {high}"
            )

        results = []
        for item in self._item_repo.list_all():
            if name_part is not None and name_part not in item.name.casefold():
                continue
            if category_key is not None and item.category.casefold() != category_key:
                continue
            if low is not None and item.unit_price < low:
                continue
            if high is not None and item.unit_price > high:
                continue
            results.append(item)
        return results

    # --- Catalog writes -------------------------------------------------------

    def create(
        self,
        name: str,
        category: str,
        unit_price: str | int | Decimal | Money,
        stock_quantity: int,
        actor: str | None = None,
    ) -> Item:
        """Add a new item.  Names are unique (trimmed, case-insensitive)."""
        item = Item.create(name, category, unit_price, stock_quantity)

        # Fast path for a friendly error; ``add`` re-checks atomically.
        if self._item_repo.get_by_name(item.name) is not None:
            raise ConflictError(f"Item '{item.name}' already exists")

        saved = self._item_repo.add(item)
        logger.info(
            "item_created",
            item_id=saved.id,
            name=saved.name,
            stock_quantity=saved.stock_quantity,
            actor=actor,
        )
        return saved

    def update(
        self,
        item_id: str,
        name: str,
        category: str,
        unit_price: str | int | Decimal | Money,
        stock_quantity: int,
        actor: str | None = None,
    ) -> Item:
        """Replace all mutable fields of an item.

        Name uniqueness is only enforced by ``create``; renaming an item to
        the name of another item is accepted here.
        """
        updated = self._mutate(
            item_id,
            lambda current: current.revised(name, category, unit_price, stock_quantity),
        )
        logger.info(
            "item_updated",
            item_id=item_id,
            stock_quantity=updated.stock_quantity,
            version=updated.version,
            actor=actor,
        )
        return updated

    def delete(self, item_id: str, actor: str | None = None) -> None:
        if not self._item_repo.remove(item_id):
            raise _not_found(item_id)
        logger.info("item_deleted", item_id=item_id, actor=actor)

    # --- Stock mutations ------------------------------------------------------

    def sell(self, item_id: str, quantity: int, actor: str | None = None) -> Item:
        """Atomically take *quantity* units out of stock.

        Raises InsufficientStockError (no change made) when stock is short,
        and EntityNotFoundError when the item is gone, including when it
        was deleted while this sale was in flight.
        """
        qty = Quantity(quantity)
        updated = self._mutate(item_id, lambda current: current.sold(qty))
        logger.info(
            "item_sold",
            item_id=item_id,
            quantity=qty.value,
            stock_quantity=updated.stock_quantity,
            actor=actor,
        )
        return updated

    def restock(self, item_id: str, quantity: int, actor: str | None = None) -> Item:
        """Atomically add *quantity* units to stock."""
        qty = Quantity(quantity)
        updated = self._mutate(item_id, lambda current: current.restocked(qty))
        logger.info(
            "item_restocked",
            item_id=item_id,
            quantity=qty.value,
            stock_quantity=updated.stock_quantity,
            actor=actor,
        )
        return updated

    def apply(self, request: StockMutationRequest, actor: str | None = None) -> Item:
        """Run a sell or restock described by a StockMutationRequest."""
        if request.kind == StockMutationKind.SELL:
            return self.sell(request.item_id, request.delta.value, actor=actor)
        return self.restock(request.item_id, request.delta.value, actor=actor)

    # --- Internal helpers -----------------------------------------------------

    def _mutate(self, item_id: str, change: Callable[[Item], Item]) -> Item:
        for attempt in range(1, self._max_attempts + 1):
            current = self._item_repo.get_by_id(item_id)
            if current is None:
                raise _not_found(item_id)

            updated = change(current)
            if self._item_repo.compare_and_set(updated, expected_version=current.version):
                return updated

            logger.debug("item_write_conflict", item_id=item_id, attempt=attempt)

        logger.warning(
            "item_write_retries_exhausted",
            item_id=item_id,
            attempts=self._max_attempts,
        )
        raise ConcurrentModificationError(
            f"Item with ID '{item_id}' is being modified concurrently, try again"
        )


def _not_found(item_id: str) -> EntityNotFoundError:
    return EntityNotFoundError(f"Item with ID '{item_id}' not found")
