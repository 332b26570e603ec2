"""Item aggregate: a sellable catalog record and its stock level.

Items are immutable snapshots.  Every change produces a new Item whose
``version`` is one higher, which is what lets the repository detect lost
updates with a compare-and-set instead of trusting whoever wrote last.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from sweetshop.domain.exceptions import InsufficientStockError, ValidationError
from sweetshop.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class Item:
    """Aggregate root for the catalog.

    Invariants:
    - ``stock_quantity`` is never negative
    - ``unit_price`` is always greater than zero
    - ``name`` and ``category`` are never blank

    Use ``Item.create()`` for new items; ``__init__`` stays simple so a
    repository can reconstitute stored records without re-validating.
    """

    id: str | None
    name: str
    category: str
    unit_price: Money
    stock_quantity: int
    version: int = 0

    # --- Factory (used for NEW items only) ------------------------------------

    @staticmethod
    def create(
        name: str,
        category: str,
        unit_price: str | int | Decimal | Money,
        stock_quantity: int,
    ) -> Item:
        """Build an unsaved item, enforcing all field rules."""
        name, category, price, stock = _validated_fields(
            name, category, unit_price, stock_quantity
        )
        return Item(
            id=None,
            name=name,
            category=category,
            unit_price=price,
            stock_quantity=stock,
        )

    # --- Transitions ----------------------------------------------------------

    def revised(
        self,
        name: str,
        category: str,
        unit_price: str | int | Decimal | Money,
        stock_quantity: int,
    ) -> Item:
        """Replace every mutable field at once (same rules as ``create``)."""
        name, category, price, stock = _validated_fields(
            name, category, unit_price, stock_quantity
        )
        return replace(
            self,
            name=name,
            category=category,
            unit_price=price,
            stock_quantity=stock,
            version=self.version + 1,
        )

    def sold(self, quantity: Quantity) -> Item:
        """Return the item after selling *quantity* units.

        Raises InsufficientStockError, leaving this snapshot untouched,
        when fewer units are in stock than requested.
        """
        if quantity.value > self.stock_quantity:
            raise InsufficientStockError(
                self.name, requested=quantity.value, available=self.stock_quantity
            )
        return replace(
            self,
            stock_quantity=self.stock_quantity - quantity.value,
            version=self.version + 1,
        )

    def restocked(self, quantity: Quantity) -> Item:
        """Return the item after adding *quantity* units (no upper bound)."""
        return replace(
            self,
            stock_quantity=self.stock_quantity + quantity.value,
            version=self.version + 1,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_quantity == 0


class StockMutationKind(Enum):
    SELL = "SELL"
    RESTOCK = "RESTOCK"


@dataclass(frozen=True)
class StockMutationRequest:
    """One sell or restock call.  Never persisted."""

    item_id: str
    delta: Quantity
    kind: StockMutationKind

    @staticmethod
    def sell(item_id: str, quantity: int) -> StockMutationRequest:
        return StockMutationRequest(item_id, Quantity(quantity), StockMutationKind.SELL)

    @staticmethod
    def restock(item_id: str, quantity: int) -> StockMutationRequest:
        return StockMutationRequest(
            item_id, Quantity(quantity), StockMutationKind.RESTOCK
        )


def normalize_name(name: str) -> str:
    """Key used for item-name uniqueness: trimmed and case-folded."""
    return name.strip().casefold()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _validated_fields(
    name: str,
    category: str,
    unit_price: str | int | Decimal | Money,
    stock_quantity: int,
) -> tuple[str, str, Money, int]:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Item name is required")
    if not isinstance(category, str) or not category.strip():
        raise ValidationError("Item category is required")

    price = Money.of(unit_price)
    if not price.is_positive:
        raise ValidationError("Unit price must be greater than zero")

    if not isinstance(stock_quantity, int) or isinstance(stock_quantity, bool):
        raise ValidationError(
            f"Stock quantity must be an integer, got {type(stock_quantity).__name__}"
        )
    if stock_quantity < 0:
        raise ValidationError("Stock quantity cannot be negative")

    return name.strip(), category.strip(), price, stock_quantity
