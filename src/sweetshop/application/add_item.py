"""Application service: Add Item use case (managers only)."""

from __future__ import annotations

from sweetshop.application.access_guard import AccessGuard, AccessLevel
from sweetshop.application.dto import ItemDTO
from sweetshop.domain.service.inventory_ledger import InventoryLedger


class AddItemHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(
        self,
        token: str | None,
        name: str,
        category: str,
        unit_price: str,
        stock_quantity: int,
    ) -> ItemDTO:
        """Add a new item to the catalog.  Fails on a duplicate name."""
        principal = self._guard.require(token, AccessLevel.MANAGER)
        item = self._ledger.create(
            name, category, unit_price, stock_quantity, actor=principal.identity
        )
        return ItemDTO.from_item(item)
