"""Application service: Update Item use case (managers only)."""

from __future__ import annotations

from sweetshop.application.access_guard import AccessGuard, AccessLevel
from sweetshop.application.dto import ItemDTO
from sweetshop.domain.service.inventory_ledger import InventoryLedger


class UpdateItemHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(
        self,
        token: str | None,
        item_id: str,
        name: str,
        category: str,
        unit_price: str,
        stock_quantity: int,
    ) -> ItemDTO:
        """Replace every field of an existing item.

        Unlike adding, this does not check the new name against other
        items.
        """
        principal = self._guard.require(token, AccessLevel.MANAGER)
        item = self._ledger.update(
            item_id,
            name,
            category,
            unit_price,
            stock_quantity,
            actor=principal.identity,
        )
        return ItemDTO.from_item(item)
