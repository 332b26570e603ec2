"""Application service: Restock Item use case (managers only)."""

from __future__ import annotations

from sweetshop.application.access_guard import AccessGuard, AccessLevel
from sweetshop.application.dto import ItemDTO
from sweetshop.domain.model.item import StockMutationRequest
from sweetshop.domain.service.inventory_ledger import InventoryLedger


class RestockItemHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(self, token: str | None, item_id: str, quantity: int) -> ItemDTO:
        principal = self._guard.require(token, AccessLevel.MANAGER)
        request = StockMutationRequest.restock(item_id, quantity)
        item = self._ledger.apply(request, actor=principal.identity)
        return ItemDTO.from_item(item)
