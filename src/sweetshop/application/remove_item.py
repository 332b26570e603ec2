"""Application service: Remove Item use case (managers only)."""

from __future__ import annotations

from sweetshop.application.access_guard import AccessGuard, AccessLevel
from sweetshop.domain.service.inventory_ledger import InventoryLedger


class RemoveItemHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(self, token: str | None, item_id: str) -> None:
        principal = self._guard.require(token, AccessLevel.MANAGER)
        self._ledger.delete(item_id, actor=principal.identity)
