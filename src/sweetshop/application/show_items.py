"""Application services: item queries (list, show, search).

All three are PUBLIC: they still pass through the access guard so that
every operation has exactly one admission point.
"""

from __future__ import annotations

from sweetshop.application.access_guard import AccessGuard, AccessLevel
from sweetshop.application.dto import ItemDTO, SearchCriteria
from sweetshop.domain.service.inventory_ledger import InventoryLedger


class ListItemsHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(self, token: str | None = None) -> list[ItemDTO]:
        self._guard.require(token, AccessLevel.PUBLIC)
        return [ItemDTO.from_item(item) for item in self._ledger.get_all()]


class ShowItemHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(self, item_id: str, token: str | None = None) -> ItemDTO:
        self._guard.require(token, AccessLevel.PUBLIC)
        return ItemDTO.from_item(self._ledger.get_by_id(item_id))


class SearchItemsHandler:

    def __init__(self, guard: AccessGuard, ledger: InventoryLedger) -> None:
        self._guard = guard
        self._ledger = ledger

    def handle(self, criteria: SearchCriteria, token: str | None = None) -> list[ItemDTO]:
        self._guard.require(token, AccessLevel.PUBLIC)
        items = self._ledger.search(
            name=criteria.name,
            category=criteria.category,
            min_price=criteria.min_price,
            max_price=criteria.max_price,
        )
        return [ItemDTO.from_item(item) for item in items]
