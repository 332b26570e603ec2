"""Thread-safe in-memory implementation of ItemRepository.

Each item has its own lock, so writers to unrelated items never wait on
each other.  A short structural lock guards only the dictionaries that map
ids to items and locks.  Lock order is always item lock, then structural
lock.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace

from sweetshop.domain.exceptions import ConflictError
from sweetshop.domain.model.item import Item, normalize_name
from sweetshop.domain.repository.item_repository import ItemRepository


class InMemoryItemRepository(ItemRepository):

    def __init__(self, items: list[Item] | None = None) -> None:
        self._items: dict[str, Item] = {}
        self._item_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        for item in items or []:
            self.add(item)

    # --- ItemRepository interface ---------------------------------------------

    def get_by_id(self, item_id: str) -> Item | None:
        with self._lock:
            return self._items.get(item_id)

    def get_by_name(self, name: str) -> Item | None:
        key = normalize_name(name)
        with self._lock:
            for item in self._items.values():
                if normalize_name(item.name) == key:
                    return item
        return None

    def list_all(self) -> list[Item]:
        with self._lock:
            return list(self._items.values())

    def add(self, item: Item) -> Item:
        key = normalize_name(item.name)
        with self._lock:
            if any(normalize_name(i.name) == key for i in self._items.values()):
                raise ConflictError(f"Item '{item.name}' already exists")
            item_id = item.id if item.id is not None else self._next_id()
            if item_id in self._items:
                raise ConflictError(f"Item with ID '{item_id}' already exists")
            stored = replace(item, id=item_id)
            self._items[item_id] = stored
            self._item_locks[item_id] = threading.Lock()
            return stored

    def compare_and_set(self, item: Item, expected_version: int) -> bool:
        item_lock = self._lock_for(item.id)
        if item_lock is None:
            return False
        with item_lock:
            with self._lock:
                current = self._items.get(item.id)
                if current is None or current.version != expected_version:
                    return False
                self._items[item.id] = item
                return True

    def remove(self, item_id: str) -> bool:
        item_lock = self._lock_for(item_id)
        if item_lock is None:
            return False
        with item_lock:
            with self._lock:
                removed = self._items.pop(item_id, None)
                self._item_locks.pop(item_id, None)
        return removed is not None

    # --- Internal helpers -----------------------------------------------------

    def _lock_for(self, item_id: str | None) -> threading.Lock | None:
        if item_id is None:
            return None
        with self._lock:
            return self._item_locks.get(item_id)

    def _next_id(self) -> str:
        # Caller holds self._lock
        while True:
            candidate = str(next(self._ids))
            if candidate not in self._items:
                return candidate
