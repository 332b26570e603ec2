"""JSON-file-backed implementation of ItemRepository.

The whole file is one record set, so every read-modify-write runs under
an exclusive lock: a thread lock within the process and a ``.lock`` file
next to the data file across processes, since each CLI command is its own
process.  Writes go to a temporary file that is then renamed over the
original, so a crash never leaves half a file behind.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path

from filelock import FileLock

from sweetshop.domain.exceptions import ConflictError
from sweetshop.domain.model.item import Item, normalize_name
from sweetshop.domain.model.value_objects import Money
from sweetshop.domain.repository.item_repository import ItemRepository


class JsonItemRepository(ItemRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(file_path.with_name(file_path.name + ".lock"))
        with self._exclusive():
            self._ensure_file()

    # --- ItemRepository interface ---------------------------------------------

    def get_by_id(self, item_id: str) -> Item | None:
        with self._exclusive():
            for raw in self._load_raw()["items"]:
                if raw["id"] == item_id:
                    return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Item | None:
        key = normalize_name(name)
        with self._exclusive():
            for raw in self._load_raw()["items"]:
                if normalize_name(raw["name"]) == key:
                    return self._to_domain(raw)
        return None

    def list_all(self) -> list[Item]:
        with self._exclusive():
            return [self._to_domain(raw) for raw in self._load_raw()["items"]]

    def add(self, item: Item) -> Item:
        key = normalize_name(item.name)
        with self._exclusive():
            data = self._load_raw()
            if any(normalize_name(raw["name"]) == key for raw in data["items"]):
                raise ConflictError(f"Item '{item.name}' already exists")

            data["last_id"] += 1
            stored = replace(item, id=str(data["last_id"]))
            data["items"].append(self._to_raw(stored))
            self._persist_raw(data)
            return stored

    def compare_and_set(self, item: Item, expected_version: int) -> bool:
        with self._exclusive():
            data = self._load_raw()
            for i, raw in enumerate(data["items"]):
                if raw["id"] == item.id:
                    if raw["version"] != expected_version:
                        return False
                    data["items"][i] = self._to_raw(item)
                    self._persist_raw(data)
                    return True
        return False

    def remove(self, item_id: str) -> bool:
        with self._exclusive():
            data = self._load_raw()
            remaining = [raw for raw in data["items"] if raw["id"] != item_id]
            if len(remaining) == len(data["items"]):
                return False
            data["items"] = remaining
            self._persist_raw(data)
        return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: Item) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "category": item.category,
            "unit_price": str(item.unit_price.amount),
            "stock_quantity": item.stock_quantity,
            "version": item.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Item:
        return Item(
            id=raw["id"],
            name=raw["name"],
            category=raw["category"],
            unit_price=Money.of(raw["unit_price"]),
            stock_quantity=raw["stock_quantity"],
            version=raw.get("version", 0),
        )

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with self._lock, self._file_lock:
            yield

    def _load_raw(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, data: dict) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(data, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._persist_raw({"last_id": 0, "items": []})
