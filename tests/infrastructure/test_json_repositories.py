"""Tests for the JSON-file repositories (real files under tmp_path)."""

import json
import multiprocessing
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from sweetshop.domain.exceptions import ConflictError, InsufficientStockError
from sweetshop.domain.model.account import Account, Role
from sweetshop.domain.model.value_objects import Money
from sweetshop.domain.service.inventory_ledger import InventoryLedger
from sweetshop.infrastructure.persistence.json_account_repository import (
    JsonAccountRepository,
)
from sweetshop.infrastructure.persistence.json_item_repository import (
    JsonItemRepository,
)
from tests.fakes import make_item


class TestJsonItemRepository:

    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "items.json"
        JsonItemRepository(path)
        assert json.loads(path.read_text()) == {"last_id": 0, "items": []}

    def test_add_assigns_sequential_ids_and_persists(self, tmp_path):
        path = tmp_path / "items.json"
        repo = JsonItemRepository(path)
        first = repo.add(make_item("Cake"))
        second = repo.add(make_item("Tart"))
        assert (first.id, second.id) == ("1", "2")

        reopened = JsonItemRepository(path)
        assert reopened.get_by_id("2").name == "Tart"
        assert reopened.get_by_id("1").unit_price == Money.of("50")

    def test_ids_are_not_reused_after_delete(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        repo.add(make_item("Cake"))
        repo.remove("1")
        assert repo.add(make_item("Tart")).id == "2"

    def test_duplicate_name_conflicts(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        repo.add(make_item("Cake"))
        with pytest.raises(ConflictError):
            repo.add(make_item("CAKE"))

    def test_get_by_name(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        repo.add(make_item("Gulab Jamun"))
        assert repo.get_by_name(" gulab jamun").name == "Gulab Jamun"
        assert repo.get_by_name("Cake") is None

    def test_compare_and_set_checks_version(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        item = repo.add(make_item("Cake", stock=5))

        newer = replace(item, stock_quantity=4, version=1)
        assert repo.compare_and_set(newer, expected_version=0)
        stale = replace(item, stock_quantity=3, version=1)
        assert not repo.compare_and_set(stale, expected_version=0)
        assert repo.get_by_id(item.id).stock_quantity == 4

    def test_compare_and_set_on_missing_item(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        assert not repo.compare_and_set(make_item(item_id="9"), expected_version=0)

    def test_remove(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        item = repo.add(make_item("Cake"))
        assert repo.remove(item.id)
        assert not repo.remove(item.id)
        assert repo.list_all() == []

    def test_works_under_the_ledger(self, tmp_path):
        ledger = InventoryLedger(JsonItemRepository(tmp_path / "items.json"))
        item = ledger.create("Cake", "Western", "300", 5)
        ledger.sell(item.id, 2)
        ledger.restock(item.id, 7)
        assert ledger.get_by_id(item.id).stock_quantity == 10
        assert ledger.get_by_id(item.id).version == 2

    def test_no_temp_files_left_behind(self, tmp_path):
        repo = JsonItemRepository(tmp_path / "items.json")
        repo.add(make_item("Cake"))
        assert not list(tmp_path.glob("*.tmp"))


class TestJsonAccountRepository:

    def _account(self, username="alice", email="alice@example.com", role=Role.CUSTOMER):
        return Account.create(username, email, "$2b$04$hash", role)

    def test_add_and_lookup(self, tmp_path):
        path = tmp_path / "accounts.json"
        repo = JsonAccountRepository(path)
        stored = repo.add(self._account(role=Role.MANAGER))

        assert stored.id
        found = JsonAccountRepository(path).get_by_username("alice")
        assert found == stored
        assert found.role == Role.MANAGER

    def test_exists_checks(self, tmp_path):
        repo = JsonAccountRepository(tmp_path / "accounts.json")
        repo.add(self._account())
        assert repo.exists_by_username("alice")
        assert not repo.exists_by_username("bob")
        assert repo.exists_by_email(" Alice@Example.com ")

    def test_duplicates_conflict(self, tmp_path):
        repo = JsonAccountRepository(tmp_path / "accounts.json")
        repo.add(self._account())
        with pytest.raises(ConflictError, match="Username"):
            repo.add(self._account(email="other@example.com"))
        with pytest.raises(ConflictError, match="Email"):
            repo.add(self._account(username="bob"))


def _sell_one_in_subprocess(path, barrier, results):
    """Child-process body: its own repository handle on the shared file."""
    ledger = InventoryLedger(JsonItemRepository(path))
    barrier.wait(timeout=60)
    try:
        ledger.sell("1", 1)
    except InsufficientStockError:
        results.put("short")
    else:
        results.put("ok")


def _on_own_threads(calls):
    barrier = threading.Barrier(len(calls))

    def run(call):
        barrier.wait()
        try:
            return call()
        except Exception as exc:  # outcome under test, not an error
            return exc

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        return list(pool.map(run, calls))


class TestSharedFile:
    """Several repository handles, one file: the CLI's situation."""

    def test_twenty_threads_ten_units(self, tmp_path):
        path = tmp_path / "items.json"
        JsonItemRepository(path).add(make_item(stock=10))

        def sell():
            return InventoryLedger(JsonItemRepository(path)).sell("1", 1)

        outcomes = _on_own_threads([sell] * 20)

        assert sum(not isinstance(o, Exception) for o in outcomes) == 10
        assert sum(isinstance(o, InsufficientStockError) for o in outcomes) == 10
        assert JsonItemRepository(path).get_by_id("1").stock_quantity == 0

    def test_twenty_processes_ten_units(self, tmp_path):
        path = tmp_path / "items.json"
        JsonItemRepository(path).add(make_item(stock=10))

        ctx = multiprocessing.get_context("spawn")
        barrier = ctx.Barrier(20)
        results = ctx.Queue()
        workers = [
            ctx.Process(target=_sell_one_in_subprocess, args=(path, barrier, results))
            for _ in range(20)
        ]
        for worker in workers:
            worker.start()
        outcomes = [results.get(timeout=120) for _ in workers]
        for worker in workers:
            worker.join(timeout=60)

        assert outcomes.count("ok") == 10
        assert outcomes.count("short") == 10
        stored = JsonItemRepository(path).get_by_id("1")
        assert stored.stock_quantity == 0
        assert stored.version == 10

    def test_concurrent_registrations_of_one_username(self, tmp_path):
        path = tmp_path / "accounts.json"

        def register(i):
            account = Account.create(
                "alice", f"alice{i}@example.com", "$2b$04$hash", Role.CUSTOMER
            )
            return lambda: JsonAccountRepository(path).add(account)

        outcomes = _on_own_threads([register(i) for i in range(10)])

        assert sum(not isinstance(o, Exception) for o in outcomes) == 1
        assert sum(isinstance(o, ConflictError) for o in outcomes) == 9
        assert len(json.loads(path.read_text())) == 1
