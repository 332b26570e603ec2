"""Integration tests for the item use cases, guard included."""

from datetime import timedelta

import pytest

from sweetshop.application.access_guard import AccessGuard
from sweetshop.application.add_item import AddItemHandler
from sweetshop.application.dto import SearchCriteria
from sweetshop.application.remove_item import RemoveItemHandler
from sweetshop.application.restock_item import RestockItemHandler
from sweetshop.application.sell_item import SellItemHandler
from sweetshop.application.show_items import (
    ListItemsHandler,
    SearchItemsHandler,
    ShowItemHandler,
)
from sweetshop.application.update_item import UpdateItemHandler
from sweetshop.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    EntityNotFoundError,
    InsufficientStockError,
)
from sweetshop.domain.model.account import Role
from sweetshop.domain.service.inventory_ledger import InventoryLedger
from sweetshop.infrastructure.persistence.memory_item_repository import (
    InMemoryItemRepository,
)
from sweetshop.infrastructure.security.token_service import JwtTokenService
from tests.fakes import SECRET, FakeClock, make_item


class Shop:

    def __init__(self) -> None:
        self.repo = InMemoryItemRepository(
            [
                make_item("Gulab Jamun", "Indian", "50", 100, item_id="1"),
                make_item("Cake", "Western", "300", 5, item_id="2"),
            ]
        )
        self.ledger = InventoryLedger(self.repo)
        self.tokens = JwtTokenService(SECRET, ttl=timedelta(hours=1), clock=FakeClock())
        self.guard = AccessGuard(self.tokens)
        self.manager = self.tokens.issue("maya", Role.MANAGER)
        self.customer = self.tokens.issue("carol", Role.CUSTOMER)

    def handler(self, cls):
        return cls(self.guard, self.ledger)


@pytest.fixture
def shop():
    return Shop()


class TestQueries:

    def test_anyone_can_list(self, shop):
        items = shop.handler(ListItemsHandler).handle()
        assert {i.name for i in items} == {"Gulab Jamun", "Cake"}

    def test_show_formats_price(self, shop):
        item = shop.handler(ShowItemHandler).handle("2", token=shop.customer)
        assert item.unit_price == "300.00"
        assert item.stock_quantity == 5

    def test_show_missing(self, shop):
        with pytest.raises(EntityNotFoundError):
            shop.handler(ShowItemHandler).handle("42")

    def test_search(self, shop):
        result = shop.handler(SearchItemsHandler).handle(SearchCriteria(category="Indian"))
        assert [i.name for i in result] == ["Gulab Jamun"]
        assert shop.handler(SearchItemsHandler).handle(SearchCriteria(min_price="100"))[0].name == "Cake"
        assert shop.handler(SearchItemsHandler).handle(SearchCriteria(name="zzz")) == []


class TestManagerOperations:

    def test_manager_adds_item(self, shop):
        item = shop.handler(AddItemHandler).handle(shop.manager, "Ladoo", "Indian", "20", 40)
        assert shop.ledger.get_by_id(item.id).name == "Ladoo"

    def test_customer_cannot_add(self, shop):
        with pytest.raises(AuthorizationError):
            shop.handler(AddItemHandler).handle(shop.customer, "Ladoo", "Indian", "20", 40)
        assert len(shop.ledger.get_all()) == 2

    def test_anonymous_cannot_add(self, shop):
        with pytest.raises(AuthenticationError):
            shop.handler(AddItemHandler).handle(None, "Ladoo", "Indian", "20", 40)

    def test_manager_updates_item(self, shop):
        item = shop.handler(UpdateItemHandler).handle(
            shop.manager, "2", "Cheesecake", "Western", "320", 9
        )
        assert item.name == "Cheesecake"
        assert item.stock_quantity == 9

    def test_customer_cannot_update(self, shop):
        with pytest.raises(AuthorizationError):
            shop.handler(UpdateItemHandler).handle(
                shop.customer, "2", "Cheesecake", "Western", "320", 9
            )
        assert shop.ledger.get_by_id("2").name == "Cake"

    def test_manager_deletes_item(self, shop):
        shop.handler(RemoveItemHandler).handle(shop.manager, "2")
        assert [i.id for i in shop.ledger.get_all()] == ["1"]

    def test_customer_cannot_delete(self, shop):
        with pytest.raises(AuthorizationError):
            shop.handler(RemoveItemHandler).handle(shop.customer, "2")
        assert len(shop.ledger.get_all()) == 2

    def test_manager_restocks(self, shop):
        item = shop.handler(RestockItemHandler).handle(shop.manager, "2", 10)
        assert item.stock_quantity == 15

    def test_customer_cannot_restock(self, shop):
        with pytest.raises(AuthorizationError):
            shop.handler(RestockItemHandler).handle(shop.customer, "2", 10)
        assert shop.ledger.get_by_id("2").stock_quantity == 5


class TestSell:

    @pytest.mark.parametrize("who", ["customer", "manager"])
    def test_any_logged_in_account_can_buy(self, shop, who):
        item = shop.handler(SellItemHandler).handle(getattr(shop, who), "2", 2)
        assert item.stock_quantity == 3

    def test_anonymous_cannot_buy(self, shop):
        with pytest.raises(AuthenticationError):
            shop.handler(SellItemHandler).handle(None, "2", 1)
        assert shop.ledger.get_by_id("2").stock_quantity == 5

    def test_forged_token_cannot_buy(self, shop):
        with pytest.raises(AuthenticationError):
            shop.handler(SellItemHandler).handle(shop.customer + "x", "2", 1)

    def test_insufficient_stock(self, shop):
        with pytest.raises(InsufficientStockError) as excinfo:
            shop.handler(SellItemHandler).handle(shop.customer, "2", 6)
        assert excinfo.value.available == 5
