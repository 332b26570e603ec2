"""CLI commands for the item catalog."""

from __future__ import annotations

import click

from sweetshop.application.add_item import AddItemHandler
from sweetshop.application.dto import SearchCriteria
from sweetshop.application.remove_item import RemoveItemHandler
from sweetshop.application.show_items import (
    ListItemsHandler,
    SearchItemsHandler,
    ShowItemHandler,
)
from sweetshop.application.update_item import UpdateItemHandler
from sweetshop.infrastructure.cli.options import (
    echo_item,
    echo_items,
    run,
    token_option,
    wired,
)


@click.command("list")
@token_option
def item_list(token: str | None) -> None:
    """List every item in the catalog."""
    echo_items(run(lambda: wired(ListItemsHandler).handle(token)))


@click.command("show")
@click.option("--id", "item_id", required=True, help="Item ID.")
@token_option
def item_show(item_id: str, token: str | None) -> None:
    """Show one item."""
    echo_item(run(lambda: wired(ShowItemHandler).handle(item_id, token)))


@click.command("search")
@click.option("--name", default=None, help="Part of the item name.")
@click.option("--category", default=None, help="Exact category.")
@click.option("--min-price", default=None, help="Lowest unit price (inclusive).")
@click.option("--max-price", default=None, help="Highest unit price (inclusive).")
@token_option
def item_search(
    name: str | None,
    category: str | None,
    min_price: str | None,
    max_price: str | None,
    token: str | None,
) -> None:
    """Search items; all given filters must match."""
    criteria = SearchCriteria(
        name=name, category=category, min_price=min_price, max_price=max_price
    )
    echo_items(run(lambda: wired(SearchItemsHandler).handle(criteria, token)))


@click.command("add")
@click.option("--name", required=True, help="Unique item name.")
@click.option("--category", required=True, help="Item category.")
@click.option("--price", required=True, help="Unit price (e.g. 50.00).")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
@token_option
def item_add(
    name: str, category: str, price: str, quantity: int, token: str | None
) -> None:
    """Add a new item (managers only)."""
    item = run(
        lambda: wired(AddItemHandler).handle(token, name, category, price, quantity)
    )
    click.echo(f"Item #{item.id} '{item.name}' added at {item.unit_price}")


@click.command("update")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--name", required=True, help="New name.")
@click.option("--category", required=True, help="New category.")
@click.option("--price", required=True, help="New unit price.")
@click.option("--quantity", required=True, type=int, help="New stock level.")
@token_option
def item_update(
    item_id: str,
    name: str,
    category: str,
    price: str,
    quantity: int,
    token: str | None,
) -> None:
    """Replace every field of an item (managers only)."""
    item = run(
        lambda: wired(UpdateItemHandler).handle(
            token, item_id, name, category, price, quantity
        )
    )
    click.echo(f"Item #{item.id} updated.")
    echo_item(item)


@click.command("delete")
@click.option("--id", "item_id", required=True, help="Item ID.")
@token_option
def item_delete(item_id: str, token: str | None) -> None:
    """Delete an item (managers only)."""
    run(lambda: wired(RemoveItemHandler).handle(token, item_id))
    click.echo(f"Item #{item_id} deleted.")
