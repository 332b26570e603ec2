"""CLI commands that move stock."""

from __future__ import annotations

import click

from sweetshop.application.restock_item import RestockItemHandler
from sweetshop.application.sell_item import SellItemHandler
from sweetshop.infrastructure.cli.options import run, token_option, wired


@click.command("sell")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--quantity", required=True, type=int, help="Units to buy.")
@token_option
def stock_sell(item_id: str, quantity: int, token: str | None) -> None:
    """Buy units of an item (any logged-in account)."""
    item = run(lambda: wired(SellItemHandler).handle(token, item_id, quantity))
    click.echo(f"Sold {quantity} x {item.name}, {item.stock_quantity} left.")


@click.command("restock")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--quantity", required=True, type=int, help="Units to add.")
@token_option
def stock_restock(item_id: str, quantity: int, token: str | None) -> None:
    """Add units to an item's stock (managers only)."""
    item = run(lambda: wired(RestockItemHandler).handle(token, item_id, quantity))
    click.echo(f"Restocked {item.name} by {quantity}, {item.stock_quantity} in stock.")
