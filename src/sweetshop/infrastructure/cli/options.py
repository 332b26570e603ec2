"""Pieces shared by every command module."""

from __future__ import annotations

from collections.abc import Callable
from typing import NoReturn

import click

from sweetshop.application.dto import ItemDTO
from sweetshop.domain.exceptions import DomainException
from sweetshop.infrastructure.bootstrap import access_guard, inventory_ledger
from sweetshop.infrastructure.config import ConfigError, Settings

token_option = click.option(
    "--token",
    envvar="SWEETSHOP_TOKEN",
    default=None,
    help="Session token from 'auth login' (or set SWEETSHOP_TOKEN).",
)


def current_settings() -> Settings:
    ctx = click.get_current_context()
    return ctx.find_object(Settings) or Settings.from_env()


def fail(exc: DomainException | ConfigError) -> NoReturn:
    """Show a stable error kind plus message, never a traceback."""
    if isinstance(exc, DomainException):
        raise click.ClickException(f"{exc.kind}: {exc}")
    raise click.ClickException(f"CONFIG: {exc}")


def run(action: Callable[[], object]) -> object:
    try:
        return action()
    except (DomainException, ConfigError) as exc:
        fail(exc)


def echo_items(items: list[ItemDTO]) -> None:
    if not items:
        click.echo("No items found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<16} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 67)
    for item in items:
        click.echo(
            f"{item.id:<6} {item.name:<24} {item.category:<16} "
            f"{item.unit_price:>10} {item.stock_quantity:>7}"
        )


def echo_item(item: ItemDTO) -> None:
    click.echo(f"Item #{item.id}  {item.name}")
    click.echo(f"Category: {item.category}")
    click.echo(f"Price:    {item.unit_price}")
    click.echo(f"Stock:    {item.stock_quantity}")


def wired(handler_cls):
    """Build an item handler with the configured guard and ledger."""
    config = current_settings()
    return handler_cls(guard=access_guard(config), ledger=inventory_ledger(config))
