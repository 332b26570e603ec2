import click

from sweetshop.infrastructure.cli.auth_commands import (
    auth_login,
    auth_register,
    auth_register_manager,
)
from sweetshop.infrastructure.cli.item_commands import (
    item_add,
    item_delete,
    item_list,
    item_search,
    item_show,
    item_update,
)
from sweetshop.infrastructure.cli.options import fail
from sweetshop.infrastructure.cli.stock_commands import stock_restock, stock_sell
from sweetshop.infrastructure.config import ConfigError, Settings
from sweetshop.infrastructure.log_config import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Sweet Shop: inventory and accounts"""
    try:
        config = Settings.from_env()
    except ConfigError as exc:
        fail(exc)
    configure_logging(config.log_level)
    ctx.obj = config


@cli.group()
def auth() -> None:
    """Register and log in."""


@cli.group()
def item() -> None:
    """Browse and manage the catalog."""


@cli.group()
def stock() -> None:
    """Sell and restock items."""


# Register subcommands
auth.add_command(auth_login)
auth.add_command(auth_register)
auth.add_command(auth_register_manager)
item.add_command(item_add)
item.add_command(item_delete)
item.add_command(item_list)
item.add_command(item_search)
item.add_command(item_show)
item.add_command(item_update)
stock.add_command(stock_restock)
stock.add_command(stock_sell)
