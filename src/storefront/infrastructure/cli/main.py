import logging

import click

from storefront.infrastructure.cli.order_commands import (
    order_approve,
    order_cancel,
    order_create,
    order_list,
    order_refuse,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.stock_commands import (
    stock_check,
    stock_reconcile,
    stock_show,
)
from storefront.infrastructure.config import get_settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """Storefront order lifecycle and inventory."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def stock() -> None:
    """Inspect and reconcile stock."""


# Register subcommands
order.add_command(order_approve)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_refuse)
order.add_command(order_show)
order.add_command(order_status)
stock.add_command(stock_check)
stock.add_command(stock_reconcile)
stock.add_command(stock_show)
