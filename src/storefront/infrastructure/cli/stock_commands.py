"""CLI commands for product stock."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure import bootstrap


@click.command("check")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--size", default=None)
@click.option("--color", default=None)
@click.option("--qty", "quantity", default=1, show_default=True, type=int)
def stock_check(product_id: str, size: str | None, color: str | None, quantity: int) -> None:
    """Check whether a variant can be ordered."""
    result = bootstrap.check_stock_handler().handle(product_id, size, color, quantity)

    if result.available:
        click.echo(f"Available ({result.available_stock} in stock)")
    else:
        click.echo(f"Not available: {result.reason}")


@click.command("show")
@click.option("--product", "product_id", required=True, help="Product ID.")
def stock_show(product_id: str) -> None:
    """Show a product's stock per variant."""
    try:
        lines = bootstrap.show_stock_handler().handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No stock data (unmanaged product).")
        return

    click.echo(f"{'Variant':<30} {'Stock':>8}")
    click.echo("-" * 39)
    for line in lines:
        click.echo(f"{line.key:<30} {line.quantity:>8}")


@click.command("reconcile")
def stock_reconcile() -> None:
    """Retry stock releases that failed earlier."""
    try:
        result = bootstrap.reconcile_stock_handler().handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Resolved {result.resolved} discrepancy(ies), {result.still_open} still open.")
