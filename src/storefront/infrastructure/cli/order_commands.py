"""CLI commands for the order lifecycle."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import OrderStatus
from storefront.infrastructure import bootstrap


def _parse_item(raw: str) -> OrderItemSpec:
    """Parse 'PRODUCT_ID:QTY[:SIZE[:COLOR[:PRICE]]]' into an OrderItemSpec."""
    parts = [p.strip() for p in raw.split(":")]
    if len(parts) < 2 or len(parts) > 5 or not parts[0]:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'ProductId:Qty[:Size[:Color[:Price]]]'."
        )
    try:
        qty = int(parts[1])
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{parts[1]}' for product '{parts[0]}'.")
    size, color, price = (parts[2:] + [None, None, None])[:3]
    return OrderItemSpec(
        product_id=parts[0],
        quantity=qty,
        size=size or None,
        color=color or None,
        price=price or "0",
    )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (id={dto.id}, status={dto.status})")
    click.echo(f"Email:    {dto.email}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.admin_status:
        click.echo(f"Admin:    {dto.admin_status}")
    if dto.shipper_name:
        click.echo(f"Shipper:  {dto.shipper_name}")
    if dto.cancelled_by:
        click.echo(f"Cancelled by {dto.cancelled_by} at {dto.cancelled_at}")
    click.echo()
    click.echo(f"  {'Product':<14} {'Size':<10} {'Color':<10} {'Qty':>5} {'Total':>10}")
    click.echo(f"  {'-'*53}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<14} {item.size:<10} {item.color:<10} "
            f"{item.quantity:>5} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*53}")
    click.echo(f"  {'Order Total':<41} {dto.total:>10}")


@click.command("create")
@click.option("--email", required=True, help="Customer email.")
@click.option("--user-id", default=None, help="Account id; omit for guest orders.")
@click.option(
    "--item", "items", required=True, multiple=True,
    help="Item as 'ProductId:Qty[:Size[:Color[:Price]]]'. Repeatable.",
)
@click.option("--street", required=True, help="Street address.")
@click.option("--region", required=True, help="Region / state.")
@click.option("--city", required=True, help="City / area.")
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
@click.option("--mobile", default=None)
@click.option("--zip", "zip_code", default=None)
def order_create(
    email: str,
    user_id: str | None,
    items: tuple[str, ...],
    street: str,
    region: str,
    city: str,
    first_name: str | None,
    last_name: str | None,
    mobile: str | None,
    zip_code: str | None,
) -> None:
    """Place a new order (checks stock, does not reserve it)."""
    specs = [_parse_item(raw) for raw in items]
    address = {
        "street_address": street,
        "region_state": region,
        "city_area": city,
        "first_name": first_name,
        "last_name": last_name,
        "mobile_number": mobile,
        "zip_postal_code": zip_code,
    }

    try:
        dto = bootstrap.create_order_handler().handle(
            email=email, item_specs=specs, address=address, user_id=user_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    try:
        dto = bootstrap.show_order_handler().handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--email", default=None, help="Only orders placed with this email.")
def order_list(email: str | None) -> None:
    """List orders, newest first."""
    orders = bootstrap.list_orders_handler().handle(email=email)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<22} {'Status':<20} {'Email':<28} {'Total':>10}")
    click.echo("-" * 83)
    for dto in orders:
        click.echo(f"{dto.order_number:<22} {dto.status:<20} {dto.email:<28} {dto.total:>10}")


@click.command("approve")
@click.option("--id", "order_id", required=True, help="Order ID to approve.")
def order_approve(order_id: str) -> None:
    """Approve an order (reserves stock)."""
    try:
        result = bootstrap.approve_order_handler().handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.status_changed:
        click.echo(f"Order {order_id} approved, stock reserved.")
    else:
        click.echo(f"Order {order_id} was already approved.")


@click.command("refuse")
@click.option("--id", "order_id", required=True, help="Order ID to refuse.")
def order_refuse(order_id: str) -> None:
    """Refuse an order (restores stock if it was approved)."""
    try:
        result = bootstrap.refuse_order_handler().handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.status_changed:
        click.echo(f"Order {order_id} refused.")
    else:
        click.echo(f"Order {order_id} was already refused.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option(
    "--as", "role", type=click.Choice(["user", "admin"]), default="user", show_default=True
)
@click.option("--email", default=None, help="Email of the cancelling user.")
@click.option("--user-id", default=None, help="Account id of the cancelling user.")
@click.option("--reason", default=None)
def order_cancel(
    order_id: str,
    role: str,
    email: str | None,
    user_id: str | None,
    reason: str | None,
) -> None:
    """Cancel an order (restores stock if it was approved)."""
    actor = Actor.admin(user_id, email) if role == "admin" else Actor.user(user_id, email)

    try:
        bootstrap.cancel_order_handler().handle(order_id, actor, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled.")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID to update.")
@click.option(
    "--to", "target", required=True,
    type=click.Choice([s.value for s in OrderStatus]), help="New status.",
)
@click.option("--admin-status", default=None, help="Free-text admin annotation.")
@click.option("--shipper", "shipper_name", default=None, help="Shipper name.")
def order_status(
    order_id: str,
    target: str,
    admin_status: str | None,
    shipper_name: str | None,
) -> None:
    """Move an order to another status."""
    try:
        result = bootstrap.update_order_status_handler().handle(
            order_id, target, admin_status=admin_status, shipper_name=shipper_name
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.status_changed:
        click.echo(f"Order {order_id} is now {result.order.status}.")
    else:
        click.echo(f"Order {order_id} already {result.order.status}; details updated.")
