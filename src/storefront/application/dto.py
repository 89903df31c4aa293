"""DTOs: what the application handlers accept and return.

Handlers never hand domain objects to callers.  Amounts and timestamps are
rendered as strings so the CLI (or an HTTP layer) can print or serialize
them directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from storefront.domain.model.order import Order


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line item as sent by the storefront."""

    product_id: str
    quantity: int
    name: str = ""
    price: str = "0"
    size: str | None = None
    color: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    name: str
    price: str
    quantity: int
    size: str
    color: str
    image: str | None
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order."""

    id: str
    order_number: str
    email: str
    user_id: str | None
    status: str
    items: list[OrderLineItemDTO]
    address: dict[str, Any]
    shipping: dict[str, Any]
    payment: dict[str, Any]
    admin_status: str | None
    shipper_name: str | None
    total: str
    created_at: str
    updated_at: str
    cancelled_at: str | None
    cancelled_by: str | None


@dataclass(frozen=True)
class StatusChangeDTO:
    """Output of status-changing use cases.

    ``status_changed`` tells the caller whether to send a notification.
    """

    order: OrderDTO
    status_changed: bool


@dataclass(frozen=True)
class StockCheckDTO:
    available: bool
    available_stock: int | None = None
    reason: str | None = None


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        order_number=order.order_number,
        email=order.email,
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                name=item.name,
                price=str(item.price),
                quantity=item.quantity.value,
                size=item.size,
                color=item.color,
                image=item.image,
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        address=order.address.to_mapping(),
        shipping=dict(order.shipping),
        payment=dict(order.payment),
        admin_status=order.admin_status,
        shipper_name=order.shipper_name,
        total=str(order.total),
        created_at=order.created_at.isoformat(),
        updated_at=order.updated_at.isoformat(),
        cancelled_at=order.cancelled_at.isoformat() if order.cancelled_at else None,
        cancelled_by=order.cancelled_by.value if order.cancelled_by else None,
    )
