"""Order aggregate.

The Order owns its line items, which are frozen at creation time.  Status
changes go through ``change_status`` / ``cancel``; whether a change is legal
and whether it touches stock is decided by the status transition rules and
the application handlers, not here.
"""

from __future__ import annotations

import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Address, Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    AWAITING_PROCESSING = "awaiting_processing"
    ORDER_CONFIRMATION = "order_confirmation"
    APPROVED = "approved"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    REFUSED = "refused"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(value: str | OrderStatus) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        try:
            return OrderStatus(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown order status: {value!r}") from exc


class CancelledBy(Enum):
    USER = "user"
    ADMIN = "admin"


DEFAULT_SHIPPING: dict[str, Any] = {"method": "Standard Shipping", "cost": 100}
DEFAULT_PAYMENT: dict[str, Any] = {"method": "Cash on Delivery"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_number() -> str:
    """Human-facing order number, e.g. ``TT-1718000000000-417``."""
    return f"TT-{int(time.time() * 1000)}-{random.randint(0, 999)}"


@dataclass(frozen=True)
class OrderLineItem:
    """One product variant on an order.

    ``color`` is the resolved color (never the ``"default"`` placeholder
    once the order has been created) and ``price`` is the price snapshot.
    """

    product_id: str
    name: str
    price: Money
    quantity: Quantity
    size: str
    color: str
    image: str | None = None

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for storefront orders.

    Use ``Order.create()`` for new orders.  The plain constructor is kept
    simple so repositories can reconstitute persisted orders without
    re-validating them.
    """

    id: str
    order_number: str
    email: str
    items: tuple[OrderLineItem, ...]
    address: Address
    user_id: str | None = None
    shipping: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_SHIPPING))
    payment: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_PAYMENT))
    status: OrderStatus = OrderStatus.PENDING
    admin_status: str | None = None
    shipper_name: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    cancelled_at: datetime | None = None
    cancelled_by: CancelledBy | None = None
    cancellation_reason: str | None = None
    stock_reserved: bool = False

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        email: str,
        items: list[OrderLineItem],
        address: Address,
        user_id: str | None = None,
        shipping: dict[str, Any] | None = None,
        payment: dict[str, Any] | None = None,
        order_id: str | None = None,
        order_number: str | None = None,
    ) -> Order:
        """Create a new pending order, enforcing creation invariants."""
        if not email or not email.strip():
            raise ValidationError("Email is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        now = _utcnow()
        return Order(
            id=order_id or uuid.uuid4().hex,
            order_number=order_number or generate_order_number(),
            email=email.strip().lower(),
            user_id=user_id or None,
            items=tuple(items),
            address=address,
            shipping=dict(shipping) if shipping else dict(DEFAULT_SHIPPING),
            payment=dict(payment) if payment else dict(DEFAULT_PAYMENT),
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    @property
    def is_delivered(self) -> bool:
        return self.status == OrderStatus.DELIVERED

    def change_status(self, new_status: OrderStatus) -> bool:
        """Move to *new_status* and touch ``updated_at``.

        Returns True if the status actually changed.
        """
        changed = self.status != new_status
        self.status = new_status
        self.touch()
        return changed

    def cancel(self, cancelled_by: CancelledBy, reason: str | None = None) -> bool:
        changed = self.change_status(OrderStatus.CANCELLED)
        self.cancelled_at = self.updated_at
        self.cancelled_by = cancelled_by
        self.cancellation_reason = reason
        return changed

    def annotate(
        self,
        admin_status: str | None = None,
        shipper_name: str | None = None,
    ) -> None:
        """Set the admin-facing annotation fields; None leaves a field alone."""
        if admin_status is not None:
            self.admin_status = admin_status
        if shipper_name is not None:
            self.shipper_name = shipper_name

    def touch(self) -> None:
        self.updated_at = _utcnow()

    # --- Ownership ------------------------------------------------------------

    def belongs_to(self, user_id: str | None, email: str | None) -> bool:
        """True if the given identity owns this order.

        Either a matching user id or a case-insensitive email match is
        enough.  Guest orders have no user id and only ever match by email.
        """
        if user_id and self.user_id and user_id == self.user_id:
            return True
        return bool(email) and email.strip().lower() == self.email

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        currency = self.items[0].price.currency
        result = Money.of(0, currency)
        for item in self.items:
            result = Money(result.amount + item.line_total.amount, currency)
        return result
