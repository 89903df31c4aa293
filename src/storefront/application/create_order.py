"""Application service: Create Order use case.

Validates the request, resolves each item's color against the catalog and
checks that stock is available.  Creation never reserves stock; that
happens when the order is approved.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from storefront.application.dto import OrderDTO, OrderItemSpec, to_order_dto
from storefront.domain.exceptions import InsufficientStock, ProductNotFound, ValidationError
from storefront.domain.model.order import Order, OrderLineItem, generate_order_number
from storefront.domain.model.value_objects import Address, Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger
from storefront.domain.service.stock_key_resolver import resolve_color, resolve_size

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        ledger: ProductLedger,
        order_locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._ledger = ledger
        self._order_locks = order_locks

    def handle(
        self,
        email: str,
        item_specs: list[OrderItemSpec],
        address: Mapping[str, Any] | None,
        user_id: str | None = None,
        shipping: dict[str, Any] | None = None,
        payment: dict[str, Any] | None = None,
        order_id: str | None = None,
    ) -> OrderDTO:
        """Create a pending order.

        Steps:
        1. Reject a missing email, empty item list or incomplete address.
        2. Resolve each item's size and color for its product.
        3. Check availability for every item; any shortfall aborts the
           whole order before anything is saved.
        4. Persist with a fresh, unique order number.  A caller-assigned
           id that is already taken is rejected.
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")
        if not item_specs:
            raise ValidationError("Order must contain at least one item")
        delivery_address = Address.from_mapping(address)

        line_items = [self._resolve_item(spec) for spec in item_specs]

        order = Order.create(
            email=email,
            items=line_items,
            address=delivery_address,
            user_id=user_id,
            shipping=shipping,
            payment=payment,
            order_id=order_id,
        )
        if not order_id:
            self._save_new(order)
        else:
            # Caller-assigned ids must never replace an existing order
            with self._order_locks.hold(order_id):
                if self._order_repo.get_by_id(order_id) is not None:
                    raise ValidationError(f"Order '{order_id}' already exists")
                self._save_new(order)

        logger.info(
            "Order %s (%s) created for %s with %d item(s)",
            order.id,
            order.order_number,
            order.email,
            len(order.items),
        )
        return to_order_dto(order)

    # --- Internal helpers -----------------------------------------------------

    def _resolve_item(self, spec: OrderItemSpec) -> OrderLineItem:
        quantity = Quantity(spec.quantity)
        product = self._product_repo.get_by_id(spec.product_id)
        if product is None:
            raise ProductNotFound(spec.product_id)

        size = resolve_size(spec.size, self._ledger.policy)
        color = resolve_color(product, spec.color)
        name = spec.name or product.name

        check = self._ledger.check_availability(product.id, size, color, quantity.value)
        if not check.available:
            raise InsufficientStock(
                product.id,
                available=check.available_stock or 0,
                requested=quantity.value,
                name=name or None,
            )

        return OrderLineItem(
            product_id=product.id,
            name=name,
            price=Money.of(spec.price),
            quantity=quantity,
            size=size,
            color=color,
            image=spec.image,
        )

    def _save_new(self, order: Order) -> None:
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            if self._order_repo.get_by_order_number(order.order_number) is None:
                self._order_repo.save(order)
                return
            order.order_number = generate_order_number()
        raise ValidationError("Could not generate a unique order number")
