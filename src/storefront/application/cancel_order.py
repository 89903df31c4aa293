"""Application service: Cancel Order use case.

Customers may cancel their own orders while they are still pending.
Admins may cancel any order that has not been delivered.  Cancelling an
approved order gives its stock back.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, to_order_dto
from storefront.application.reservations import (
    StockMovement,
    give_back_reservation,
    save_order,
)
from storefront.domain.exceptions import AlreadyDelivered, Forbidden, OrderNotFound
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: ProductLedger,
        discrepancy_repo: DiscrepancyRepository,
        order_locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._discrepancy_repo = discrepancy_repo
        self._order_locks = order_locks

    def handle(self, order_id: str, actor: Actor, reason: str | None = None) -> OrderDTO:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            self._authorize(order, actor)

            movement = StockMovement()
            if order.status == OrderStatus.APPROVED:
                movement = give_back_reservation(order, self._ledger)

            order.cancel(actor.cancelled_by, reason)
            save_order(
                order, movement, self._order_repo, self._ledger, self._discrepancy_repo
            )

        logger.info("Order %s cancelled by %s", order_id, actor.cancelled_by.value)
        return to_order_dto(order)

    @staticmethod
    def _authorize(order: Order, actor: Actor) -> None:
        if order.is_delivered:
            raise AlreadyDelivered(order.id, OrderStatus.CANCELLED.value)
        if actor.is_admin:
            return
        if not actor.owns(order):
            raise Forbidden("You can only cancel your own orders")
        if order.status != OrderStatus.PENDING:
            raise Forbidden("You can only cancel orders before admin approval")
