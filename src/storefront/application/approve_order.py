"""Application service: Approve Order use case.

Approval is where stock is consumed: every line item is reserved, all or
nothing, and only then does the order become ``approved``.  The order lock
is held throughout, so a second concurrent approval sees the approved order
and reports ``status_changed=False`` without touching stock.
"""

from __future__ import annotations

import logging

from storefront.application.dto import StatusChangeDTO, to_order_dto
from storefront.application.reservations import save_order, take_reservation
from storefront.domain.exceptions import AlreadyDelivered, OrderNotFound
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger

logger = logging.getLogger(__name__)


class ApproveOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: ProductLedger,
        order_locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._order_locks = order_locks

    def handle(self, order_id: str) -> StatusChangeDTO:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            if order.is_delivered:
                raise AlreadyDelivered(order_id, OrderStatus.APPROVED.value)
            if order.status == OrderStatus.APPROVED:
                return StatusChangeDTO(to_order_dto(order), status_changed=False)

            # Reserve first; InsufficientStock leaves the order untouched
            movement = take_reservation(order, self._ledger)
            order.change_status(OrderStatus.APPROVED)
            save_order(order, movement, self._order_repo, self._ledger)

        logger.info("Order %s approved", order_id)
        return StatusChangeDTO(to_order_dto(order), status_changed=True)
