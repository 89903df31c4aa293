"""Application service: Refuse Order use case.

Refusing an approved order gives its stock back first.  Restoration
problems never block the refusal; see ``reservations.give_back_reservation``.
"""

from __future__ import annotations

import logging

from storefront.application.dto import StatusChangeDTO, to_order_dto
from storefront.application.reservations import (
    StockMovement,
    give_back_reservation,
    save_order,
)
from storefront.domain.exceptions import AlreadyDelivered, OrderNotFound
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger

logger = logging.getLogger(__name__)


class RefuseOrderHandler:

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

    def handle(self, order_id: str) -> StatusChangeDTO:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            if order.is_delivered:
                raise AlreadyDelivered(order_id, OrderStatus.REFUSED.value)

            movement = StockMovement()
            if order.status == OrderStatus.APPROVED:
                movement = give_back_reservation(order, self._ledger)

            changed = order.change_status(OrderStatus.REFUSED)
            save_order(
                order, movement, self._order_repo, self._ledger, self._discrepancy_repo
            )

        if changed:
            logger.info("Order %s refused", order_id)
        return StatusChangeDTO(to_order_dto(order), status_changed=changed)
