"""Application service: Update Order Status use case.

The admin-facing catch-all: any target status, subject to the transition
rules.  Leaving ``approved`` for an earlier stage, refusal or cancellation
gives the stock back; entering ``approved`` reserves it exactly as the
Approve use case does.
"""

from __future__ import annotations

import logging

from storefront.application.dto import StatusChangeDTO, to_order_dto
from storefront.application.reservations import (
    StockMovement,
    give_back_reservation,
    save_order,
    take_reservation,
)
from storefront.domain.exceptions import OrderNotFound
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger
from storefront.domain.service.status_transitions import ensure_transition

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

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

    def handle(
        self,
        order_id: str,
        target: str | OrderStatus,
        admin_status: str | None = None,
        shipper_name: str | None = None,
    ) -> StatusChangeDTO:
        new_status = OrderStatus.parse(target)

        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            decision = ensure_transition(order_id, order.status, new_status)

            movement = StockMovement()
            if decision.requires_stock_release:
                movement = give_back_reservation(order, self._ledger)
            elif decision.requires_stock_reservation:
                movement = take_reservation(order, self._ledger)

            previous = order.status
            changed = order.change_status(new_status)
            order.annotate(admin_status=admin_status, shipper_name=shipper_name)
            save_order(
                order, movement, self._order_repo, self._ledger, self._discrepancy_repo
            )

        if changed:
            logger.info(
                "Order %s moved from %s to %s", order_id, previous.value, new_status.value
            )
        return StatusChangeDTO(to_order_dto(order), status_changed=changed)
