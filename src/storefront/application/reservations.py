"""Stock bookkeeping shared by the order lifecycle handlers.

``Order.stock_reserved`` records whether the order currently holds stock.
Taking and giving back the reservation only ever happens here, which is what
keeps "decrement once per approval, restore once per reversal" true.

Stock moves before the order is saved.  ``save_order`` persists the order
and, if that fails, moves the stock back so the stored order and the
product counters still agree when the error reaches the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from storefront.domain.model.discrepancy import StockDiscrepancy
from storefront.domain.model.order import Order, OrderLineItem
from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.product_ledger import ProductLedger

logger = logging.getLogger(__name__)


@dataclass
class StockMovement:
    """What one use case did to product stock before saving the order."""

    reserved: list[OrderLineItem] = field(default_factory=list)
    released: list[OrderLineItem] = field(default_factory=list)
    # Releases that failed; stored only once the order itself is saved
    discrepancies: list[StockDiscrepancy] = field(default_factory=list)


def take_reservation(order: Order, ledger: ProductLedger) -> StockMovement:
    """Reserve stock for every item unless the order already holds it.

    All-or-nothing: on failure no stock is held and the order is unchanged.
    """
    if order.stock_reserved:
        return StockMovement()
    ledger.reserve_items(order.items)
    order.stock_reserved = True
    return StockMovement(reserved=list(order.items))


def give_back_reservation(order: Order, ledger: ProductLedger) -> StockMovement:
    """Release the order's stock if it holds any.

    Failures never propagate.  Each unreleased item becomes a discrepancy
    for the reconciliation job, and the order is treated as no longer
    holding stock either way.
    """
    movement = StockMovement()
    if not order.stock_reserved:
        return movement
    for item in order.items:
        failed = ledger.release_items(order.id, [item])
        if failed:
            movement.discrepancies.extend(failed)
        else:
            movement.released.append(item)
    order.stock_reserved = False
    return movement


def save_order(
    order: Order,
    movement: StockMovement,
    order_repo: OrderRepository,
    ledger: ProductLedger,
    discrepancy_repo: DiscrepancyRepository | None = None,
) -> None:
    """Persist *order*; if that fails, undo *movement* and re-raise."""
    try:
        order_repo.save(order)
    except Exception:
        _undo(order, movement, ledger)
        raise

    for discrepancy in movement.discrepancies:
        logger.warning(
            "Stock for order %s not restored (%d x %s); queued for reconciliation",
            order.id,
            discrepancy.quantity,
            discrepancy.product_id,
        )
        if discrepancy_repo is not None:
            discrepancy_repo.save(discrepancy)


def _undo(order: Order, movement: StockMovement, ledger: ProductLedger) -> None:
    if movement.reserved:
        ledger.release_items(order.id, movement.reserved)
    if movement.released:
        try:
            ledger.reserve_items(movement.released)
        except Exception:
            logger.exception(
                "Order %s was not saved and its released stock could not be taken back",
                order.id,
            )
