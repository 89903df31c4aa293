"""Composition root: builds the JSON repositories, ledger and handlers.

This is the only place in the codebase that knows about *all* layers.
Repositories, the ledger and the lock registries are process-wide
singletons: locking only works if every handler shares them.
"""

from __future__ import annotations

from functools import lru_cache

from storefront.application.approve_order import ApproveOrderHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.check_stock import CheckStockHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.reconcile_stock import ReconcileStockHandler
from storefront.application.refuse_order import RefuseOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.show_stock import ShowStockHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.persistence.json_discrepancy_repository import (
    JsonDiscrepancyRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


@lru_cache
def product_repository() -> JsonProductRepository:
    return JsonProductRepository(get_settings().data_dir / "products.json")


@lru_cache
def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(get_settings().data_dir / "orders.json")


@lru_cache
def discrepancy_repository() -> JsonDiscrepancyRepository:
    return JsonDiscrepancyRepository(get_settings().data_dir / "discrepancies.json")


@lru_cache
def order_locks() -> KeyedLocks:
    return KeyedLocks("order", timeout=get_settings().lock_timeout_seconds)


@lru_cache
def reconcile_locks() -> KeyedLocks:
    return KeyedLocks("reconciliation", timeout=get_settings().lock_timeout_seconds)


@lru_cache
def product_ledger() -> ProductLedger:
    settings = get_settings()
    return ProductLedger(
        product_repository(),
        policy=settings.stock_policy(),
        locks=KeyedLocks("product", timeout=settings.lock_timeout_seconds),
    )


# --- Handlers -------------------------------------------------------------------


def create_order_handler() -> CreateOrderHandler:
    return CreateOrderHandler(
        order_repository(), product_repository(), product_ledger(), order_locks()
    )


def approve_order_handler() -> ApproveOrderHandler:
    return ApproveOrderHandler(order_repository(), product_ledger(), order_locks())


def refuse_order_handler() -> RefuseOrderHandler:
    return RefuseOrderHandler(
        order_repository(), product_ledger(), discrepancy_repository(), order_locks()
    )


def cancel_order_handler() -> CancelOrderHandler:
    return CancelOrderHandler(
        order_repository(), product_ledger(), discrepancy_repository(), order_locks()
    )


def update_order_status_handler() -> UpdateOrderStatusHandler:
    return UpdateOrderStatusHandler(
        order_repository(), product_ledger(), discrepancy_repository(), order_locks()
    )


def check_stock_handler() -> CheckStockHandler:
    return CheckStockHandler(product_ledger())


def show_order_handler() -> ShowOrderHandler:
    return ShowOrderHandler(order_repository())


def list_orders_handler() -> ListOrdersHandler:
    return ListOrdersHandler(order_repository())


def show_stock_handler() -> ShowStockHandler:
    return ShowStockHandler(product_repository())


def reconcile_stock_handler() -> ReconcileStockHandler:
    return ReconcileStockHandler(
        discrepancy_repository(), product_ledger(), reconcile_locks()
    )


def reset() -> None:
    """Drop cached singletons (after changing settings, e.g. in tests)."""
    for factory in (
        get_settings,
        product_repository,
        order_repository,
        discrepancy_repository,
        order_locks,
        reconcile_locks,
        product_ledger,
    ):
        factory.cache_clear()
