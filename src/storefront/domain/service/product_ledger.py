"""Domain service: Product Ledger.

The only code path that changes a product's stock.  Each single-variant
operation loads, mutates and saves the product while holding that product's
lock, so two concurrent reservations can never both pass the availability
check on the same counter.

Multi-item helpers give the two behaviours the order lifecycle needs:
  - ``reserve_items`` is all-or-nothing; a failure part-way through gives
    back what this call already took before the error propagates.
  - ``release_items`` is best effort; a failed release is logged and
    returned as a ``StockDiscrepancy`` for later reconciliation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from storefront.domain.exceptions import ProductNotFound
from storefront.domain.model.discrepancy import StockDiscrepancy
from storefront.domain.model.order import OrderLineItem
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.stock_key_resolver import (
    StockPolicy,
    resolve_stock_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockCheck:
    available: bool
    available_stock: int | None = None
    reason: str | None = None


class ProductLedger:

    def __init__(
        self,
        product_repo: ProductRepository,
        policy: StockPolicy | None = None,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._policy = policy or StockPolicy()
        self._locks = locks or KeyedLocks("product")

    @property
    def policy(self) -> StockPolicy:
        return self._policy

    # --- Single variant -------------------------------------------------------

    def check_availability(
        self, product_id: str, size: str | None, color: str | None, quantity: int
    ) -> StockCheck:
        """Report whether *quantity* units could be reserved right now.

        Read-only and never raises for business reasons: a missing product
        or a bad quantity is reported as unavailable.
        """
        if quantity <= 0:
            return StockCheck(False, reason="Quantity must be positive")

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            return StockCheck(False, reason="Product not found")

        resolved = resolve_stock_key(product, size, color, self._policy)
        if resolved.unmanaged:
            return StockCheck(True, available_stock=self._policy.unmanaged_fallback)

        on_hand = product.stock_for(resolved.key)
        if on_hand < quantity:
            return StockCheck(
                False,
                available_stock=on_hand,
                reason=f"Only {on_hand} available",
            )
        return StockCheck(True, available_stock=on_hand)

    def reserve(
        self, product_id: str, size: str | None, color: str | None, quantity: int
    ) -> int:
        """Take *quantity* units; returns what is left on the counter.

        Raises ProductNotFound or InsufficientStock; nothing is saved then.
        """
        with self._locks.hold(product_id):
            product = self._load(product_id)
            resolved = resolve_stock_key(product, size, color, self._policy)
            if resolved.unmanaged:
                product.seed_stock(resolved.key, self._policy.unmanaged_fallback)
            remaining = product.decrement_stock(resolved.key, quantity)
            self._product_repo.save(product)

        logger.info(
            "Reserved %d of %s [%s], %d left", quantity, product_id, resolved.key, remaining
        )
        return remaining

    def release(
        self, product_id: str, size: str | None, color: str | None, quantity: int
    ) -> int:
        """Give *quantity* units back; returns the new count.

        There is no deduplication here.  Callers release exactly once per
        reservation.
        """
        with self._locks.hold(product_id):
            product = self._load(product_id)
            resolved = resolve_stock_key(product, size, color, self._policy)
            new_count = product.increment_stock(resolved.key, quantity)
            self._product_repo.save(product)

        logger.info(
            "Released %d of %s [%s], now %d", quantity, product_id, resolved.key, new_count
        )
        return new_count

    # --- Whole orders ---------------------------------------------------------

    def reserve_items(self, items: Iterable[OrderLineItem]) -> None:
        """Reserve every line item or none of them."""
        taken: list[OrderLineItem] = []
        try:
            for item in items:
                self.reserve(item.product_id, item.size, item.color, item.quantity.value)
                taken.append(item)
        except Exception:
            self._roll_back(taken)
            raise

    def release_items(
        self, order_id: str, items: Iterable[OrderLineItem]
    ) -> list[StockDiscrepancy]:
        """Release every line item; failures are returned, not raised."""
        failed: list[StockDiscrepancy] = []
        for item in items:
            try:
                self.release(item.product_id, item.size, item.color, item.quantity.value)
            except Exception as exc:
                logger.exception(
                    "Could not restore %d of %s for order %s",
                    item.quantity.value,
                    item.product_id,
                    order_id,
                )
                failed.append(
                    StockDiscrepancy(
                        order_id=order_id,
                        product_id=item.product_id,
                        size=item.size,
                        color=item.color,
                        quantity=item.quantity.value,
                        reason=str(exc),
                    )
                )
        return failed

    # --- Internal helpers -----------------------------------------------------

    def _roll_back(self, taken: list[OrderLineItem]) -> None:
        for item in reversed(taken):
            try:
                self.release(item.product_id, item.size, item.color, item.quantity.value)
            except Exception:
                logger.exception(
                    "Rollback of %d x %s failed", item.quantity.value, item.product_id
                )

    def _load(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product
