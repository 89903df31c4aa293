"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.  Like a real
store they hand out copies, so an unsaved mutation never leaks back.
"""

from __future__ import annotations

import copy

from storefront.domain.model.discrepancy import StockDiscrepancy
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}
        self._save_error: Exception | None = None

    def get_by_id(self, order_id: str) -> Order | None:
        return copy.deepcopy(self._store.get(order_id))

    def get_by_order_number(self, order_number: str) -> Order | None:
        for order in self._store.values():
            if order.order_number == order_number:
                return copy.deepcopy(order)
        return None

    def list_by_email(self, email: str) -> list[Order]:
        return [o for o in self.list_all() if o.email == email.lower()]

    def list_all(self) -> list[Order]:
        orders = [copy.deepcopy(o) for o in self._store.values()]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def save(self, order: Order) -> None:
        if self._save_error is not None:
            error, self._save_error = self._save_error, None
            raise error
        self._store[order.id] = copy.deepcopy(order)

    def fail_next_save(self, error: Exception) -> None:
        """Make the next ``save`` raise *error* (test helper)."""
        self._save_error = error


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = copy.deepcopy(p)

    def get_by_id(self, product_id: str) -> Product | None:
        return copy.deepcopy(self._store.get(product_id))

    def list_all(self) -> list[Product]:
        return [copy.deepcopy(p) for p in self._store.values()]

    def save(self, product: Product) -> None:
        self._store[product.id] = copy.deepcopy(product)

    def delete(self, product_id: str) -> None:
        """Catalog management removing a product (test helper)."""
        del self._store[product_id]

    def stock(self, product_id: str, key: str) -> int | None:
        """Peek at one counter (test helper)."""
        return self._store[product_id].stock.get(key)


class FakeDiscrepancyRepository(DiscrepancyRepository):

    def __init__(self) -> None:
        self._store: dict[str, StockDiscrepancy] = {}

    def list_open(self) -> list[StockDiscrepancy]:
        open_items = [copy.deepcopy(d) for d in self._store.values() if not d.is_resolved]
        return sorted(open_items, key=lambda d: d.recorded_at)

    def list_all(self) -> list[StockDiscrepancy]:
        return [copy.deepcopy(d) for d in self._store.values()]

    def save(self, discrepancy: StockDiscrepancy) -> None:
        self._store[discrepancy.id] = copy.deepcopy(discrepancy)
