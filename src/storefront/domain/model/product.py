"""Product aggregate, as far as inventory is concerned.

Catalog management (names, prices, images, ordering) lives elsewhere.  The
engine only needs the declared colors and sizes and the per-variant stock
map.  Stock is changed only through ``decrement_stock`` / ``increment_stock``,
which the product ledger calls while holding the product's lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import InsufficientStock, ValidationError


@dataclass(frozen=True)
class ColorOption:
    name: str
    images: tuple[str, ...] = ()


@dataclass
class Product:
    """Invariant: every value in ``stock`` is >= 0."""

    id: str
    name: str = ""
    colors: list[str | ColorOption] = field(default_factory=list)
    sizes: list[str] = field(default_factory=list)
    stock: dict[str, int] = field(default_factory=dict)
    updated_at: datetime | None = None

    def stock_for(self, key: str) -> int:
        return self.stock.get(key, 0)

    def decrement_stock(self, key: str, quantity: int) -> int:
        """Take *quantity* units from *key*; returns the remaining count."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        current = self.stock_for(key)
        if quantity > current:
            raise InsufficientStock(
                self.id, available=current, requested=quantity, name=self.name or None
            )
        self.stock[key] = current - quantity
        self._touch()
        return self.stock[key]

    def increment_stock(self, key: str, quantity: int) -> int:
        """Put *quantity* units back on *key*, creating the key if absent."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.stock[key] = self.stock_for(key) + quantity
        self._touch()
        return self.stock[key]

    def seed_stock(self, key: str, quantity: int) -> None:
        """Initialise an unmanaged product's counter before its first use."""
        if quantity < 0:
            raise ValidationError("Stock cannot be negative")
        self.stock[key] = quantity
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
