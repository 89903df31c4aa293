"""Maps a (size, color) request onto the product's stock counter.

Every ledger operation goes through ``resolve_stock_key`` so that reserving
and later releasing the same line item always land on the same key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from storefront.domain.model.product import Product

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "default"
DEFAULT_SIZE = "One Size"


@dataclass(frozen=True)
class StockPolicy:
    """How to treat products that carry no stock data at all.

    Legacy catalog entries were created before stock tracking existed.
    With ``allow_unmanaged`` they are treated as having
    ``unmanaged_fallback`` units per variant instead of being unorderable.
    """

    unmanaged_fallback: int = 999
    allow_unmanaged: bool = True
    default_size: str = DEFAULT_SIZE


@dataclass(frozen=True)
class ResolvedStockKey:
    key: str
    color: str
    # True when the product has an empty stock map and the fallback applies
    unmanaged: bool = False


def _color_name(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return str(entry.get("name") or DEFAULT_COLOR)
    return str(getattr(entry, "name", None) or DEFAULT_COLOR)


def resolve_color(product: Product | None, color: str | None) -> str:
    """Replace a missing or ``"default"`` color with the product's first color."""
    if color and color != DEFAULT_COLOR:
        return color
    if product is not None and product.colors:
        return _color_name(product.colors[0])
    return DEFAULT_COLOR


def resolve_size(size: str | None, policy: StockPolicy | None = None) -> str:
    if size and size.strip():
        return size
    return (policy or StockPolicy()).default_size


def stock_key(size: str, color: str) -> str:
    return f"{size}-{color}"


def resolve_stock_key(
    product: Product,
    size: str | None,
    color: str | None,
    policy: StockPolicy | None = None,
) -> ResolvedStockKey:
    """Canonical stock key for a variant of *product*.

    ``"{size}-{color}"`` when the product tracks it; the bare size when the
    product tracks stock but not that combination; and, for a product with
    no stock data, the composite key flagged ``unmanaged`` (only when the
    policy allows it).
    """
    policy = policy or StockPolicy()
    size = resolve_size(size, policy)
    color = resolve_color(product, color)
    key = stock_key(size, color)

    if key in product.stock:
        return ResolvedStockKey(key, color)
    if product.stock:
        return ResolvedStockKey(size, color)
    if policy.allow_unmanaged:
        logger.warning(
            "Product %s has no stock data; treating %s as unmanaged with %d units",
            product.id,
            key,
            policy.unmanaged_fallback,
        )
        return ResolvedStockKey(key, color, unmanaged=True)
    return ResolvedStockKey(key, color)
