"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ProductNotFound
from storefront.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class StockLineDTO:
    key: str
    quantity: int


class ShowStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> list[StockLineDTO]:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return [
            StockLineDTO(key=key, quantity=quantity)
            for key, quantity in sorted(product.stock.items())
        ]
