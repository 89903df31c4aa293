"""Application service: Check Stock use case (query)."""

from __future__ import annotations

from storefront.application.dto import StockCheckDTO
from storefront.domain.service.product_ledger import ProductLedger


class CheckStockHandler:

    def __init__(self, ledger: ProductLedger) -> None:
        self._ledger = ledger

    def handle(
        self, product_id: str, size: str | None, color: str | None, quantity: int
    ) -> StockCheckDTO:
        check = self._ledger.check_availability(product_id, size, color, quantity)
        return StockCheckDTO(
            available=check.available,
            available_stock=check.available_stock,
            reason=check.reason,
        )
