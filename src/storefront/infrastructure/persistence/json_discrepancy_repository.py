"""JSON-file-backed implementation of DiscrepancyRepository."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.discrepancy import StockDiscrepancy
from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.infrastructure.persistence.json_file import JsonFile, parse_datetime, upsert


class JsonDiscrepancyRepository(DiscrepancyRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def list_open(self) -> list[StockDiscrepancy]:
        open_items = [
            self._to_domain(raw) for raw in self._file.load() if not raw.get("resolved_at")
        ]
        return sorted(open_items, key=lambda d: d.recorded_at)

    def save(self, discrepancy: StockDiscrepancy) -> None:
        with self._file.editing() as records:
            upsert(records, self._to_raw(discrepancy))

    @staticmethod
    def _to_raw(d: StockDiscrepancy) -> dict:
        return {
            "id": d.id,
            "order_id": d.order_id,
            "product_id": d.product_id,
            "size": d.size,
            "color": d.color,
            "quantity": d.quantity,
            "reason": d.reason,
            "recorded_at": d.recorded_at.isoformat(),
            "attempts": d.attempts,
            "resolved_at": d.resolved_at.isoformat() if d.resolved_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockDiscrepancy:
        return StockDiscrepancy(
            id=raw["id"],
            order_id=raw["order_id"],
            product_id=raw["product_id"],
            size=raw["size"],
            color=raw["color"],
            quantity=raw["quantity"],
            reason=raw.get("reason", ""),
            recorded_at=parse_datetime(raw["recorded_at"]),
            attempts=raw.get("attempts", 1),
            resolved_at=parse_datetime(raw.get("resolved_at")),
        )
