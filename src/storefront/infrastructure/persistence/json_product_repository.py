"""JSON-file-backed implementation of ProductRepository.

Catalog records carry many fields the engine does not model (prices,
descriptions, display order).  ``save`` merges the inventory fields into
the stored record so those are preserved.
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.product import ColorOption, Product
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import JsonFile, parse_datetime


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, product: Product) -> None:
        with self._file.editing() as records:
            for raw in records:
                if raw["id"] == product.id:
                    raw.update(self._to_raw(product))
                    break
            else:
                records.append(self._to_raw(product))

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "colors": [
                c if isinstance(c, str) else {"name": c.name, "images": list(c.images)}
                for c in product.colors
            ],
            "sizes": list(product.sizes),
            "stock": dict(product.stock),
            "updated_at": product.updated_at.isoformat() if product.updated_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        colors: list[str | ColorOption] = []
        for entry in raw.get("colors") or []:
            if isinstance(entry, dict):
                colors.append(
                    ColorOption(name=entry.get("name", ""), images=tuple(entry.get("images") or ()))
                )
            else:
                colors.append(str(entry))
        return Product(
            id=raw["id"],
            name=raw.get("name", ""),
            colors=colors,
            sizes=list(raw.get("sizes") or []),
            stock={key: int(value) for key, value in (raw.get("stock") or {}).items()},
            updated_at=parse_datetime(raw.get("updated_at")),
        )
