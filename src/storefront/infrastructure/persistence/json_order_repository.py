"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.model.order import CancelledBy, Order, OrderLineItem, OrderStatus
from storefront.domain.model.value_objects import Address, Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile, parse_datetime, upsert


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._file.load():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_by_email(self, email: str) -> list[Order]:
        wanted = email.lower()
        return self._newest_first(
            raw for raw in self._file.load() if raw["email"].lower() == wanted
        )

    def list_all(self) -> list[Order]:
        return self._newest_first(self._file.load())

    def save(self, order: Order) -> None:
        with self._file.editing() as records:
            upsert(records, self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    def _newest_first(self, raws) -> list[Order]:
        orders = [self._to_domain(raw) for raw in raws]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "email": order.email,
            "user_id": order.user_id,
            "status": order.status.value,
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "price": str(item.price.amount),
                    "currency": item.price.currency,
                    "quantity": item.quantity.value,
                    "size": item.size,
                    "color": item.color,
                    "image": item.image,
                }
                for item in order.items
            ],
            "address": order.address.to_mapping(),
            "shipping": order.shipping,
            "payment": order.payment,
            "admin_status": order.admin_status,
            "shipper_name": order.shipper_name,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "cancelled_at": order.cancelled_at.isoformat() if order.cancelled_at else None,
            "cancelled_by": order.cancelled_by.value if order.cancelled_by else None,
            "cancellation_reason": order.cancellation_reason,
            "stock_reserved": order.stock_reserved,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        status = OrderStatus(raw["status"])
        items = tuple(
            OrderLineItem(
                product_id=i["product_id"],
                name=i.get("name", ""),
                price=Money(Decimal(i["price"]), i.get("currency", "BDT")),
                quantity=Quantity(i["quantity"]),
                size=i["size"],
                color=i["color"],
                image=i.get("image"),
            )
            for i in raw["items"]
        )
        cancelled_by = raw.get("cancelled_by")
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            email=raw["email"],
            user_id=raw.get("user_id"),
            items=items,
            address=Address(**raw["address"]),
            shipping=raw.get("shipping") or {},
            payment=raw.get("payment") or {},
            status=status,
            admin_status=raw.get("admin_status"),
            shipper_name=raw.get("shipper_name"),
            created_at=parse_datetime(raw["created_at"]),
            updated_at=parse_datetime(raw.get("updated_at") or raw["created_at"]),
            cancelled_at=parse_datetime(raw.get("cancelled_at")),
            cancelled_by=CancelledBy(cancelled_by) if cancelled_by else None,
            cancellation_reason=raw.get("cancellation_reason"),
            # Records written before the flag existed hold stock iff approved
            stock_reserved=raw.get("stock_reserved", status == OrderStatus.APPROVED),
        )
