"""Tests for the JSON-file repositories (real files under tmp_path)."""

import json
from decimal import Decimal

from storefront.domain.model.discrepancy import StockDiscrepancy
from storefront.domain.model.order import CancelledBy, Order, OrderLineItem, OrderStatus
from storefront.domain.model.product import ColorOption, Product
from storefront.domain.model.value_objects import Address, Money, Quantity
from storefront.infrastructure.persistence.json_discrepancy_repository import (
    JsonDiscrepancyRepository,
)
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def _order(email: str = "alice@example.com", **kwargs) -> Order:
    item = OrderLineItem(
        product_id="p1",
        name="Shirt",
        price=Money.of("850.50"),
        quantity=Quantity(2),
        size="M",
        color="Red",
    )
    address = Address(street_address="12 Lake Rd", region_state="Dhaka", city_area="Gulshan")
    return Order.create(email=email, items=[item], address=address, **kwargs)


class TestJsonOrderRepository:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "orders.json"
        JsonOrderRepository(path)
        assert json.loads(path.read_text()) == []

    def test_save_and_reload(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order(user_id="u1")
        order.change_status(OrderStatus.APPROVED)
        order.stock_reserved = True
        order.annotate(admin_status="called", shipper_name="Pathao")
        repo.save(order)

        loaded = JsonOrderRepository(tmp_path / "orders.json").get_by_id(order.id)

        assert loaded == order
        assert loaded.items[0].price.amount == Decimal("850.50")

    def test_cancellation_fields_survive(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        order.cancel(CancelledBy.ADMIN, "duplicate")
        repo.save(order)

        loaded = repo.get_by_id(order.id)

        assert loaded.cancelled_by == CancelledBy.ADMIN
        assert loaded.cancelled_at == order.cancelled_at
        assert loaded.cancellation_reason == "duplicate"

    def test_save_replaces_existing_record(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.save(order)
        order.change_status(OrderStatus.SHIPPED)
        repo.save(order)

        assert len(repo.list_all()) == 1
        assert repo.get_by_id(order.id).status == OrderStatus.SHIPPED

    def test_lookup_by_order_number(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.save(order)
        assert repo.get_by_order_number(order.order_number).id == order.id
        assert repo.get_by_order_number("TT-0-0") is None

    def test_list_by_email(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(_order("alice@example.com"))
        repo.save(_order("bob@example.com"))
        assert [o.email for o in repo.list_by_email("Bob@Example.com")] == ["bob@example.com"]

    def test_legacy_record_without_reservation_flag(self, tmp_path):
        path = tmp_path / "orders.json"
        repo = JsonOrderRepository(path)
        approved, pending = _order(), _order()
        approved.change_status(OrderStatus.APPROVED)
        repo.save(approved)
        repo.save(pending)

        records = json.loads(path.read_text())
        for raw in records:
            del raw["stock_reserved"]
        path.write_text(json.dumps(records))

        assert repo.get_by_id(approved.id).stock_reserved
        assert not repo.get_by_id(pending.id).stock_reserved


class TestJsonProductRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        product = Product(
            id="p1",
            name="Shirt",
            colors=[ColorOption("Red", ("red.jpg",)), "Blue"],
            sizes=["M"],
            stock={"M-Red": 2},
        )
        repo.save(product)
        assert repo.get_by_id("p1") == product

    def test_save_keeps_catalog_fields(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([
            {"id": "p1", "name": "Shirt", "price": 850, "description": "Cotton",
             "stock": {"M-Red": 2}},
        ]))
        repo = JsonProductRepository(path)

        product = repo.get_by_id("p1")
        product.decrement_stock("M-Red", 1)
        repo.save(product)

        [raw] = json.loads(path.read_text())
        assert raw["price"] == 850
        assert raw["description"] == "Cotton"
        assert raw["stock"] == {"M-Red": 1}

    def test_missing_stock_map(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([{"id": "legacy", "colors": [{"name": "Beige"}]}]))
        product = JsonProductRepository(path).get_by_id("legacy")
        assert product.stock == {}
        assert product.colors[0].name == "Beige"


class TestJsonDiscrepancyRepository:

    def test_list_open_skips_resolved(self, tmp_path):
        repo = JsonDiscrepancyRepository(tmp_path / "discrepancies.json")
        open_one = StockDiscrepancy("o1", "p1", "M", "Red", 2, "Product 'p1' not found")
        done = StockDiscrepancy("o2", "p1", "M", "Red", 1, "timeout")
        done.mark_resolved()
        repo.save(open_one)
        repo.save(done)

        assert [d.id for d in repo.list_open()] == [open_one.id]

    def test_failure_count_persists(self, tmp_path):
        repo = JsonDiscrepancyRepository(tmp_path / "discrepancies.json")
        discrepancy = StockDiscrepancy("o1", "p1", "M", "Red", 2, "first")
        discrepancy.record_failure("second")
        repo.save(discrepancy)

        [loaded] = repo.list_open()
        assert loaded.attempts == 2
        assert loaded.reason == "second"
