"""End-to-end tests of the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.main import cli

PRODUCTS = [
    {"id": "p1", "name": "Shirt", "colors": ["Red"], "sizes": ["M"], "stock": {"M-Red": 2}},
    {"id": "legacy", "name": "Old Tote", "colors": ["Beige"]},
]

ADDRESS_ARGS = ["--street", "12 Lake Rd", "--region", "Dhaka", "--city", "Gulshan"]


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    (tmp_path / "products.json").write_text(json.dumps(PRODUCTS))
    monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path))
    bootstrap.reset()
    yield tmp_path
    bootstrap.reset()


@pytest.fixture
def runner():
    return CliRunner()


def _stock(data_dir, product_id="p1", key="M-Red"):
    products = json.loads((data_dir / "products.json").read_text())
    return next(p for p in products if p["id"] == product_id)["stock"][key]


def _create(runner, *items, email="alice@example.com"):
    args = ["order", "create", "--email", email, *ADDRESS_ARGS]
    for item in items:
        args += ["--item", item]
    return runner.invoke(cli, args)


def _only_order_id(data_dir):
    [order] = json.loads((data_dir / "orders.json").read_text())
    return order["id"]


class TestOrderCommands:

    def test_create(self, data_dir, runner):
        result = _create(runner, "p1:2:M:Red:850")
        assert result.exit_code == 0, result.output
        assert "status=pending" in result.output
        assert "1700.00" in result.output
        assert _stock(data_dir) == 2

    def test_create_insufficient_stock(self, data_dir, runner):
        result = _create(runner, "p1:3:M:Red")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output

    def test_create_bad_item_format(self, data_dir, runner):
        result = _create(runner, "p1")
        assert result.exit_code == 2
        assert "Invalid item format" in result.output

    def test_approve_then_refuse(self, data_dir, runner):
        _create(runner, "p1:2:M:Red")
        order_id = _only_order_id(data_dir)

        approved = runner.invoke(cli, ["order", "approve", "--id", order_id])
        assert approved.exit_code == 0, approved.output
        assert "approved" in approved.output
        assert _stock(data_dir) == 0

        again = runner.invoke(cli, ["order", "approve", "--id", order_id])
        assert "already approved" in again.output
        assert _stock(data_dir) == 0

        refused = runner.invoke(cli, ["order", "refuse", "--id", order_id])
        assert refused.exit_code == 0, refused.output
        assert _stock(data_dir) == 2

    def test_user_cancel_of_foreign_order(self, data_dir, runner):
        _create(runner, "p1:1:M:Red")
        order_id = _only_order_id(data_dir)

        result = runner.invoke(
            cli, ["order", "cancel", "--id", order_id, "--email", "mallory@example.com"]
        )

        assert result.exit_code == 1
        assert "your own orders" in result.output

    def test_status_update_and_show(self, data_dir, runner):
        _create(runner, "p1:1:M:Red")
        order_id = _only_order_id(data_dir)

        moved = runner.invoke(
            cli, ["order", "status", "--id", order_id, "--to", "shipped", "--shipper", "Pathao"]
        )
        shown = runner.invoke(cli, ["order", "show", "--id", order_id])

        assert "is now shipped" in moved.output
        assert "status=shipped" in shown.output
        assert "Shipper:  Pathao" in shown.output

    def test_backward_status_rejected(self, data_dir, runner):
        _create(runner, "p1:1:M:Red")
        order_id = _only_order_id(data_dir)
        runner.invoke(cli, ["order", "status", "--id", order_id, "--to", "shipped"])

        result = runner.invoke(cli, ["order", "status", "--id", order_id, "--to", "pending"])

        assert result.exit_code == 1
        assert "only move forward" in result.output

    def test_list(self, data_dir, runner):
        _create(runner, "p1:1:M:Red", email="bob@example.com")
        result = runner.invoke(cli, ["order", "list", "--email", "bob@example.com"])
        assert "bob@example.com" in result.output

    def test_list_empty(self, data_dir, runner):
        result = runner.invoke(cli, ["order", "list"])
        assert "No orders found." in result.output

    def test_show_unknown(self, data_dir, runner):
        result = runner.invoke(cli, ["order", "show", "--id", "nope"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestStockCommands:

    def test_check(self, data_dir, runner):
        ok = runner.invoke(cli, ["stock", "check", "--product", "p1", "--size", "M",
                                 "--color", "Red", "--qty", "2"])
        short = runner.invoke(cli, ["stock", "check", "--product", "p1", "--size", "M",
                                    "--color", "Red", "--qty", "5"])
        assert "Available (2 in stock)" in ok.output
        assert "Only 2 available" in short.output

    def test_unmanaged_fallback_from_environment(self, data_dir, runner, monkeypatch):
        monkeypatch.setenv("STOREFRONT_UNMANAGED_STOCK_FALLBACK", "5")
        bootstrap.reset()
        result = runner.invoke(cli, ["stock", "check", "--product", "legacy"])
        assert "Available (5 in stock)" in result.output

    def test_show(self, data_dir, runner):
        result = runner.invoke(cli, ["stock", "show", "--product", "p1"])
        assert "M-Red" in result.output
        legacy = runner.invoke(cli, ["stock", "show", "--product", "legacy"])
        assert "unmanaged" in legacy.output

    def test_reconcile_nothing_open(self, data_dir, runner):
        result = runner.invoke(cli, ["stock", "reconcile"])
        assert result.exit_code == 0
        assert "Resolved 0" in result.output
