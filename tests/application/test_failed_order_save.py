"""Stock and order stay consistent when saving the order fails.

Each use case moves stock before saving the order; a failed save must put
the stock back so retrying the same call does not count it twice.
"""

import pytest

from storefront.domain.model.actor import Actor
from tests.harness import Storefront, shirt


def _approved_order(shop):
    dto = shop.place(shirt(2))
    shop.approve.handle(dto.id)
    assert shop.stock() == 0
    return dto


class TestFailedSaveAfterRelease:

    def test_refuse_retry_restores_once(self):
        shop = Storefront()
        dto = _approved_order(shop)
        shop.orders.fail_next_save(OSError("disk full"))

        with pytest.raises(OSError):
            shop.refuse.handle(dto.id)

        assert shop.stock() == 0
        assert shop.status(dto.id) == "approved"
        assert shop.orders.get_by_id(dto.id).stock_reserved

        shop.refuse.handle(dto.id)
        assert shop.stock() == 2

    def test_admin_cancel_retry_restores_once(self):
        shop = Storefront()
        dto = _approved_order(shop)
        shop.orders.fail_next_save(OSError("disk full"))

        with pytest.raises(OSError):
            shop.cancel.handle(dto.id, Actor.admin())
        assert shop.stock() == 0

        shop.cancel.handle(dto.id, Actor.admin())
        assert shop.stock() == 2

    def test_status_revert_retry_restores_once(self):
        shop = Storefront()
        dto = _approved_order(shop)
        shop.orders.fail_next_save(OSError("disk full"))

        with pytest.raises(OSError):
            shop.update_status.handle(dto.id, "order_confirmation")
        assert shop.stock() == 0

        shop.update_status.handle(dto.id, "order_confirmation")
        assert shop.stock() == 2

    def test_discrepancy_recorded_only_once_order_is_saved(self):
        shop = Storefront()
        dto = _approved_order(shop)
        shop.products.delete("p1")
        shop.orders.fail_next_save(OSError("disk full"))

        with pytest.raises(OSError):
            shop.refuse.handle(dto.id)
        assert shop.discrepancies.list_all() == []

        shop.refuse.handle(dto.id)
        assert len(shop.discrepancies.list_open()) == 1


class TestFailedSaveAfterReservation:

    def test_approve_gives_stock_back(self):
        shop = Storefront()
        dto = shop.place(shirt(2))
        shop.orders.fail_next_save(OSError("disk full"))

        with pytest.raises(OSError):
            shop.approve.handle(dto.id)

        assert shop.stock() == 2
        assert shop.status(dto.id) == "pending"

        shop.approve.handle(dto.id)
        assert shop.stock() == 0

    def test_status_to_approved_gives_stock_back(self):
        shop = Storefront()
        dto = shop.place(shirt(2))
        shop.orders.fail_next_save(OSError("disk full"))

        with pytest.raises(OSError):
            shop.update_status.handle(dto.id, "approved")

        assert shop.stock() == 2
