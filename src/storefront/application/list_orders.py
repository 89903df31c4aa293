"""Application service: List Orders use case (query).

Without an email this is the admin listing of every order; with one it is
a customer's order history.  Both are newest first.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO, to_order_dto
from storefront.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, email: str | None = None) -> list[OrderDTO]:
        if email:
            orders = self._order_repo.list_by_email(email.strip())
        else:
            orders = self._order_repo.list_all()
        return [to_order_dto(order) for order in orders]
