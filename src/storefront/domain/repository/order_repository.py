"""Abstract repository for the Order aggregate.

The repository enforces nothing beyond existence; lifecycle rules live in
the application handlers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its human-facing number, or None."""

    @abstractmethod
    def list_by_email(self, email: str) -> list[Order]:
        """Orders placed with *email* (case-insensitive), newest first."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Every order, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
