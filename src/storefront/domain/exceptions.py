"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer (or any other caller) can catch them uniformly.  None of
them are fatal: every one describes something the caller can correct.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderNotFound(EntityNotFoundError):

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order '{order_id}' not found")
        self.order_id = order_id


class ProductNotFound(EntityNotFoundError):

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class InsufficientStock(DomainException):
    """Not enough units on hand for the requested stock key."""

    def __init__(
        self,
        product_id: str,
        available: int,
        requested: int,
        name: str | None = None,
    ) -> None:
        label = name or product_id
        super().__init__(
            f"Insufficient stock for {label} "
            f"(requested {requested}, available {available})"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class InvalidTransition(DomainException):
    """The requested status is not reachable from the current one."""

    def __init__(self, from_status: str, to_status: str, message: str | None = None) -> None:
        super().__init__(
            message
            or f'Cannot change status from "{from_status}" to "{to_status}"'
        )
        self.from_status = from_status
        self.to_status = to_status


class AlreadyDelivered(InvalidTransition):
    """Delivered orders are terminal."""

    def __init__(self, order_id: str, to_status: str) -> None:
        super().__init__(
            "delivered",
            to_status,
            f"Order '{order_id}' is already delivered and cannot change status",
        )
        self.order_id = order_id


class Forbidden(DomainException):
    """The acting user may not perform this operation on the order."""


class InvalidAddress(ValidationError):
    """The shipping address is missing required fields."""


class ResourceBusy(DomainException):
    """A lock could not be acquired within the configured timeout."""
