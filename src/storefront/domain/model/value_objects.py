"""Immutable values used by orders: prices, quantities and addresses.

Each validates itself on construction, so an order can never hold a
negative price, a zero quantity or an address the courier cannot use.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from storefront.domain.exceptions import InvalidAddress, ValidationError


@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount.

    Uses Decimal to avoid floating-point rounding errors.  Line item prices
    are a snapshot taken when the order is placed.
    """

    amount: Decimal
    currency: str = "BDT"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Price must be a Decimal, not {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Price cannot be negative: {self.amount}"
            )

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "BDT") -> Money:
        """Build from a storefront price such as ``"850"`` or ``850.5``."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid price: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not a quantity
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be a whole number, not {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


REQUIRED_ADDRESS_FIELDS = ("street_address", "region_state", "city_area")


@dataclass(frozen=True)
class Address:
    """Delivery address.

    The engine only checks that the fields needed to deliver are present;
    everything else is carried through untouched.
    """

    street_address: str
    region_state: str
    city_area: str
    first_name: str | None = None
    last_name: str | None = None
    mobile_number: str | None = None
    country: str = "Bangladesh"
    zip_postal_code: str | None = None
    same_address: bool = True
    delivery_instructions: str | None = None

    @staticmethod
    def from_mapping(raw: Mapping[str, Any] | None) -> Address:
        """Build an Address, raising InvalidAddress if it is incomplete."""
        raw = raw or {}
        missing = [
            name for name in REQUIRED_ADDRESS_FIELDS
            if not str(raw.get(name) or "").strip()
        ]
        if missing:
            raise InvalidAddress(
                "Complete address is required (missing: " + ", ".join(missing) + ")"
            )
        return Address(
            street_address=str(raw["street_address"]).strip(),
            region_state=str(raw["region_state"]).strip(),
            city_area=str(raw["city_area"]).strip(),
            first_name=raw.get("first_name"),
            last_name=raw.get("last_name"),
            mobile_number=raw.get("mobile_number"),
            country=raw.get("country") or "Bangladesh",
            zip_postal_code=raw.get("zip_postal_code"),
            same_address=bool(raw.get("same_address", True)),
            delivery_instructions=raw.get("delivery_instructions"),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "mobile_number": self.mobile_number,
            "street_address": self.street_address,
            "country": self.country,
            "region_state": self.region_state,
            "city_area": self.city_area,
            "zip_postal_code": self.zip_postal_code,
            "same_address": self.same_address,
            "delivery_instructions": self.delivery_instructions,
        }
