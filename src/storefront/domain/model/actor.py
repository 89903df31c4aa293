"""Who is asking.

Authentication happens outside the engine; callers hand in an ``Actor``
describing the already-verified identity and its role.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.model.order import CancelledBy, Order


class ActorKind(Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    kind: ActorKind
    id: str | None = None
    email: str | None = None

    @staticmethod
    def admin(id: str | None = None, email: str | None = None) -> Actor:
        return Actor(ActorKind.ADMIN, id=id, email=email)

    @staticmethod
    def user(id: str | None = None, email: str | None = None) -> Actor:
        return Actor(ActorKind.USER, id=id, email=email)

    @property
    def is_admin(self) -> bool:
        return self.kind == ActorKind.ADMIN

    @property
    def cancelled_by(self) -> CancelledBy:
        return CancelledBy.ADMIN if self.is_admin else CancelledBy.USER

    def owns(self, order: Order) -> bool:
        return order.belongs_to(self.id, self.email)
