"""Order status transition rules.

Pure functions over ``OrderStatus``; no persistence, no stock.  The table is
not a strict DAG: admins can, for example, send an approved
order back to ``order_confirmation``.

Evaluation order:
  1. ``delivered`` is terminal.
  2. ``cancelled`` is always reachable.
  3. The explicit per-status allow lists.
  4. Otherwise the rank fallback: the target's rank must be >= the current one.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import AlreadyDelivered, InvalidTransition
from storefront.domain.model.order import OrderStatus

S = OrderStatus

STATUS_RANK: dict[OrderStatus, int] = {
    S.PENDING: 0,
    S.AWAITING_PROCESSING: 1,
    S.ORDER_CONFIRMATION: 2,
    S.APPROVED: 2,
    S.SHIPPED: 3,
    S.DELIVERED: 4,
    S.REFUSED: 1,
    S.CANCELLED: 0,
}

EXPLICIT_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    S.APPROVED: frozenset({
        S.SHIPPED, S.DELIVERED, S.REFUSED, S.CANCELLED,
        S.AWAITING_PROCESSING, S.ORDER_CONFIRMATION,
    }),
    S.REFUSED: frozenset({
        S.AWAITING_PROCESSING, S.ORDER_CONFIRMATION, S.APPROVED, S.CANCELLED,
    }),
    S.ORDER_CONFIRMATION: frozenset({
        S.APPROVED, S.SHIPPED, S.DELIVERED, S.REFUSED, S.CANCELLED,
        S.AWAITING_PROCESSING,
    }),
    S.AWAITING_PROCESSING: frozenset({
        S.ORDER_CONFIRMATION, S.APPROVED, S.SHIPPED, S.DELIVERED, S.REFUSED,
        S.CANCELLED,
    }),
}

TERMINAL_STATUSES = frozenset({S.DELIVERED})

# Leaving APPROVED for one of these gives the reserved units back.
RELEASING_TARGETS = frozenset({
    S.AWAITING_PROCESSING, S.ORDER_CONFIRMATION, S.REFUSED, S.CANCELLED,
})


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    requires_stock_release: bool = False
    requires_stock_reservation: bool = False
    reason: str = ""


def can_transition(current: OrderStatus, requested: OrderStatus) -> TransitionDecision:
    """Decide whether *current* -> *requested* is legal and what it does to stock."""
    if current in TERMINAL_STATUSES:
        return TransitionDecision(False, reason=f"{current.value} is terminal")

    if requested == S.CANCELLED:
        allowed, reason = True, "cancellation is always allowed"
    elif requested in EXPLICIT_TRANSITIONS.get(current, frozenset()):
        allowed, reason = True, "explicit transition"
    elif STATUS_RANK[requested] >= STATUS_RANK[current]:
        allowed, reason = True, "forward progression"
    else:
        return TransitionDecision(
            False,
            reason=f"{requested.value} is behind {current.value} in the order flow",
        )

    return TransitionDecision(
        allowed,
        requires_stock_release=(current == S.APPROVED and requested in RELEASING_TARGETS),
        requires_stock_reservation=(requested == S.APPROVED and current != S.APPROVED),
        reason=reason,
    )


def ensure_transition(
    order_id: str, current: OrderStatus, requested: OrderStatus
) -> TransitionDecision:
    """Like ``can_transition`` but raises when the move is not allowed."""
    decision = can_transition(current, requested)
    if decision.allowed:
        return decision
    if current == S.DELIVERED:
        raise AlreadyDelivered(order_id, requested.value)
    raise InvalidTransition(
        current.value,
        requested.value,
        f'Cannot change status from "{current.value}" to "{requested.value}". '
        "Status can only move forward in the order flow.",
    )
