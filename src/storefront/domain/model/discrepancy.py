"""A stock release that failed and still has to be applied."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class StockDiscrepancy:
    """Units that should have gone back on a product but did not.

    Refusing, cancelling or reverting an approved order never fails because
    stock could not be restored; the missing release is recorded here and
    retried by the reconciliation use case.
    """

    order_id: str
    product_id: str
    size: str
    color: str
    quantity: int
    reason: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    attempts: int = 1
    resolved_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None

    def mark_resolved(self) -> None:
        self.resolved_at = datetime.now(timezone.utc)

    def record_failure(self, reason: str) -> None:
        self.attempts += 1
        self.reason = reason
