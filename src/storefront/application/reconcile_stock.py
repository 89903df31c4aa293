"""Application service: Reconcile Stock use case.

Retries stock releases that failed while an order was being refused,
cancelled or sent back from ``approved``.  Each discrepancy is applied at
most once: it is marked resolved as soon as its release succeeds, and runs
are serialized so two of them never pick up the same open discrepancy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from storefront.domain.repository.discrepancy_repository import DiscrepancyRepository
from storefront.domain.service.locks import KeyedLocks
from storefront.domain.service.product_ledger import ProductLedger

logger = logging.getLogger(__name__)

RECONCILE_LOCK_KEY = "stock-reconciliation"


@dataclass(frozen=True)
class ReconcileResultDTO:
    resolved: int
    still_open: int


class ReconcileStockHandler:

    def __init__(
        self,
        discrepancy_repo: DiscrepancyRepository,
        ledger: ProductLedger,
        run_locks: KeyedLocks,
    ) -> None:
        self._discrepancy_repo = discrepancy_repo
        self._ledger = ledger
        self._run_locks = run_locks

    def handle(self) -> ReconcileResultDTO:
        with self._run_locks.hold(RECONCILE_LOCK_KEY):
            resolved = still_open = 0
            for discrepancy in self._discrepancy_repo.list_open():
                try:
                    self._ledger.release(
                        discrepancy.product_id,
                        discrepancy.size,
                        discrepancy.color,
                        discrepancy.quantity,
                    )
                except Exception as exc:
                    logger.warning(
                        "Discrepancy %s for order %s still failing: %s",
                        discrepancy.id,
                        discrepancy.order_id,
                        exc,
                    )
                    discrepancy.record_failure(str(exc))
                    still_open += 1
                else:
                    discrepancy.mark_resolved()
                    resolved += 1
                self._discrepancy_repo.save(discrepancy)

        if resolved or still_open:
            logger.info("Reconciliation: %d resolved, %d still open", resolved, still_open)
        return ReconcileResultDTO(resolved=resolved, still_open=still_open)
