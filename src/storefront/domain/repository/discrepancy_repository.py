"""Abstract repository for unapplied stock releases."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.discrepancy import StockDiscrepancy


class DiscrepancyRepository(ABC):

    @abstractmethod
    def list_open(self) -> list[StockDiscrepancy]:
        """Discrepancies not yet resolved, oldest first."""

    @abstractmethod
    def save(self, discrepancy: StockDiscrepancy) -> None:
        """Persist a new or updated discrepancy."""
