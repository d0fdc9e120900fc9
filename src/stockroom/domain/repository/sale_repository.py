"""Abstract repository for Sale aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.transaction import Sale


class SaleRepository(ABC):

    @abstractmethod
    def get_by_id(self, sale_id: int) -> Sale | None:
        """Return a sale by id, or None."""

    @abstractmethod
    def add(self, sale: Sale) -> None:
        """Persist a new sale with its detail rows; assigns ids."""
