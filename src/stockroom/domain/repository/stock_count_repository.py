"""Abstract repository for recorded stock counts."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.stock_count import StockCount


class StockCountRepository(ABC):

    @abstractmethod
    def add(self, count: StockCount) -> None:
        """Persist a stock count; assigns its id."""

    @abstractmethod
    def list_by_product(self, product_code: str) -> list[StockCount]:
        """Counts recorded for a product, newest first."""
