"""Abstract repository for Order aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.transaction import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by id, or None."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order, including its detail rows; assigns ids."""

    @abstractmethod
    def delete(self, order_id: int) -> None:
        """Remove an order and its detail rows."""
