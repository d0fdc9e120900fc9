"""Abstract repository for the (read-mostly) product catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_code(self, code: str) -> Product | None:
        """Return a product by its code, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
