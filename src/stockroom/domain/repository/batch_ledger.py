"""Abstract Batch Ledger — single source of truth for per-batch stock.

Every stock mutation passes through ``reserve`` and ``release``.  Both must
be atomic conditional updates at the storage layer: two callers racing on
the same batch can never both succeed into negative stock, and a release
can never lift a batch above its initial snapshot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from stockroom.domain.model.batch import Batch


class BatchLedger(ABC):

    @abstractmethod
    def list_available(self, product_code: str) -> list[Batch]:
        """Batches with stock left, earliest expiry first, then arrival, then id."""

    @abstractmethod
    def reserve(self, batch_id: int, quantity: int) -> None:
        """Atomically decrement a batch.

        Raises InsufficientStockError without mutating when the batch holds
        less than *quantity*, EntityNotFoundError for an unknown batch.
        """

    @abstractmethod
    def release(self, batch_id: int, quantity: int) -> None:
        """Atomically increment a batch.

        Raises InvalidReleaseError when the result would exceed the
        batch's initial quantity.
        """

    @abstractmethod
    def total_stock(self, product_code: str) -> int:
        """Sum of remaining quantity over every batch of the product."""

    @abstractmethod
    def get_by_id(self, batch_id: int) -> Batch | None:
        """Return a batch by id, or None."""

    @abstractmethod
    def list_by_product(self, product_code: str) -> list[Batch]:
        """Every batch of the product, depleted ones included, in allocation order."""

    @abstractmethod
    def list_expiring(self, cutoff: date) -> list[Batch]:
        """Batches with stock left that expire on or before *cutoff*."""

    @abstractmethod
    def add(self, batch: Batch) -> Batch:
        """Persist a newly received batch and assign its id."""
