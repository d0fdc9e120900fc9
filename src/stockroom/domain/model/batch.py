"""Batch — a dated lot of stock for one product.

A batch keeps its initial quantity as an immutable snapshot next to the
mutable remaining quantity.  Depleted batches are kept for history; they
simply drop out of allocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.value_objects import Money


@dataclass
class Batch:
    """Invariant: ``0 <= remaining_quantity <= initial_quantity``."""

    id: int | None
    product_code: str
    batch_code: str
    purchase_price: Money
    initial_quantity: int
    remaining_quantity: int
    arrival_date: date
    expiration_date: date | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.remaining_quantity <= self.initial_quantity:
            raise ValidationError(
                f"Batch {self.batch_code}: remaining quantity {self.remaining_quantity} "
                f"outside 0..{self.initial_quantity}"
            )

    @staticmethod
    def receive(
        product_code: str,
        batch_code: str,
        purchase_price: Money,
        quantity: int,
        arrival_date: date,
        expiration_date: date | None = None,
    ) -> Batch:
        """Create a freshly received, full batch."""
        if not batch_code or not batch_code.strip():
            raise ValidationError("Batch code is required")
        if quantity <= 0:
            raise ValidationError("Received quantity must be positive")
        if expiration_date is not None and expiration_date < arrival_date:
            raise ValidationError(
                f"Batch {batch_code} expires ({expiration_date}) before it arrives ({arrival_date})"
            )
        return Batch(
            id=None,
            product_code=product_code,
            batch_code=batch_code.strip(),
            purchase_price=purchase_price,
            initial_quantity=quantity,
            remaining_quantity=quantity,
            arrival_date=arrival_date,
            expiration_date=expiration_date,
        )

    @property
    def is_available(self) -> bool:
        return self.remaining_quantity > 0

    @property
    def consumed_quantity(self) -> int:
        return self.initial_quantity - self.remaining_quantity

    def allocation_key(self) -> tuple:
        """Sort key for FIFO-by-expiration: earliest expiry, then arrival, then id.

        Batches without an expiration date go after every dated batch.
        """
        return (
            self.expiration_date is None,
            self.expiration_date or date.max,
            self.arrival_date,
            self.id if self.id is not None else 0,
        )

    def days_until_expiry(self, today: date) -> int | None:
        if self.expiration_date is None:
            return None
        return (self.expiration_date - today).days
