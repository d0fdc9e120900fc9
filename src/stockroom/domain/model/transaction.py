"""Sale and Order aggregates with their persisted detail rows.

A header owns its detail rows; each row records exactly which batch a
quantity was drawn from and at what unit price.  Totals are always derived
from the rows, never stored independently on the aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from stockroom.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateTransitionError,
    ValidationError,
)
from stockroom.domain.model.allocation import PlanLine
from stockroom.domain.model.value_objects import Money, Quantity

MAX_LINES = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TransactionLine:
    """Input: one requested product line of a sale or order.

    ``unit_price`` of None means "use the product's current sell price".
    """

    product_code: str
    quantity: Quantity
    unit_price: Money | None = None


@dataclass
class DetailRow:

    id: int | None
    product_code: str
    batch_id: int
    batch_code: str
    quantity: int
    unit_price: Money
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    @staticmethod
    def from_plan(line: PlanLine) -> DetailRow:
        return DetailRow(
            id=None,
            product_code=line.product_code,
            batch_id=line.batch_id,
            batch_code=line.batch_code,
            quantity=line.quantity,
            unit_price=line.unit_price,
        )


def _sum(details: list[DetailRow]) -> Money:
    total = Money.zero()
    for row in details:
        total = total + row.subtotal
    return total


def _check_details(details: list[DetailRow]) -> None:
    if not details:
        raise ValidationError("A transaction must contain at least one line")
    if len(details) > MAX_LINES:
        raise ValidationError(f"Maximum {MAX_LINES} detail lines per transaction")


@dataclass
class Sale:
    """A completed sale.  Immutable once persisted."""

    id: int | None
    user_id: int
    sale_date: date
    details: list[DetailRow]
    created_at: datetime = field(default_factory=_utcnow)

    @staticmethod
    def create(user_id: int, sale_date: date, details: list[DetailRow]) -> Sale:
        _check_details(details)
        return Sale(id=None, user_id=user_id, sale_date=sale_date, details=list(details))

    @property
    def total(self) -> Money:
        return _sum(self.details)


class OrderStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    CANCELLED = "cancelled"
    RECEIVED = "received"


@dataclass
class Order:
    """Order aggregate.

    ``pending`` is the only mutable state: lines may be edited and the
    order approved, cancelled or deleted.  ``approved`` may only move on to
    ``received``.  Stock is deducted when the order is created, so
    cancellation must be preceded by releasing every detail row.
    """

    id: int | None
    user_id: int
    order_date: date
    details: list[DetailRow]
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @staticmethod
    def create(user_id: int, order_date: date, details: list[DetailRow]) -> Order:
        _check_details(details)
        return Order(id=None, user_id=user_id, order_date=order_date, details=list(details))

    @property
    def total(self) -> Money:
        return _sum(self.details)

    @property
    def is_pending(self) -> bool:
        return self.status is OrderStatus.PENDING

    # --- State transitions ----------------------------------------------------

    def approve(self) -> None:
        self._transition(OrderStatus.PENDING, OrderStatus.APPROVED, "approve")

    def cancel(self) -> None:
        self._transition(OrderStatus.PENDING, OrderStatus.CANCELLED, "cancel")

    def receive(self) -> None:
        self._transition(OrderStatus.APPROVED, OrderStatus.RECEIVED, "receive")

    def ensure_editable(self, action: str = "edit") -> None:
        if not self.is_pending:
            raise InvalidStateTransitionError(
                f"Cannot {action} order #{self.id} in {self.status.value} status"
            )

    # --- Line editing ---------------------------------------------------------

    def find_detail(self, detail_id: int) -> DetailRow:
        for row in self.details:
            if row.id == detail_id:
                return row
        raise EntityNotFoundError(f"Detail #{detail_id} is not part of order #{self.id}")

    def replace_detail(self, detail_id: int, replacements: list[DetailRow]) -> None:
        """Swap one detail row for the rows of its re-planned allocation."""
        self.ensure_editable()
        if not replacements:
            raise ValidationError("A replaced line needs at least one detail row")
        index = self.details.index(self.find_detail(detail_id))
        # keep the id on the first row so the line stays addressable
        replacements[0].id = detail_id
        self.details[index:index + 1] = replacements
        self.updated_at = _utcnow()

    def _transition(self, expected: OrderStatus, target: OrderStatus, action: str) -> None:
        if self.status is not expected:
            raise InvalidStateTransitionError(
                f"Cannot {action} order #{self.id} — current status is "
                f"{self.status.value}, expected {expected.value}"
            )
        self.status = target
        self.updated_at = _utcnow()
