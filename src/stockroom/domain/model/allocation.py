"""PlanLine — one step of an allocation plan.

Ephemeral: produced by the planner, consumed by the coordinator, and folded
into persisted detail rows.  Never stored on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from stockroom.domain.model.value_objects import Money


@dataclass(frozen=True)
class PlanLine:

    batch_id: int
    batch_code: str
    product_code: str
    quantity: int
    unit_price: Money  # price at time of draw
    expiration_date: date | None = None

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity
