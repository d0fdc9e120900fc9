"""StockCount — a physical count recorded against the ledger total.

Recording a count is informational: the difference is kept for review and
the ledger itself is not adjusted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockroom.domain.exceptions import ValidationError


@dataclass
class StockCount:

    id: int | None
    product_code: str
    system_quantity: int
    physical_quantity: int
    user_id: int
    note: str | None = None
    counted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def record(
        product_code: str,
        system_quantity: int,
        physical_quantity: int,
        user_id: int,
        note: str | None = None,
    ) -> StockCount:
        if physical_quantity < 0:
            raise ValidationError("Physical quantity cannot be negative")
        return StockCount(
            id=None,
            product_code=product_code,
            system_quantity=system_quantity,
            physical_quantity=physical_quantity,
            user_id=user_id,
            note=note,
        )

    @property
    def difference(self) -> int:
        return self.physical_quantity - self.system_quantity
