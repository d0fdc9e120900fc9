"""Domain service: Allocation Planner.

Decides which batches satisfy a requested quantity of one product.  Pure
planning: it reads the ledger and never mutates it.

Policy: FIFO-by-expiration.  The earliest-expiring batch with stock is
exhausted before a later-expiring one is touched, which keeps spoilage to a
minimum.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from stockroom.domain.exceptions import InsufficientStockError, ValidationError
from stockroom.domain.model.allocation import PlanLine
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.batch_ledger import BatchLedger

logger = logging.getLogger(__name__)


class AllocationPlanner:

    def __init__(self, ledger: BatchLedger) -> None:
        self._ledger = ledger

    def plan(
        self,
        product_code: str,
        requested_quantity: int,
        unit_price: Money,
        already_drawn: Mapping[int, int] | None = None,
    ) -> list[PlanLine]:
        """Greedy walk over the available batches in allocation order.

        ``already_drawn`` maps batch id -> quantity claimed by earlier lines
        of the same transaction; those units are treated as gone.

        Raises ValidationError for a non-positive quantity and
        InsufficientStockError (with the available total) when the batches
        run out before the request is covered.  An unknown product simply
        has nothing available.
        """
        if requested_quantity <= 0:
            raise ValidationError("Requested quantity must be positive")

        drawn = already_drawn or {}
        still_needed = requested_quantity
        plan: list[PlanLine] = []

        for batch in self._ledger.list_available(product_code):
            free = batch.remaining_quantity - drawn.get(batch.id, 0)
            if free <= 0:
                continue
            take = min(free, still_needed)
            plan.append(
                PlanLine(
                    batch_id=batch.id,
                    batch_code=batch.batch_code,
                    product_code=product_code,
                    quantity=take,
                    unit_price=unit_price,
                    expiration_date=batch.expiration_date,
                )
            )
            still_needed -= take
            if still_needed == 0:
                break

        if still_needed > 0:
            available = requested_quantity - still_needed
            logger.debug(
                "plan short product=%s requested=%d available=%d",
                product_code, requested_quantity, available,
            )
            raise InsufficientStockError.single(product_code, requested_quantity, available)

        return plan
