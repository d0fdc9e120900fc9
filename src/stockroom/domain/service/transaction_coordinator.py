"""Domain service: Transaction Coordinator.

Turns the lines of a sale or order into stock deductions, all or nothing.

Two phases, never interleaved:
  Phase 1 - plan every line against the current ledger.  Any shortfall
            aborts before a single batch is touched.
  Phase 2 - reserve every plan line.  If a reserve fails (another
            transaction drained the batch after planning) or storage
            errors out, every reserve already applied is released again
            before the error surfaces.  No partial deduction survives.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from stockroom.domain.exceptions import (
    ConcurrentStockConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidReleaseError,
    Shortfall,
    ValidationError,
)
from stockroom.domain.model.allocation import PlanLine
from stockroom.domain.model.transaction import MAX_LINES, DetailRow, TransactionLine
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.service.allocation_planner import AllocationPlanner

logger = logging.getLogger(__name__)


class TransactionCoordinator:

    def __init__(
        self,
        ledger: BatchLedger,
        planner: AllocationPlanner | None = None,
    ) -> None:
        self._ledger = ledger
        self._planner = planner or AllocationPlanner(ledger)

    def execute(self, lines: list[TransactionLine]) -> list[PlanLine]:
        """Plan and reserve every line; return the applied plan."""
        plan = self.plan(lines)
        self.reserve(plan)
        logger.info(
            "stock deducted lines=%d batches=%d units=%d",
            len(lines), len({p.batch_id for p in plan}), sum(p.quantity for p in plan),
        )
        return plan

    def plan(self, lines: list[TransactionLine]) -> list[PlanLine]:
        """Phase 1: plan all lines, collecting every shortfall."""
        if not lines:
            raise ValidationError("A transaction must contain at least one line")

        drawn: dict[int, int] = defaultdict(int)
        plan: list[PlanLine] = []
        shortfalls: list[Shortfall] = []

        for number, line in enumerate(lines, start=1):
            if line.unit_price is None:
                raise ValidationError(f"Line {number} has no unit price")
            try:
                line_plan = self._planner.plan(
                    line.product_code, line.quantity.value, line.unit_price, drawn
                )
            except InsufficientStockError as exc:
                shortfalls.extend(
                    Shortfall(s.product_code, s.requested, s.available, number)
                    for s in exc.shortfalls
                )
                continue
            for step in line_plan:
                drawn[step.batch_id] += step.quantity
            plan.extend(line_plan)

        if shortfalls:
            raise InsufficientStockError(shortfalls)
        if len(plan) > MAX_LINES:
            raise ValidationError(
                f"Allocation needs {len(plan)} detail rows; maximum is {MAX_LINES} per transaction"
            )
        return plan

    def reserve(self, plan: list[PlanLine]) -> None:
        """Phase 2: apply the plan, compensating on any failure."""
        applied: list[PlanLine] = []
        try:
            for step in plan:
                self._ledger.reserve(step.batch_id, step.quantity)
                applied.append(step)
        except InsufficientStockError as exc:
            logger.warning(
                "reserve conflict batch=%s product=%s requested=%d available=%d; "
                "rolling back %d reserve(s)",
                step.batch_code, step.product_code, exc.requested, exc.available, len(applied),
            )
            self.compensate(applied)
            raise ConcurrentStockConflictError(
                f"Batch {step.batch_code} of product {step.product_code} changed "
                f"while the transaction was being applied; nothing was deducted"
            ) from exc
        except Exception:
            logger.warning("reserve phase failed; rolling back %d reserve(s)", len(applied))
            self.compensate(applied)
            raise

    def reserve_on_batch(
        self,
        batch_id: int,
        product_code: str,
        quantity: int,
        unit_price: Money,
    ) -> PlanLine:
        """Plan and reserve against one explicitly chosen batch."""
        if quantity <= 0:
            raise ValidationError("Requested quantity must be positive")
        batch = self._ledger.get_by_id(batch_id)
        if batch is None:
            raise EntityNotFoundError(f"Batch #{batch_id} not found")
        if batch.product_code != product_code:
            raise ValidationError(
                f"Batch {batch.batch_code} belongs to product {batch.product_code}, "
                f"not {product_code}"
            )
        if batch.remaining_quantity < quantity:
            raise InsufficientStockError.single(product_code, quantity, batch.remaining_quantity)

        step = PlanLine(
            batch_id=batch.id,
            batch_code=batch.batch_code,
            product_code=product_code,
            quantity=quantity,
            unit_price=unit_price,
            expiration_date=batch.expiration_date,
        )
        self.reserve([step])
        return step

    def compensate(self, applied: list[PlanLine]) -> None:
        """Release reserves already applied, newest first."""
        for step in reversed(applied):
            try:
                self._ledger.release(step.batch_id, step.quantity)
            except (InvalidReleaseError, EntityNotFoundError):
                logger.exception(
                    "compensation failed batch=%s quantity=%d", step.batch_id, step.quantity
                )

    def release_all(self, details: list[DetailRow]) -> None:
        """Return persisted detail quantities to their batches.

        If one release is rejected the ones already done are reserved
        again, so the ledger is left exactly as it was.
        """
        released: list[DetailRow] = []
        try:
            for row in details:
                self._ledger.release(row.batch_id, row.quantity)
                released.append(row)
        except InvalidReleaseError:
            logger.exception(
                "release rejected; re-reserving %d detail row(s)", len(released)
            )
            self.reclaim(released)
            raise

    def reclaim(self, details: list[DetailRow]) -> None:
        """Take released detail quantities back out of their batches, newest first."""
        for row in reversed(details):
            self._ledger.reserve(row.batch_id, row.quantity)

    @staticmethod
    def to_detail_rows(plan: list[PlanLine]) -> list[DetailRow]:
        return [DetailRow.from_plan(step) for step in plan]
