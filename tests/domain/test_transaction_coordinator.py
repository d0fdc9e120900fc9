"""Unit tests for the TransactionCoordinator: all-or-nothing stock deduction."""

from datetime import date
from decimal import Decimal

import pytest

from stockroom.domain.exceptions import (
    ConcurrentStockConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidReleaseError,
    ValidationError,
)
from stockroom.domain.model.transaction import DetailRow, TransactionLine
from stockroom.domain.model.value_objects import Money, Quantity
from stockroom.domain.service.transaction_coordinator import TransactionCoordinator
from tests.fakes import FailingLedger, InMemoryBatchLedger, RacingLedger, make_batch


def _line(code: str, qty: int, price: str | None = "10.00") -> TransactionLine:
    return TransactionLine(code, Quantity(qty), Money.of(price) if price else None)


def _stock() -> list:
    return [
        make_batch(1, 4, date(2025, 1, 1)),
        make_batch(2, 10, date(2025, 2, 1)),
        make_batch(3, 3, date(2025, 1, 15), product_code="B"),
    ]


class TestExecute:

    def test_sale_spanning_two_batches(self):
        ledger = InMemoryBatchLedger(_stock())
        plan = TransactionCoordinator(ledger).execute([_line("A", 6)])

        assert [(p.batch_id, p.quantity) for p in plan] == [(1, 4), (2, 2)]
        assert ledger.remaining(1) == 0
        assert ledger.remaining(2) == 8

    def test_detail_rows_mirror_plan(self):
        ledger = InMemoryBatchLedger(_stock())
        coordinator = TransactionCoordinator(ledger)
        rows = coordinator.to_detail_rows(coordinator.execute([_line("A", 6)]))

        assert [(r.batch_code, r.quantity) for r in rows] == [("B1", 4), ("B2", 2)]
        assert sum((r.subtotal.amount for r in rows), Decimal("0")) == Decimal("60.00")

    def test_lines_of_same_product_never_double_count(self):
        ledger = InMemoryBatchLedger(_stock())
        plan = TransactionCoordinator(ledger).execute([_line("A", 3), _line("A", 3)])

        assert [(p.batch_id, p.quantity) for p in plan] == [(1, 3), (1, 1), (2, 2)]
        assert ledger.total_stock("A") == 8

    def test_exact_stock_drains_every_batch(self):
        ledger = InMemoryBatchLedger(_stock())
        TransactionCoordinator(ledger).execute([_line("A", 14)])
        assert ledger.total_stock("A") == 0

    def test_deduction_equals_requested(self):
        ledger = InMemoryBatchLedger(_stock())
        before = ledger.total_stock("A") + ledger.total_stock("B")
        TransactionCoordinator(ledger).execute([_line("A", 5), _line("B", 2)])
        after = ledger.total_stock("A") + ledger.total_stock("B")
        assert before - after == 7


class TestPlanPhaseFailure:

    def test_one_short_line_leaves_every_batch_untouched(self):
        ledger = InMemoryBatchLedger(_stock())
        with pytest.raises(InsufficientStockError):
            TransactionCoordinator(ledger).execute([_line("A", 2), _line("B", 5)])

        assert ledger.reserve_calls == []
        assert ledger.total_stock("A") == 14
        assert ledger.total_stock("B") == 3

    def test_every_shortfall_is_itemized(self):
        ledger = InMemoryBatchLedger(_stock())
        with pytest.raises(InsufficientStockError) as excinfo:
            TransactionCoordinator(ledger).execute([_line("A", 20), _line("B", 1), _line("B", 5)])

        shortfalls = excinfo.value.shortfalls
        assert [(s.line_number, s.product_code, s.requested, s.available) for s in shortfalls] == [
            (1, "A", 20, 14),
            (3, "B", 5, 2),
        ]
        assert "line 1" in str(excinfo.value)

    def test_empty_transaction_rejected(self):
        with pytest.raises(ValidationError, match="at least one line"):
            TransactionCoordinator(InMemoryBatchLedger()).execute([])

    def test_missing_price_rejected(self):
        with pytest.raises(ValidationError, match="Line 1 has no unit price"):
            TransactionCoordinator(InMemoryBatchLedger(_stock())).execute([_line("A", 1, None)])

    def test_too_many_detail_rows_rejected_before_reserving(self):
        ledger = InMemoryBatchLedger([make_batch(i, 1, date(2025, 1, 1)) for i in range(1, 102)])
        with pytest.raises(ValidationError, match="needs 101 detail rows"):
            TransactionCoordinator(ledger).execute([_line("A", 101)])
        assert ledger.reserve_calls == []
        assert ledger.total_stock("A") == 101


class TestReservePhaseFailure:

    def test_conflict_rolls_back_applied_reserves(self):
        ledger = RacingLedger(_stock())
        ledger.drain_before_reserve(2, 9)

        with pytest.raises(ConcurrentStockConflictError) as excinfo:
            TransactionCoordinator(ledger).execute([_line("A", 6)])

        assert isinstance(excinfo.value.__cause__, InsufficientStockError)
        assert ledger.remaining(1) == 4
        assert ledger.remaining(2) == 1
        assert ledger.release_calls == [(1, 4)]

    def test_storage_error_rolls_back_and_propagates(self):
        ledger = FailingLedger(_stock(), fail_on_calls=(3,))

        with pytest.raises(RuntimeError, match="storage unavailable"):
            TransactionCoordinator(ledger).execute([_line("A", 6), _line("B", 1)])

        assert ledger.total_stock("A") == 14
        assert ledger.total_stock("B") == 3
        assert ledger.release_calls == [(2, 2), (1, 4)]


class TestReserveOnBatch:

    def test_reserves_named_batch(self):
        ledger = InMemoryBatchLedger(_stock())
        step = TransactionCoordinator(ledger).reserve_on_batch(2, "A", 5, Money.of("1.00"))
        assert step.batch_code == "B2"
        assert ledger.remaining(2) == 5
        assert ledger.remaining(1) == 4

    def test_unknown_batch(self):
        with pytest.raises(EntityNotFoundError, match="Batch #99"):
            TransactionCoordinator(InMemoryBatchLedger(_stock())).reserve_on_batch(99, "A", 1, Money.of("1"))

    def test_batch_of_other_product(self):
        with pytest.raises(ValidationError, match="belongs to product B"):
            TransactionCoordinator(InMemoryBatchLedger(_stock())).reserve_on_batch(3, "A", 1, Money.of("1"))

    def test_named_batch_too_small(self):
        ledger = InMemoryBatchLedger(_stock())
        with pytest.raises(InsufficientStockError) as excinfo:
            TransactionCoordinator(ledger).reserve_on_batch(1, "A", 5, Money.of("1"))
        assert excinfo.value.available == 4
        assert ledger.remaining(1) == 4


class TestReleaseAll:

    def _row(self, batch_id: int, quantity: int) -> DetailRow:
        return DetailRow(1, "A", batch_id, f"B{batch_id}", quantity, Money.of("1.00"))

    def test_returns_quantities_to_their_batches(self):
        ledger = InMemoryBatchLedger([make_batch(1, 4, None, remaining=1), make_batch(2, 10, None, remaining=8)])
        TransactionCoordinator(ledger).release_all([self._row(1, 3), self._row(2, 2)])
        assert ledger.remaining(1) == 4
        assert ledger.remaining(2) == 10

    def test_overflowing_release_restores_earlier_releases(self):
        ledger = InMemoryBatchLedger([make_batch(1, 4, None, remaining=1), make_batch(2, 10, None, remaining=9)])
        with pytest.raises(InvalidReleaseError):
            TransactionCoordinator(ledger).release_all([self._row(1, 3), self._row(2, 2)])
        assert ledger.remaining(1) == 1
        assert ledger.remaining(2) == 9

    def test_reclaim_takes_released_rows_back(self):
        ledger = InMemoryBatchLedger([make_batch(1, 4, None), make_batch(2, 10, None)])
        TransactionCoordinator(ledger).reclaim([self._row(1, 3), self._row(2, 2)])
        assert ledger.reserve_calls == [(2, 2), (1, 3)]
        assert ledger.total_stock("A") == 9

    def test_release_never_exceeds_initial(self):
        ledger = InMemoryBatchLedger([make_batch(1, 4, None)])
        with pytest.raises(InvalidReleaseError):
            ledger.release(1, 1)
        assert ledger.remaining(1) == 4
