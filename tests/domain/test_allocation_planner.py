"""Unit tests for the AllocationPlanner domain service."""

from datetime import date

import pytest

from stockroom.domain.exceptions import InsufficientStockError, ValidationError
from stockroom.domain.model.value_objects import Money
from stockroom.domain.service.allocation_planner import AllocationPlanner
from tests.fakes import InMemoryBatchLedger, make_batch

PRICE = Money.of("10.00")


def _planner(*batches) -> tuple[AllocationPlanner, InMemoryBatchLedger]:
    ledger = InMemoryBatchLedger(list(batches))
    return AllocationPlanner(ledger), ledger


class TestFifoByExpiration:

    def test_spans_batches_in_expiry_order(self):
        planner, _ = _planner(
            make_batch(2, 10, date(2025, 2, 1)),
            make_batch(1, 4, date(2025, 1, 1)),
        )
        plan = planner.plan("A", 6, PRICE)
        assert [(p.batch_id, p.quantity) for p in plan] == [(1, 4), (2, 2)]

    def test_single_batch_covers_request(self):
        planner, _ = _planner(make_batch(1, 10, date(2025, 1, 1)), make_batch(2, 10, date(2025, 2, 1)))
        plan = planner.plan("A", 3, PRICE)
        assert [(p.batch_id, p.quantity) for p in plan] == [(1, 3)]

    def test_undated_batch_drawn_last(self):
        planner, _ = _planner(make_batch(1, 5, None), make_batch(2, 5, date(2026, 1, 1)))
        plan = planner.plan("A", 7, PRICE)
        assert [(p.batch_id, p.quantity) for p in plan] == [(2, 5), (1, 2)]

    def test_ties_break_on_arrival_then_id(self):
        expiry = date(2025, 3, 1)
        planner, _ = _planner(
            make_batch(3, 2, expiry, arrived=date(2024, 10, 1)),
            make_batch(2, 2, expiry, arrived=date(2024, 9, 1)),
            make_batch(1, 2, expiry, arrived=date(2024, 10, 1)),
        )
        plan = planner.plan("A", 6, PRICE)
        assert [p.batch_id for p in plan] == [2, 1, 3]

    def test_exact_total_drains_everything(self):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)), make_batch(2, 10, date(2025, 2, 1)))
        plan = planner.plan("A", 14, PRICE)
        assert sum(p.quantity for p in plan) == 14

    def test_depleted_batches_skipped(self):
        planner, _ = _planner(
            make_batch(1, 4, date(2025, 1, 1), remaining=0),
            make_batch(2, 10, date(2025, 2, 1)),
        )
        plan = planner.plan("A", 2, PRICE)
        assert [p.batch_id for p in plan] == [2]

    def test_plan_carries_price_and_expiry(self):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)))
        step = planner.plan("A", 2, PRICE)[0]
        assert step.unit_price == PRICE
        assert step.expiration_date == date(2025, 1, 1)
        assert str(step.subtotal) == "20.00"

    def test_planning_does_not_touch_ledger(self):
        planner, ledger = _planner(make_batch(1, 4, date(2025, 1, 1)))
        planner.plan("A", 4, PRICE)
        assert ledger.remaining(1) == 4
        assert ledger.reserve_calls == []


class TestAlreadyDrawn:

    def test_units_claimed_by_earlier_lines_are_gone(self):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)), make_batch(2, 10, date(2025, 2, 1)))
        plan = planner.plan("A", 5, PRICE, already_drawn={1: 3})
        assert [(p.batch_id, p.quantity) for p in plan] == [(1, 1), (2, 4)]

    def test_fully_claimed_batch_is_skipped(self):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)), make_batch(2, 10, date(2025, 2, 1)))
        plan = planner.plan("A", 2, PRICE, already_drawn={1: 4})
        assert [p.batch_id for p in plan] == [2]


class TestPlanFailures:

    def test_insufficient_reports_requested_and_available(self):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)), make_batch(2, 4, date(2025, 2, 1)))
        with pytest.raises(InsufficientStockError) as excinfo:
            planner.plan("A", 20, PRICE)
        assert excinfo.value.requested == 20
        assert excinfo.value.available == 8
        assert excinfo.value.product_code == "A"

    def test_unknown_product_has_nothing_available(self):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)))
        with pytest.raises(InsufficientStockError) as excinfo:
            planner.plan("NOPE", 1, PRICE)
        assert excinfo.value.available == 0

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        planner, _ = _planner(make_batch(1, 4, date(2025, 1, 1)))
        with pytest.raises(ValidationError, match="must be positive"):
            planner.plan("A", quantity, PRICE)
