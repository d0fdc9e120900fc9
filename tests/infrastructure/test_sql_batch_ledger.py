"""Tests for SqlBatchLedger against SQLite."""

import threading
from datetime import date

import pytest

from stockroom.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidReleaseError,
    ValidationError,
)
from stockroom.domain.model.batch import Batch
from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import Money
from stockroom.infrastructure.persistence.database import Database
from stockroom.infrastructure.persistence.sql_batch_ledger import SqlBatchLedger
from stockroom.infrastructure.persistence.sql_product_repository import SqlProductRepository

ARRIVED = date(2024, 12, 1)


def _receive(ledger: SqlBatchLedger, code: str, qty: int, expires: date | None, product: str = "A") -> int:
    batch = Batch.receive(product, code, Money.of("1.10"), qty, ARRIVED, expires)
    return ledger.add(batch).id


@pytest.fixture
def ledger(db) -> SqlBatchLedger:
    return SqlBatchLedger(db.session_factory)


class TestQueries:

    def test_available_in_allocation_order(self, ledger):
        _receive(ledger, "UNDATED", 5, None)
        _receive(ledger, "LATE", 5, date(2025, 3, 1))
        _receive(ledger, "EARLY", 5, date(2025, 1, 1))
        _receive(ledger, "OTHER", 5, date(2024, 12, 31), product="B")

        assert [b.batch_code for b in ledger.list_available("A")] == ["EARLY", "LATE", "UNDATED"]

    def test_depleted_batches_hidden_but_kept(self, ledger):
        gone = _receive(ledger, "GONE", 3, date(2025, 1, 1))
        _receive(ledger, "LEFT", 3, date(2025, 2, 1))
        ledger.reserve(gone, 3)

        assert [b.batch_code for b in ledger.list_available("A")] == ["LEFT"]
        history = ledger.list_by_product("A")
        assert [(b.batch_code, b.remaining_quantity, b.initial_quantity) for b in history] == [
            ("GONE", 0, 3),
            ("LEFT", 3, 3),
        ]

    def test_total_stock(self, ledger):
        assert ledger.total_stock("A") == 0
        _receive(ledger, "X1", 4, None)
        _receive(ledger, "X2", 6, None)
        assert ledger.total_stock("A") == 10

    def test_round_trips_price_and_dates(self, ledger):
        batch_id = _receive(ledger, "X1", 4, date(2025, 5, 5))
        batch = ledger.get_by_id(batch_id)
        assert str(batch.purchase_price) == "1.10"
        assert batch.arrival_date == ARRIVED
        assert batch.expiration_date == date(2025, 5, 5)
        assert ledger.get_by_id(999) is None

    def test_expiring(self, ledger):
        _receive(ledger, "SOON", 1, date(2025, 1, 10))
        _receive(ledger, "LATER", 1, date(2025, 3, 1))
        _receive(ledger, "NEVER", 1, None)
        assert [b.batch_code for b in ledger.list_expiring(date(2025, 1, 31))] == ["SOON"]


class TestReserveRelease:

    def test_reserve_decrements(self, ledger):
        batch_id = _receive(ledger, "X1", 10, None)
        ledger.reserve(batch_id, 4)
        assert ledger.get_by_id(batch_id).remaining_quantity == 6

    def test_reserve_more_than_remaining_fails_cleanly(self, ledger):
        batch_id = _receive(ledger, "X1", 3, None)
        with pytest.raises(InsufficientStockError) as excinfo:
            ledger.reserve(batch_id, 4)
        assert (excinfo.value.requested, excinfo.value.available) == (4, 3)
        assert ledger.get_by_id(batch_id).remaining_quantity == 3

    def test_reserve_unknown_batch(self, ledger):
        with pytest.raises(EntityNotFoundError):
            ledger.reserve(404, 1)

    def test_release_up_to_initial(self, ledger):
        batch_id = _receive(ledger, "X1", 5, None)
        ledger.reserve(batch_id, 5)
        ledger.release(batch_id, 5)
        assert ledger.get_by_id(batch_id).remaining_quantity == 5

    def test_release_past_initial_rejected(self, ledger):
        batch_id = _receive(ledger, "X1", 5, None)
        ledger.reserve(batch_id, 2)
        with pytest.raises(InvalidReleaseError):
            ledger.release(batch_id, 3)
        assert ledger.get_by_id(batch_id).remaining_quantity == 3

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, ledger, quantity):
        batch_id = _receive(ledger, "X1", 5, None)
        with pytest.raises(ValidationError):
            ledger.reserve(batch_id, quantity)
        with pytest.raises(ValidationError):
            ledger.release(batch_id, quantity)


class TestConcurrentReserve:

    def test_only_one_of_two_racing_reserves_wins(self, tmp_path):
        database = Database(f"sqlite:///{tmp_path / 'race.db'}")
        database.create_tables()
        SqlProductRepository(database.session_factory).save(Product("A", "Apple", Money.of("1.00")))
        ledger = SqlBatchLedger(database.session_factory)
        batch_id = _receive(ledger, "X1", 10, None)

        barrier = threading.Barrier(2)
        outcomes: list[str] = []
        lock = threading.Lock()

        def take_six():
            barrier.wait()
            try:
                ledger.reserve(batch_id, 6)
                result = "ok"
            except InsufficientStockError:
                result = "short"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=take_six) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        try:
            assert sorted(outcomes) == ["ok", "short"]
            assert ledger.get_by_id(batch_id).remaining_quantity == 4
        finally:
            database.dispose()
