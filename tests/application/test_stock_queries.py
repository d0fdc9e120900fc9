"""Integration tests for the catalog, batch, alert and stock count use cases."""

from datetime import date

import pytest

from stockroom.application.add_product import AddProductHandler
from stockroom.application.available_batches import GetAvailableBatchesHandler
from stockroom.application.receive_batch import ReceiveBatchHandler
from stockroom.application.record_stock_count import RecordStockCountHandler
from stockroom.application.stock_alerts import ExpiringBatchesHandler, LowStockAlertsHandler
from stockroom.domain.exceptions import EntityNotFoundError, ValidationError
from stockroom.domain.model.identity import Identity
from tests.fakes import FakeProductRepository, FakeStockCountRepository, InMemoryBatchLedger

CLERK = Identity(user_id=4)


def _setup():
    products = FakeProductRepository()
    ledger = InMemoryBatchLedger()
    AddProductHandler(products).handle("A", "Apple", "1.25", min_stock=10, category_name="Fruit")
    receive = ReceiveBatchHandler(products, ledger)
    receive.handle("A", "LATE", 6, "0.80", date(2025, 3, 1), arrival_date=date(2025, 1, 1))
    receive.handle("A", "EARLY", 2, "0.80", date(2025, 1, 20), arrival_date=date(2025, 1, 1))
    receive.handle("A", "KEEPS", 1, "0.80", arrival_date=date(2025, 1, 1))
    return products, ledger


class TestAddProduct:

    def test_duplicate_code_rejected(self):
        products, _ = _setup()
        with pytest.raises(ValidationError, match="already exists"):
            AddProductHandler(products).handle("A", "Another apple", "1.00")

    def test_negative_minimum_rejected(self):
        with pytest.raises(ValidationError):
            AddProductHandler(FakeProductRepository()).handle("X", "X", "1.00", min_stock=-1)


class TestReceiveAndListBatches:

    def test_available_in_allocation_order(self):
        products, ledger = _setup()
        batches = GetAvailableBatchesHandler(products, ledger).handle("A")
        assert [b.batch_code for b in batches] == ["EARLY", "LATE", "KEEPS"]
        assert batches[2].expiration_date is None
        assert batches[0].purchase_price == "0.80"

    def test_history_includes_depleted(self):
        products, ledger = _setup()
        early = GetAvailableBatchesHandler(products, ledger).handle("A")[0]
        ledger.reserve(early.id, 2)
        query = GetAvailableBatchesHandler(products, ledger)
        assert len(query.handle("A")) == 2
        assert len(query.history("A")) == 3
        assert query.total("A") == 7

    def test_receive_for_unknown_product(self):
        products, ledger = _setup()
        with pytest.raises(EntityNotFoundError):
            ReceiveBatchHandler(products, ledger).handle("Z", "L1", 1, "1.00")

    def test_query_unknown_product(self):
        products, ledger = _setup()
        with pytest.raises(EntityNotFoundError, match="'Z'"):
            GetAvailableBatchesHandler(products, ledger).handle("Z")


class TestAlerts:

    def test_low_stock(self):
        products, ledger = _setup()
        alerts = LowStockAlertsHandler(products, ledger).handle()
        assert [(a.product_code, a.current_stock, a.min_stock) for a in alerts] == [("A", 9, 10)]

    def test_expiring_window(self):
        products, ledger = _setup()
        alerts = ExpiringBatchesHandler(products, ledger).handle(30, today=date(2025, 1, 1))
        assert [a.batch_code for a in alerts] == ["EARLY"]

    def test_negative_window_rejected(self):
        products, ledger = _setup()
        with pytest.raises(ValidationError):
            ExpiringBatchesHandler(products, ledger).handle(-1)


class TestStockCount:

    def test_records_difference_without_touching_ledger(self):
        products, ledger = _setup()
        counts = FakeStockCountRepository()

        count = RecordStockCountHandler(counts, products, ledger).handle(CLERK, "A", 7, note="shelf 3")

        assert (count.system_quantity, count.physical_quantity, count.difference) == (9, 7, -2)
        assert count.user_id == 4
        assert counts.list_by_product("A") == [count]
        assert ledger.total_stock("A") == 9

    def test_negative_count_rejected(self):
        products, ledger = _setup()
        with pytest.raises(ValidationError):
            RecordStockCountHandler(FakeStockCountRepository(), products, ledger).handle(CLERK, "A", -1)
