"""Application service: Record Stock Count use case.

Compares a physical count with the ledger total and keeps the difference
on record.  The ledger is not adjusted.
"""

from __future__ import annotations

from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.model.identity import Identity
from stockroom.domain.model.stock_count import StockCount
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.domain.repository.stock_count_repository import StockCountRepository


class RecordStockCountHandler:

    def __init__(
        self,
        count_repo: StockCountRepository,
        product_repo: ProductRepository,
        ledger: BatchLedger,
    ) -> None:
        self._count_repo = count_repo
        self._product_repo = product_repo
        self._ledger = ledger

    def handle(
        self,
        identity: Identity,
        product_code: str,
        physical_quantity: int,
        note: str | None = None,
    ) -> StockCount:
        if self._product_repo.get_by_code(product_code) is None:
            raise EntityNotFoundError(f"Product not found: '{product_code}'")

        count = StockCount.record(
            product_code=product_code,
            system_quantity=self._ledger.total_stock(product_code),
            physical_quantity=physical_quantity,
            user_id=identity.user_id,
            note=note,
        )
        self._count_repo.add(count)
        return count
