"""Application service: batch queries for one product.

``handle`` returns the batches a sale would draw from, in the exact order
the planner walks them.  ``history`` includes depleted batches too.
"""

from __future__ import annotations

from stockroom.application.dto import BatchDTO, batch_to_dto
from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.product_repository import ProductRepository


class GetAvailableBatchesHandler:

    def __init__(self, product_repo: ProductRepository, ledger: BatchLedger) -> None:
        self._product_repo = product_repo
        self._ledger = ledger

    def handle(self, product_code: str) -> list[BatchDTO]:
        self._require_product(product_code)
        return [batch_to_dto(b) for b in self._ledger.list_available(product_code)]

    def history(self, product_code: str) -> list[BatchDTO]:
        self._require_product(product_code)
        return [batch_to_dto(b) for b in self._ledger.list_by_product(product_code)]

    def total(self, product_code: str) -> int:
        self._require_product(product_code)
        return self._ledger.total_stock(product_code)

    def _require_product(self, product_code: str) -> None:
        if self._product_repo.get_by_code(product_code) is None:
            raise EntityNotFoundError(f"Product not found: '{product_code}'")
