"""Application service: Receive Batch use case.

Books a newly delivered lot into the ledger for an existing product.
"""

from __future__ import annotations

from datetime import date

from stockroom.application.dto import BatchDTO, batch_to_dto
from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.model.batch import Batch
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.product_repository import ProductRepository


class ReceiveBatchHandler:

    def __init__(self, product_repo: ProductRepository, ledger: BatchLedger) -> None:
        self._product_repo = product_repo
        self._ledger = ledger

    def handle(
        self,
        product_code: str,
        batch_code: str,
        quantity: int,
        purchase_price: str,
        expiration_date: date | None = None,
        arrival_date: date | None = None,
    ) -> BatchDTO:
        if self._product_repo.get_by_code(product_code) is None:
            raise EntityNotFoundError(f"Product not found: '{product_code}'")

        batch = Batch.receive(
            product_code=product_code,
            batch_code=batch_code,
            purchase_price=Money.of(purchase_price),
            quantity=quantity,
            arrival_date=arrival_date or date.today(),
            expiration_date=expiration_date,
        )
        return batch_to_dto(self._ledger.add(batch))
