"""Application service: Create Sale use case.

Runs the sale lines through the Transaction Coordinator and persists the
header with one detail row per batch drawn.  A reserve-phase conflict is
retried by re-planning the whole sale; a failure while persisting gives
every deducted unit back before the error surfaces.
"""

from __future__ import annotations

import logging
from datetime import date

from stockroom.application.dto import LineSpec, SaleDTO, sale_to_dto
from stockroom.application.lines import resolve_lines
from stockroom.domain.exceptions import ConcurrentStockConflictError
from stockroom.domain.model.identity import Identity
from stockroom.domain.model.transaction import Sale
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.domain.repository.sale_repository import SaleRepository
from stockroom.domain.service.transaction_coordinator import TransactionCoordinator

logger = logging.getLogger(__name__)


class CreateSaleHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        product_repo: ProductRepository,
        ledger: BatchLedger,
        conflict_retries: int = 1,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._coordinator = TransactionCoordinator(ledger)
        self._conflict_retries = conflict_retries

    def handle(self, identity: Identity, specs: list[LineSpec], sale_date: date) -> SaleDTO:
        lines = resolve_lines(specs, self._product_repo)

        attempt = 0
        while True:
            try:
                plan = self._coordinator.execute(lines)
                break
            except ConcurrentStockConflictError:
                if attempt >= self._conflict_retries:
                    raise
                attempt += 1
                logger.info("retrying sale after stock conflict attempt=%d", attempt)

        try:
            sale = Sale.create(
                user_id=identity.user_id,
                sale_date=sale_date,
                details=self._coordinator.to_detail_rows(plan),
            )
            self._sale_repo.add(sale)
        except Exception:
            logger.warning("sale could not be persisted; returning stock")
            self._coordinator.compensate(plan)
            raise

        logger.info(
            "sale created id=%s user=%s total=%s", sale.id, identity.user_id, sale.total
        )
        return sale_to_dto(sale)
