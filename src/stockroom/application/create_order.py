"""Application service: Create Order use case.

Orders deduct stock at creation, exactly like sales, and start out
``pending``.  Cancelling or deleting a pending order gives the stock back.
"""

from __future__ import annotations

import logging
from datetime import date

from stockroom.application.dto import LineSpec, OrderDTO, order_to_dto
from stockroom.application.lines import resolve_lines
from stockroom.domain.model.identity import Identity
from stockroom.domain.model.transaction import Order
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.domain.service.transaction_coordinator import TransactionCoordinator

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        ledger: BatchLedger,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._coordinator = TransactionCoordinator(ledger)

    def handle(
        self,
        identity: Identity,
        specs: list[LineSpec],
        order_date: date | None = None,
    ) -> OrderDTO:
        lines = resolve_lines(specs, self._product_repo)
        plan = self._coordinator.execute(lines)

        try:
            order = Order.create(
                user_id=identity.user_id,
                order_date=order_date or date.today(),
                details=self._coordinator.to_detail_rows(plan),
            )
            self._order_repo.save(order)
        except Exception:
            logger.warning("order could not be persisted; returning stock")
            self._coordinator.compensate(plan)
            raise

        logger.info("order created id=%s user=%s total=%s", order.id, identity.user_id, order.total)
        return order_to_dto(order)
