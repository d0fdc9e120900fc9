"""Application service: Delete Order use case.

Only pending orders can be deleted; their stock goes back first.
"""

from __future__ import annotations

import logging

from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.model.identity import Identity
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.domain.service.transaction_coordinator import TransactionCoordinator

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository, ledger: BatchLedger) -> None:
        self._order_repo = order_repo
        self._coordinator = TransactionCoordinator(ledger)

    def handle(self, identity: Identity, order_id: int) -> None:
        identity.require_admin("delete orders")
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.ensure_editable("delete")
        self._coordinator.release_all(order.details)
        try:
            self._order_repo.delete(order_id)
        except Exception:
            logger.warning("order #%s could not be deleted; taking stock back", order_id)
            self._coordinator.reclaim(order.details)
            raise
