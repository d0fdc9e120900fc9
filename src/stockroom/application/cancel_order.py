"""Application service: Cancel Order use case (pending -> cancelled).

Every detail row is released back to the batch it was drawn from before
the status changes.  Admins may cancel any pending order; staff only their
own.
"""

from __future__ import annotations

import logging

from stockroom.application.dto import OrderDTO, order_to_dto
from stockroom.domain.exceptions import EntityNotFoundError, PermissionDeniedError
from stockroom.domain.model.identity import Identity
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.domain.service.transaction_coordinator import TransactionCoordinator

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(self, order_repo: OrderRepository, ledger: BatchLedger) -> None:
        self._order_repo = order_repo
        self._coordinator = TransactionCoordinator(ledger)

    def handle(self, identity: Identity, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        if not identity.is_admin and order.user_id != identity.user_id:
            raise PermissionDeniedError(f"Order #{order_id} belongs to another user")

        # Reject before touching the ledger.
        order.ensure_editable("cancel")
        self._coordinator.release_all(order.details)
        try:
            order.cancel()
            self._order_repo.save(order)
        except Exception:
            logger.warning("order #%s could not be cancelled; taking stock back", order_id)
            self._coordinator.reclaim(order.details)
            raise
        return order_to_dto(order)
