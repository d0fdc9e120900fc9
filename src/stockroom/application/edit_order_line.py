"""Application service: Edit Order Line use case.

Changing a pending order line never overwrites the batch or quantity of a
detail row in place.  The old quantity goes back to its batch first; the
new quantity is then reserved either on the batch the caller named or by
re-planning FIFO (which may split the line across several batches).

If the new reservation fails, the old quantity is taken from its original
batch again so the order and the ledger stay consistent, and the error is
raised.
"""

from __future__ import annotations

import logging

from stockroom.application.dto import OrderDTO, order_to_dto
from stockroom.domain.exceptions import ConcurrentStockConflictError, EntityNotFoundError
from stockroom.domain.model.identity import Identity
from stockroom.domain.model.transaction import DetailRow, TransactionLine
from stockroom.domain.model.value_objects import Money, Quantity
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.domain.service.transaction_coordinator import TransactionCoordinator

logger = logging.getLogger(__name__)


class EditOrderLineHandler:

    def __init__(self, order_repo: OrderRepository, ledger: BatchLedger) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._coordinator = TransactionCoordinator(ledger)

    def handle(
        self,
        identity: Identity,
        order_id: int,
        detail_id: int,
        quantity: int,
        unit_price: str | None = None,
        batch_id: int | None = None,
    ) -> OrderDTO:
        identity.require_admin("edit orders")
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        order.ensure_editable()

        old = order.find_detail(detail_id)
        new_quantity = Quantity(quantity)
        price = Money.of(unit_price) if unit_price is not None else old.unit_price

        self._ledger.release(old.batch_id, old.quantity)
        try:
            if batch_id is not None:
                plan = [
                    self._coordinator.reserve_on_batch(
                        batch_id, old.product_code, new_quantity.value, price
                    )
                ]
            else:
                plan = self._coordinator.execute(
                    [TransactionLine(old.product_code, new_quantity, price)]
                )
        except Exception as exc:
            logger.warning(
                "order line edit failed order=%s detail=%s; restoring batch %s",
                order_id, detail_id, old.batch_id,
            )
            self._restore(order_id, old, exc)
            raise

        try:
            order.replace_detail(detail_id, self._coordinator.to_detail_rows(plan))
            self._order_repo.save(order)
        except Exception as exc:
            self._coordinator.compensate(plan)
            self._restore(order_id, old, exc)
            raise
        return order_to_dto(order)

    def _restore(self, order_id: int, old: DetailRow, cause: Exception) -> None:
        """Take the old quantity back from its batch after a failed edit."""
        try:
            self._ledger.reserve(old.batch_id, old.quantity)
        except Exception as exc:
            logger.error(
                "could not restore order=%s detail=%s batch=%s quantity=%d: %s",
                order_id, old.id, old.batch_id, old.quantity, exc,
            )
            raise ConcurrentStockConflictError(
                f"Order #{order_id} line {old.id} could not be restored on batch "
                f"{old.batch_code}; its stock was taken by another transaction"
            ) from cause
