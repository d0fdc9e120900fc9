"""Application service: Approve Order use case (pending -> approved).

Stock was already deducted when the order was created, so approval is a
pure status transition.
"""

from __future__ import annotations

from stockroom.application.dto import OrderDTO, order_to_dto
from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.model.identity import Identity
from stockroom.domain.repository.order_repository import OrderRepository


class ApproveOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, identity: Identity, order_id: int) -> OrderDTO:
        identity.require_admin("approve orders")
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.approve()
        self._order_repo.save(order)
        return order_to_dto(order)
