"""SQL implementation of OrderRepository.

``save`` reconciles detail rows by id: rows still present are updated,
new rows inserted, and rows dropped from the aggregate deleted.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.model.transaction import DetailRow, Order, OrderStatus
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.infrastructure.persistence.tables import OrderDetailRow, OrderRow


class SqlOrderRepository(OrderRepository):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_by_id(self, order_id: int) -> Order | None:
        with self._session_factory() as session:
            row = session.get(OrderRow, order_id)
            return self._to_domain(row) if row is not None else None

    def save(self, order: Order) -> None:
        with self._session_factory.begin() as session:
            row = session.get(OrderRow, order.id) if order.id is not None else None
            if row is None:
                row = OrderRow(created_at=order.created_at)
                session.add(row)

            row.user_id = order.user_id
            row.order_date = order.order_date
            row.status = order.status.value
            row.total_amount = order.total.amount
            row.updated_at = order.updated_at

            existing = {d.id: d for d in row.details}
            pairs: list[tuple[DetailRow, OrderDetailRow]] = []
            for detail in order.details:
                detail_row = existing.get(detail.id) or OrderDetailRow(created_at=detail.created_at)
                detail_row.product_code = detail.product_code
                detail_row.batch_id = detail.batch_id
                detail_row.batch_code = detail.batch_code
                detail_row.quantity = detail.quantity
                detail_row.unit_price = detail.unit_price.amount
                detail_row.subtotal = detail.subtotal.amount
                pairs.append((detail, detail_row))
            row.details = [detail_row for _, detail_row in pairs]

            session.flush()
            order.id = row.id
            for detail, detail_row in pairs:
                detail.id = detail_row.id

    def delete(self, order_id: int) -> None:
        with self._session_factory.begin() as session:
            row = session.get(OrderRow, order_id)
            if row is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            session.delete(row)

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            user_id=row.user_id,
            order_date=row.order_date,
            status=OrderStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
            details=[
                DetailRow(
                    id=d.id,
                    product_code=d.product_code,
                    batch_id=d.batch_id,
                    batch_code=d.batch_code,
                    quantity=d.quantity,
                    unit_price=Money(d.unit_price),
                    created_at=d.created_at,
                )
                for d in row.details
            ],
        )
