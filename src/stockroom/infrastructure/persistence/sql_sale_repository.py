"""SQL implementation of SaleRepository."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from stockroom.domain.model.transaction import DetailRow, Sale
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.sale_repository import SaleRepository
from stockroom.infrastructure.persistence.tables import SaleDetailRow, SaleRow


class SqlSaleRepository(SaleRepository):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_by_id(self, sale_id: int) -> Sale | None:
        with self._session_factory() as session:
            row = session.get(SaleRow, sale_id)
            return self._to_domain(row) if row is not None else None

    def add(self, sale: Sale) -> None:
        detail_rows = [
            SaleDetailRow(
                product_code=d.product_code,
                batch_id=d.batch_id,
                batch_code=d.batch_code,
                quantity=d.quantity,
                unit_price=d.unit_price.amount,
                subtotal=d.subtotal.amount,
                created_at=d.created_at,
            )
            for d in sale.details
        ]
        row = SaleRow(
            user_id=sale.user_id,
            sale_date=sale.sale_date,
            total_amount=sale.total.amount,
            created_at=sale.created_at,
            details=detail_rows,
        )
        with self._session_factory.begin() as session:
            session.add(row)
            session.flush()
            sale.id = row.id
            for detail, detail_row in zip(sale.details, detail_rows):
                detail.id = detail_row.id

    @staticmethod
    def _to_domain(row: SaleRow) -> Sale:
        return Sale(
            id=row.id,
            user_id=row.user_id,
            sale_date=row.sale_date,
            created_at=row.created_at,
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
