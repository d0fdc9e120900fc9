"""SQL implementation of StockCountRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from stockroom.domain.model.stock_count import StockCount
from stockroom.domain.repository.stock_count_repository import StockCountRepository
from stockroom.infrastructure.persistence.tables import StockCountRow


class SqlStockCountRepository(StockCountRepository):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def add(self, count: StockCount) -> None:
        row = StockCountRow(
            product_code=count.product_code,
            system_quantity=count.system_quantity,
            physical_quantity=count.physical_quantity,
            difference=count.difference,
            user_id=count.user_id,
            note=count.note,
            counted_at=count.counted_at,
        )
        with self._session_factory.begin() as session:
            session.add(row)
            session.flush()
            count.id = row.id

    def list_by_product(self, product_code: str) -> list[StockCount]:
        stmt = (
            select(StockCountRow)
            .where(StockCountRow.product_code == product_code)
            .order_by(StockCountRow.counted_at.desc(), StockCountRow.id.desc())
        )
        with self._session_factory() as session:
            return [
                StockCount(
                    id=row.id,
                    product_code=row.product_code,
                    system_quantity=row.system_quantity,
                    physical_quantity=row.physical_quantity,
                    user_id=row.user_id,
                    note=row.note,
                    counted_at=row.counted_at,
                )
                for row in session.scalars(stmt)
            ]
