"""SQL implementation of ProductRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.infrastructure.persistence.tables import ProductRow


class SqlProductRepository(ProductRepository):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_by_code(self, code: str) -> Product | None:
        with self._session_factory() as session:
            row = session.get(ProductRow, code)
            return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Product]:
        stmt = select(ProductRow).order_by(ProductRow.name, ProductRow.code)
        with self._session_factory() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def save(self, product: Product) -> None:
        with self._session_factory.begin() as session:
            session.merge(
                ProductRow(
                    code=product.code,
                    name=product.name,
                    category_name=product.category_name,
                    sell_price=product.sell_price.amount,
                    min_stock=product.min_stock,
                )
            )

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            code=row.code,
            name=row.name,
            sell_price=Money(row.sell_price),
            min_stock=row.min_stock,
            category_name=row.category_name,
        )
