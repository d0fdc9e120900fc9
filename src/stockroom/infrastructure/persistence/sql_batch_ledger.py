"""SQL implementation of the Batch Ledger.

``reserve`` and ``release`` are single conditional UPDATE statements whose
affected-row count decides success:

    UPDATE batch_stock SET remaining_quantity = remaining_quantity - :q
     WHERE id = :id AND remaining_quantity >= :q

Two transactions racing on one batch cannot both pass the WHERE clause
into negative stock, and no value is ever read into Python, changed and
written back.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, sessionmaker

from stockroom.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidReleaseError,
    ValidationError,
)
from stockroom.domain.model.batch import Batch
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.infrastructure.persistence.tables import BatchRow

logger = logging.getLogger(__name__)

_ALLOCATION_ORDER = (
    BatchRow.expiration_date.is_(None),
    BatchRow.expiration_date,
    BatchRow.arrival_date,
    BatchRow.id,
)


class SqlBatchLedger(BatchLedger):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # --- Queries --------------------------------------------------------------

    def list_available(self, product_code: str) -> list[Batch]:
        stmt = (
            select(BatchRow)
            .where(BatchRow.product_code == product_code, BatchRow.remaining_quantity > 0)
            .order_by(*_ALLOCATION_ORDER)
        )
        return self._fetch(stmt)

    def list_by_product(self, product_code: str) -> list[Batch]:
        stmt = (
            select(BatchRow)
            .where(BatchRow.product_code == product_code)
            .order_by(*_ALLOCATION_ORDER)
        )
        return self._fetch(stmt)

    def list_expiring(self, cutoff: date) -> list[Batch]:
        stmt = (
            select(BatchRow)
            .where(
                BatchRow.remaining_quantity > 0,
                BatchRow.expiration_date.is_not(None),
                BatchRow.expiration_date <= cutoff,
            )
            .order_by(BatchRow.expiration_date, BatchRow.arrival_date, BatchRow.id)
        )
        return self._fetch(stmt)

    def total_stock(self, product_code: str) -> int:
        stmt = select(func.coalesce(func.sum(BatchRow.remaining_quantity), 0)).where(
            BatchRow.product_code == product_code
        )
        with self._session_factory() as session:
            return int(session.scalar(stmt))

    def get_by_id(self, batch_id: int) -> Batch | None:
        with self._session_factory() as session:
            row = session.get(BatchRow, batch_id)
            return self._to_domain(row) if row is not None else None

    # --- Mutations ------------------------------------------------------------

    def reserve(self, batch_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Reserve quantity must be positive")
        stmt = (
            update(BatchRow)
            .where(BatchRow.id == batch_id, BatchRow.remaining_quantity >= quantity)
            .values(
                remaining_quantity=BatchRow.remaining_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        with self._session_factory.begin() as session:
            if session.execute(stmt).rowcount == 1:
                return
            current = self._current(session, batch_id)

        if current is None:
            raise EntityNotFoundError(f"Batch #{batch_id} not found")
        product_code, remaining, _ = current
        raise InsufficientStockError.single(product_code, quantity, remaining)

    def release(self, batch_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        stmt = (
            update(BatchRow)
            .where(
                BatchRow.id == batch_id,
                BatchRow.remaining_quantity + quantity <= BatchRow.initial_quantity,
            )
            .values(
                remaining_quantity=BatchRow.remaining_quantity + quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        with self._session_factory.begin() as session:
            if session.execute(stmt).rowcount == 1:
                return
            current = self._current(session, batch_id)

        if current is None:
            raise EntityNotFoundError(f"Batch #{batch_id} not found")
        _, remaining, initial = current
        logger.error(
            "release rejected batch=%s quantity=%d remaining=%d initial=%d",
            batch_id, quantity, remaining, initial,
        )
        raise InvalidReleaseError(
            f"Releasing {quantity} into batch #{batch_id} would exceed its initial "
            f"quantity ({remaining} + {quantity} > {initial})"
        )

    def add(self, batch: Batch) -> Batch:
        row = BatchRow(
            product_code=batch.product_code,
            batch_code=batch.batch_code,
            purchase_price=batch.purchase_price.amount,
            initial_quantity=batch.initial_quantity,
            remaining_quantity=batch.remaining_quantity,
            arrival_date=batch.arrival_date,
            expiration_date=batch.expiration_date,
        )
        with self._session_factory.begin() as session:
            session.add(row)
            session.flush()
            batch.id = row.id
        logger.info(
            "batch received id=%s product=%s quantity=%d expires=%s",
            batch.id, batch.product_code, batch.initial_quantity, batch.expiration_date,
        )
        return batch

    # --- Helpers --------------------------------------------------------------

    def _fetch(self, stmt) -> list[Batch]:
        with self._session_factory() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    @staticmethod
    def _current(session: Session, batch_id: int) -> tuple[str, int, int] | None:
        row = session.execute(
            select(
                BatchRow.product_code, BatchRow.remaining_quantity, BatchRow.initial_quantity
            ).where(BatchRow.id == batch_id)
        ).first()
        return tuple(row) if row is not None else None

    @staticmethod
    def _to_domain(row: BatchRow) -> Batch:
        return Batch(
            id=row.id,
            product_code=row.product_code,
            batch_code=row.batch_code,
            purchase_price=Money(row.purchase_price),
            initial_quantity=row.initial_quantity,
            remaining_quantity=row.remaining_quantity,
            arrival_date=row.arrival_date,
            expiration_date=row.expiration_date,
        )
