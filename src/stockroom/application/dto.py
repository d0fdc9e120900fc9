"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other edge) and the application
layer without exposing domain internals.  Money is rendered as text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from stockroom.domain.exceptions import Shortfall
from stockroom.domain.model.batch import Batch
from stockroom.domain.model.transaction import DetailRow, Order, Sale


@dataclass(frozen=True)
class LineSpec:
    """Input: what the caller asked for (product code + quantity [+ price])."""

    product_code: str
    quantity: int
    unit_price: str | None = None


@dataclass(frozen=True)
class ImportRow:
    """Input: one normalized row of a bulk sales import."""

    product_code: str
    quantity: int
    unit_price: str | None
    sale_date: date


@dataclass(frozen=True)
class DetailDTO:
    id: int | None
    product_code: str
    batch_id: int
    batch_code: str
    quantity: int
    unit_price: str
    subtotal: str


@dataclass(frozen=True)
class SaleDTO:
    id: int
    user_id: int
    sale_date: str
    details: list[DetailDTO]
    total: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: int
    order_date: str
    status: str
    details: list[DetailDTO]
    total: str


@dataclass(frozen=True)
class BatchDTO:
    id: int
    product_code: str
    batch_code: str
    purchase_price: str
    initial_quantity: int
    remaining_quantity: int
    arrival_date: str
    expiration_date: str | None


@dataclass(frozen=True)
class ImportGroupResult:
    """Outcome of one date-group of a bulk import."""

    sale_date: date
    ok: bool
    sale_id: int | None = None
    error: str | None = None
    shortfalls: list[Shortfall] = field(default_factory=list)


# --- Mapping ------------------------------------------------------------------


def detail_to_dto(row: DetailRow) -> DetailDTO:
    return DetailDTO(
        id=row.id,
        product_code=row.product_code,
        batch_id=row.batch_id,
        batch_code=row.batch_code,
        quantity=row.quantity,
        unit_price=str(row.unit_price),
        subtotal=str(row.subtotal),
    )


def sale_to_dto(sale: Sale) -> SaleDTO:
    return SaleDTO(
        id=sale.id,  # type: ignore[arg-type]
        user_id=sale.user_id,
        sale_date=sale.sale_date.isoformat(),
        details=[detail_to_dto(row) for row in sale.details],
        total=str(sale.total),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        order_date=order.order_date.isoformat(),
        status=order.status.value,
        details=[detail_to_dto(row) for row in order.details],
        total=str(order.total),
    )


def batch_to_dto(batch: Batch) -> BatchDTO:
    return BatchDTO(
        id=batch.id,  # type: ignore[arg-type]
        product_code=batch.product_code,
        batch_code=batch.batch_code,
        purchase_price=str(batch.purchase_price),
        initial_quantity=batch.initial_quantity,
        remaining_quantity=batch.remaining_quantity,
        arrival_date=batch.arrival_date.isoformat(),
        expiration_date=batch.expiration_date.isoformat() if batch.expiration_date else None,
    )
