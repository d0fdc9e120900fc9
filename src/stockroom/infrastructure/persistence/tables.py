"""SQLAlchemy declarative tables.

The check constraints on ``batch_stock`` back the ledger invariant
``0 <= remaining_quantity <= initial_quantity`` at the storage layer.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

PRICE = Numeric(12, 2)


class Base(DeclarativeBase):
    pass


class ProductRow(Base):
    __tablename__ = "products"

    code: Mapped[str] = mapped_column(String(13), primary_key=True)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    category_name: Mapped[str | None] = mapped_column(String(60), nullable=True)
    sell_price: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class BatchRow(Base):
    __tablename__ = "batch_stock"
    __table_args__ = (
        CheckConstraint("remaining_quantity >= 0", name="ck_batch_remaining_non_negative"),
        CheckConstraint(
            "remaining_quantity <= initial_quantity", name="ck_batch_remaining_within_initial"
        ),
        # allocation order lookup
        Index("idx_batch_product_expiry", "product_code", "expiration_date", "arrival_date"),
        Index("idx_batch_expiry", "expiration_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_code: Mapped[str] = mapped_column(ForeignKey("products.code"), nullable=False)
    batch_code: Mapped[str] = mapped_column(String(40), nullable=False)
    purchase_price: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    initial_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    remaining_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    arrival_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SaleRow(Base):
    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    sale_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    details: Mapped[list[SaleDetailRow]] = relationship(
        back_populates="sale", cascade="all, delete-orphan", order_by="SaleDetailRow.id"
    )


class SaleDetailRow(Base):
    __tablename__ = "sales_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id"), nullable=False)
    product_code: Mapped[str] = mapped_column(ForeignKey("products.code"), nullable=False)
    batch_id: Mapped[int] = mapped_column(ForeignKey("batch_stock.id"), nullable=False)
    batch_code: Mapped[str] = mapped_column(String(40), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    sale: Mapped[SaleRow] = relationship(back_populates="details")


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(12), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    details: Mapped[list[OrderDetailRow]] = relationship(
        back_populates="order", cascade="all, delete-orphan", order_by="OrderDetailRow.id"
    )


class OrderDetailRow(Base):
    __tablename__ = "order_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False)
    product_code: Mapped[str] = mapped_column(ForeignKey("products.code"), nullable=False)
    batch_id: Mapped[int] = mapped_column(ForeignKey("batch_stock.id"), nullable=False)
    batch_code: Mapped[str] = mapped_column(String(40), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    order: Mapped[OrderRow] = relationship(back_populates="details")


class StockCountRow(Base):
    __tablename__ = "stock_counts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_code: Mapped[str] = mapped_column(ForeignKey("products.code"), nullable=False)
    system_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    physical_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    difference: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(200), nullable=True)
    counted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
