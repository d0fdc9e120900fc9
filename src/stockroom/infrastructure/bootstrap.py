"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  One Database (engine +
session factory) is kept per URL for the life of the process.
"""

from __future__ import annotations

from stockroom.infrastructure.config import Settings, load_settings
from stockroom.infrastructure.persistence.database import Database
from stockroom.infrastructure.persistence.sql_batch_ledger import SqlBatchLedger
from stockroom.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from stockroom.infrastructure.persistence.sql_product_repository import SqlProductRepository
from stockroom.infrastructure.persistence.sql_sale_repository import SqlSaleRepository
from stockroom.infrastructure.persistence.sql_stock_count_repository import (
    SqlStockCountRepository,
)


def settings() -> Settings:
    return load_settings()


_databases: dict[tuple[str, bool], Database] = {}


def database() -> Database:
    current = settings()
    key = (current.database_url, current.sql_echo)
    if key not in _databases:
        db = Database(current.database_url, echo=current.sql_echo)
        db.create_tables()
        _databases[key] = db
    return _databases[key]


def batch_ledger() -> SqlBatchLedger:
    return SqlBatchLedger(database().session_factory)


def product_repository() -> SqlProductRepository:
    return SqlProductRepository(database().session_factory)


def sale_repository() -> SqlSaleRepository:
    return SqlSaleRepository(database().session_factory)


def order_repository() -> SqlOrderRepository:
    return SqlOrderRepository(database().session_factory)


def stock_count_repository() -> SqlStockCountRepository:
    return SqlStockCountRepository(database().session_factory)


def reset() -> None:
    """Dispose every cached engine (tests, configuration changes)."""
    for db in _databases.values():
        db.dispose()
    _databases.clear()
