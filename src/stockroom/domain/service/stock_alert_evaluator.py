"""Domain service: Stock Alert Evaluator.

Read-only derivation over catalog and ledger state.  Safe to run next to
live transactions; a reading may be a few milliseconds stale.
"""

from __future__ import annotations

from datetime import date, timedelta

from stockroom.domain.model.alert import ExpiryAlert, LowStockAlert
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.product_repository import ProductRepository


class StockAlertEvaluator:

    def __init__(self, product_repo: ProductRepository, ledger: BatchLedger) -> None:
        self._product_repo = product_repo
        self._ledger = ledger

    def evaluate(self) -> list[LowStockAlert]:
        """Products strictly below their minimum stock, by name."""
        alerts: list[LowStockAlert] = []
        for product in self._product_repo.list_all():
            current = self._ledger.total_stock(product.code)
            if current < product.min_stock:
                alerts.append(
                    LowStockAlert(
                        product_code=product.code,
                        product_name=product.name,
                        current_stock=current,
                        min_stock=product.min_stock,
                        category_name=product.category_name,
                    )
                )
        alerts.sort(key=lambda a: (a.product_name, a.product_code))
        return alerts

    def expiring(self, today: date, within_days: int) -> list[ExpiryAlert]:
        """Batches with stock expiring within *within_days* (expired ones included)."""
        cutoff = today + timedelta(days=within_days)
        names = {p.code: p.name for p in self._product_repo.list_all()}
        return [
            ExpiryAlert(
                batch_id=batch.id,
                batch_code=batch.batch_code,
                product_code=batch.product_code,
                product_name=names.get(batch.product_code, batch.product_code),
                remaining_quantity=batch.remaining_quantity,
                expiration_date=batch.expiration_date,
                days_until_expiry=batch.days_until_expiry(today),
            )
            for batch in self._ledger.list_expiring(cutoff)
        ]
