"""Application service: low-stock and expiry alert queries."""

from __future__ import annotations

from datetime import date

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.alert import ExpiryAlert, LowStockAlert
from stockroom.domain.repository.batch_ledger import BatchLedger
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.domain.service.stock_alert_evaluator import StockAlertEvaluator


class LowStockAlertsHandler:

    def __init__(self, product_repo: ProductRepository, ledger: BatchLedger) -> None:
        self._evaluator = StockAlertEvaluator(product_repo, ledger)

    def handle(self) -> list[LowStockAlert]:
        return self._evaluator.evaluate()


class ExpiringBatchesHandler:

    def __init__(self, product_repo: ProductRepository, ledger: BatchLedger) -> None:
        self._evaluator = StockAlertEvaluator(product_repo, ledger)

    def handle(self, within_days: int, today: date | None = None) -> list[ExpiryAlert]:
        if within_days < 0:
            raise ValidationError("The expiry window cannot be negative")
        return self._evaluator.expiring(today or date.today(), within_days)
