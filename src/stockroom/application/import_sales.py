"""Application service: Import Sales use case.

Bulk import goes through the very same path as a manual sale.  Rows are
grouped by sale date (in order of first appearance) and every group is one
CreateSaleHandler call.  Groups commit independently: a failing group is
reported and the import moves on, leaving earlier groups in place.
"""

from __future__ import annotations

import logging
from datetime import date

from stockroom.application.create_sale import CreateSaleHandler
from stockroom.application.dto import ImportGroupResult, ImportRow, LineSpec
from stockroom.domain.exceptions import DomainException, InsufficientStockError
from stockroom.domain.model.identity import Identity

logger = logging.getLogger(__name__)


class ImportSalesHandler:

    def __init__(self, create_sale: CreateSaleHandler) -> None:
        self._create_sale = create_sale

    def handle(self, identity: Identity, rows: list[ImportRow]) -> list[ImportGroupResult]:
        results: list[ImportGroupResult] = []
        for sale_date, specs in self._group_by_date(rows).items():
            try:
                dto = self._create_sale.handle(identity, specs, sale_date)
            except InsufficientStockError as exc:
                results.append(
                    ImportGroupResult(sale_date, ok=False, error=str(exc), shortfalls=exc.shortfalls)
                )
            except DomainException as exc:
                results.append(ImportGroupResult(sale_date, ok=False, error=str(exc)))
            else:
                results.append(ImportGroupResult(sale_date, ok=True, sale_id=dto.id))

        failed = sum(1 for r in results if not r.ok)
        logger.info("sales import finished groups=%d failed=%d", len(results), failed)
        return results

    @staticmethod
    def _group_by_date(rows: list[ImportRow]) -> dict[date, list[LineSpec]]:
        groups: dict[date, list[LineSpec]] = {}
        for row in rows:
            groups.setdefault(row.sale_date, []).append(
                LineSpec(row.product_code, row.quantity, row.unit_price)
            )
        return groups
