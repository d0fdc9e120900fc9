"""Product — the catalog entry stock is tracked against.

Products are owned by the external catalog; the stock engine only reads
them (name and category for display, sell price as the default unit price,
minimum-stock threshold for alerts).
"""

from __future__ import annotations

from dataclasses import dataclass

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.value_objects import Money


@dataclass
class Product:

    code: str
    name: str
    sell_price: Money
    min_stock: int = 0
    category_name: str | None = None

    @staticmethod
    def register(
        code: str,
        name: str,
        sell_price: Money,
        min_stock: int = 0,
        category_name: str | None = None,
    ) -> Product:
        """Validate a product handed over by the catalog."""
        if not code or not code.strip():
            raise ValidationError("Product code is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if min_stock < 0:
            raise ValidationError("Minimum stock cannot be negative")
        return Product(
            code=code.strip(),
            name=name.strip(),
            sell_price=sell_price,
            min_stock=min_stock,
            category_name=category_name.strip() if category_name else None,
        )
