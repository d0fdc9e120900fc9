"""Read-only alert records derived from ledger and catalog state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LowStockAlert:

    product_code: str
    product_name: str
    current_stock: int
    min_stock: int
    category_name: str | None = None

    @property
    def shortage(self) -> int:
        return self.min_stock - self.current_stock


@dataclass(frozen=True)
class ExpiryAlert:

    batch_id: int
    batch_code: str
    product_code: str
    product_name: str
    remaining_quantity: int
    expiration_date: date
    days_until_expiry: int

    @property
    def expired(self) -> bool:
        return self.days_until_expiry < 0
