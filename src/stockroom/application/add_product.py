"""Application service: Add Product use case.

Seeds the catalog so batches can be received against a product code.
"""

from __future__ import annotations

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import Money
from stockroom.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        code: str,
        name: str,
        sell_price: str,
        min_stock: int = 0,
        category_name: str | None = None,
    ) -> Product:
        product = Product.register(
            code=code,
            name=name,
            sell_price=Money.of(sell_price),
            min_stock=min_stock,
            category_name=category_name,
        )
        if self._product_repo.get_by_code(product.code) is not None:
            raise ValidationError(f"Product '{product.code}' already exists")
        self._product_repo.save(product)
        return product
