"""Shared resolution of caller line specs into priced transaction lines."""

from __future__ import annotations

from stockroom.application.dto import LineSpec
from stockroom.domain.exceptions import EntityNotFoundError
from stockroom.domain.model.transaction import TransactionLine
from stockroom.domain.model.value_objects import Money, Quantity
from stockroom.domain.repository.product_repository import ProductRepository


def resolve_lines(
    specs: list[LineSpec], product_repo: ProductRepository
) -> list[TransactionLine]:
    """Validate quantities and fill missing prices from the catalog."""
    lines: list[TransactionLine] = []
    for spec in specs:
        quantity = Quantity(spec.quantity)
        if spec.unit_price is not None:
            price = Money.of(spec.unit_price)
        else:
            product = product_repo.get_by_code(spec.product_code)
            if product is None:
                raise EntityNotFoundError(f"Product not found: '{spec.product_code}'")
            price = product.sell_price
        lines.append(TransactionLine(spec.product_code, quantity, price))
    return lines
