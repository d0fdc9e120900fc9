"""CLI commands for seeding and listing catalog products."""

from __future__ import annotations

import click

from stockroom.application.add_product import AddProductHandler
from stockroom.domain.exceptions import DomainException
from stockroom.infrastructure.bootstrap import batch_ledger, product_repository


@click.command("add")
@click.option("--code", required=True, help="Product code.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Sell price (e.g. 15.00).")
@click.option("--min-stock", default=0, show_default=True, type=int, help="Low-stock threshold.")
@click.option("--category", default=None, help="Category name.")
def product_add(code: str, name: str, price: str, min_stock: int, category: str | None) -> None:
    """Register a product so batches can be received for it."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            code=code, name=name, sell_price=price, min_stock=min_stock, category_name=category
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.code} '{product.name}' added at {product.sell_price}")


@click.command("list")
def product_list() -> None:
    """List products with their current stock."""
    products = product_repository().list_all()
    ledger = batch_ledger()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'Code':<13} {'Name':<24} {'Price':>10} {'Stock':>7} {'Min':>5}")
    click.echo("-" * 63)
    for p in products:
        click.echo(
            f"{p.code:<13} {p.name:<24} {str(p.sell_price):>10} "
            f"{ledger.total_stock(p.code):>7} {p.min_stock:>5}"
        )
