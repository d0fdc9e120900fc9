"""CLI commands for stock totals and physical stock counts."""

from __future__ import annotations

import click

from stockroom.application.available_batches import GetAvailableBatchesHandler
from stockroom.application.record_stock_count import RecordStockCountHandler
from stockroom.domain.exceptions import DomainException
from stockroom.domain.model.identity import Identity
from stockroom.infrastructure.bootstrap import (
    batch_ledger,
    product_repository,
    stock_count_repository,
)


@click.command("total")
@click.option("--product", required=True, help="Product code.")
def stock_total(product: str) -> None:
    """Show the ledger total for a product."""
    handler = GetAvailableBatchesHandler(product_repo=product_repository(), ledger=batch_ledger())
    try:
        total = handler.total(product)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"{product}: {total}")


@click.command("count")
@click.option("--product", required=True, help="Product code.")
@click.option("--physical", required=True, type=int, help="Units physically counted.")
@click.option("--note", default=None, help="Free-text remark.")
@click.pass_obj
def stock_count(identity: Identity, product: str, physical: int, note: str | None) -> None:
    """Record a physical count against the ledger total."""
    handler = RecordStockCountHandler(
        count_repo=stock_count_repository(),
        product_repo=product_repository(),
        ledger=batch_ledger(),
    )
    try:
        count = handler.handle(identity, product, physical, note)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(
        f"Count #{count.id} for {product}: system={count.system_quantity} "
        f"physical={count.physical_quantity} difference={count.difference:+d}"
    )
