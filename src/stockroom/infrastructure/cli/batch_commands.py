"""CLI commands for batches: receiving and inspecting stock lots."""

from __future__ import annotations

import click

from stockroom.application.available_batches import GetAvailableBatchesHandler
from stockroom.application.dto import BatchDTO
from stockroom.application.receive_batch import ReceiveBatchHandler
from stockroom.domain.exceptions import DomainException
from stockroom.infrastructure.bootstrap import batch_ledger, product_repository
from stockroom.infrastructure.cli.common import DATE


def _echo_batches(batches: list[BatchDTO]) -> None:
    if not batches:
        click.echo("No batches found.")
        return
    click.echo(
        f"{'ID':>5} {'Batch':<16} {'Expires':<11} {'Arrived':<11} {'Left':>6} {'Initial':>8} {'Cost':>10}"
    )
    click.echo("-" * 72)
    for b in batches:
        click.echo(
            f"{b.id:>5} {b.batch_code:<16} {b.expiration_date or '-':<11} {b.arrival_date:<11} "
            f"{b.remaining_quantity:>6} {b.initial_quantity:>8} {b.purchase_price:>10}"
        )


@click.command("receive")
@click.option("--product", required=True, help="Product code.")
@click.option("--code", "batch_code", required=True, help="Batch code printed on the lot.")
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.option("--price", required=True, help="Purchase price per unit.")
@click.option("--expires", default=None, type=DATE, help="Expiration date (YYYY-MM-DD).")
@click.option("--arrived", default=None, type=DATE, help="Arrival date (default: today).")
def batch_receive(product, batch_code, quantity, price, expires, arrived) -> None:
    """Book a delivered batch into the ledger."""
    handler = ReceiveBatchHandler(product_repo=product_repository(), ledger=batch_ledger())

    try:
        dto = handler.handle(
            product_code=product,
            batch_code=batch_code,
            quantity=quantity,
            purchase_price=price,
            expiration_date=expires.date() if expires else None,
            arrival_date=arrived.date() if arrived else None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Batch #{dto.id} ({dto.batch_code}) received: {dto.initial_quantity} x {product}")


@click.command("available")
@click.option("--product", required=True, help="Product code.")
def batch_available(product: str) -> None:
    """Show batches in the order a sale would draw from them."""
    handler = GetAvailableBatchesHandler(product_repo=product_repository(), ledger=batch_ledger())
    try:
        batches = handler.handle(product)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _echo_batches(batches)


@click.command("list")
@click.option("--product", required=True, help="Product code.")
def batch_list(product: str) -> None:
    """Show every batch of a product, depleted ones included."""
    handler = GetAvailableBatchesHandler(product_repo=product_repository(), ledger=batch_ledger())
    try:
        batches = handler.history(product)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _echo_batches(batches)
