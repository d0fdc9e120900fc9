"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from stockroom.application.approve_order import ApproveOrderHandler
from stockroom.application.cancel_order import CancelOrderHandler
from stockroom.application.create_order import CreateOrderHandler
from stockroom.application.delete_order import DeleteOrderHandler
from stockroom.application.dto import OrderDTO
from stockroom.application.edit_order_line import EditOrderLineHandler
from stockroom.application.receive_order import ReceiveOrderHandler
from stockroom.application.show_order import ShowOrderHandler
from stockroom.domain.exceptions import DomainException
from stockroom.domain.model.identity import Identity
from stockroom.infrastructure.bootstrap import (
    batch_ledger,
    order_repository,
    product_repository,
)
from stockroom.infrastructure.cli.common import DATE, echo_details, parse_items


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Date: {dto.order_date}  user={dto.user_id}")
    click.echo()
    echo_details(dto.details, dto.total)


@click.command("create")
@click.option("--items", required=True, help="Items as 'CODE:QTY[:PRICE],...'.")
@click.option("--date", "order_date", default=None, type=DATE, help="Order date (default: today).")
@click.pass_obj
def order_create(identity: Identity, items: str, order_date: datetime | None) -> None:
    """Create an order; stock is deducted immediately."""
    specs = parse_items(items)
    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        ledger=batch_ledger(),
    )

    try:
        dto = handler.handle(identity, specs, order_date.date() if order_date else None)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("approve")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to approve.")
@click.pass_obj
def order_approve(identity: Identity, order_id: int) -> None:
    """Approve a pending order (admin)."""
    handler = ApproveOrderHandler(order_repo=order_repository())
    try:
        dto = handler.handle(identity, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Order #{dto.id} approved.")


@click.command("receive")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to mark received.")
@click.pass_obj
def order_receive(identity: Identity, order_id: int) -> None:
    """Mark an approved order as received (admin)."""
    handler = ReceiveOrderHandler(order_repo=order_repository())
    try:
        dto = handler.handle(identity, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Order #{dto.id} received.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.pass_obj
def order_cancel(identity: Identity, order_id: int) -> None:
    """Cancel a pending order and return its stock to the batches."""
    handler = CancelOrderHandler(order_repo=order_repository(), ledger=batch_ledger())
    try:
        handler.handle(identity, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Order #{order_id} cancelled — stock returned.")


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
@click.pass_obj
def order_delete(identity: Identity, order_id: int) -> None:
    """Delete a pending order and return its stock (admin)."""
    handler = DeleteOrderHandler(order_repo=order_repository(), ledger=batch_ledger())
    try:
        handler.handle(identity, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Order #{order_id} deleted — stock returned.")


@click.command("edit-line")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--detail", "detail_id", required=True, type=int, help="Detail line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
@click.option("--price", default=None, help="New unit price (default: unchanged).")
@click.option("--batch", "batch_id", default=None, type=int, help="Draw from this batch instead of FIFO.")
@click.pass_obj
def order_edit_line(identity, order_id, detail_id, quantity, price, batch_id) -> None:
    """Change the quantity, price or batch of a pending order line (admin)."""
    handler = EditOrderLineHandler(order_repo=order_repository(), ledger=batch_ledger())
    try:
        dto = handler.handle(
            identity, order_id, detail_id, quantity, unit_price=price, batch_id=batch_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_order(dto)
