"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import click

from stockroom.application.dto import DetailDTO, LineSpec

DATE = click.DateTime(formats=["%Y-%m-%d"])


def parse_items(raw: str) -> list[LineSpec]:
    """Parse 'P001:3,P002:5:12.50' into LineSpec list (price optional)."""
    specs: list[LineSpec] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [p.strip() for p in chunk.split(":")]
        if len(parts) not in (2, 3) or not parts[0]:
            raise click.BadParameter(
                f"Invalid item format '{chunk}'. Expected 'CODE:QTY' or 'CODE:QTY:PRICE'."
            )
        try:
            qty = int(parts[1])
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{parts[1]}' for product '{parts[0]}'.")
        price = parts[2] if len(parts) == 3 else None
        specs.append(LineSpec(product_code=parts[0], quantity=qty, unit_price=price))
    if not specs:
        raise click.BadParameter("At least one item is required.")
    return specs


def echo_details(details: list[DetailDTO], total: str) -> None:
    click.echo(f"  {'#':>4} {'Product':<13} {'Batch':<16} {'Qty':>5} {'Price':>10} {'Subtotal':>12}")
    click.echo(f"  {'-' * 65}")
    for d in details:
        detail_id = d.id if d.id is not None else "-"
        click.echo(
            f"  {detail_id:>4} {d.product_code:<13} {d.batch_code:<16} {d.quantity:>5} "
            f"{d.unit_price:>10} {d.subtotal:>12}"
        )
    click.echo(f"  {'-' * 65}")
    click.echo(f"  {'Total':<40} {total:>25}")
