"""CLI commands for sales, including the bulk CSV import."""

from __future__ import annotations

import csv
from datetime import date, datetime

import click

from stockroom.application.create_sale import CreateSaleHandler
from stockroom.application.dto import ImportRow
from stockroom.application.import_sales import ImportSalesHandler
from stockroom.application.show_sale import ShowSaleHandler
from stockroom.domain.exceptions import DomainException
from stockroom.domain.model.identity import Identity
from stockroom.infrastructure.bootstrap import (
    batch_ledger,
    product_repository,
    sale_repository,
    settings,
)
from stockroom.infrastructure.cli.common import DATE, echo_details, parse_items

IMPORT_COLUMNS = ("product_code", "quantity", "date")


def _create_sale_handler() -> CreateSaleHandler:
    return CreateSaleHandler(
        sale_repo=sale_repository(),
        product_repo=product_repository(),
        ledger=batch_ledger(),
        conflict_retries=settings().conflict_retries,
    )


@click.command("create")
@click.option("--items", required=True, help="Items as 'CODE:QTY[:PRICE],...'.")
@click.option("--date", "sale_date", default=None, type=DATE, help="Sale date (default: today).")
@click.pass_obj
def sale_create(identity: Identity, items: str, sale_date: datetime | None) -> None:
    """Record a sale, drawing stock from the earliest-expiring batches."""
    specs = parse_items(items)
    handler = _create_sale_handler()

    try:
        dto = handler.handle(identity, specs, sale_date.date() if sale_date else date.today())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sale #{dto.id} recorded on {dto.sale_date}")
    echo_details(dto.details, dto.total)


@click.command("show")
@click.option("--id", "sale_id", required=True, type=int, help="Sale ID to display.")
def sale_show(sale_id: int) -> None:
    """Show a sale with the batches it consumed."""
    handler = ShowSaleHandler(sale_repo=sale_repository())
    try:
        dto = handler.handle(sale_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sale #{dto.id}  date={dto.sale_date}  user={dto.user_id}")
    echo_details(dto.details, dto.total)


def read_import_rows(path: str) -> list[ImportRow]:
    """Normalize a CSV file (product_code, quantity, [price], date) into rows."""
    rows: list[ImportRow] = []
    with open(path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        missing = [c for c in IMPORT_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise click.BadParameter(f"CSV is missing column(s): {', '.join(missing)}")
        for number, record in enumerate(reader, start=2):
            try:
                rows.append(
                    ImportRow(
                        product_code=record["product_code"].strip(),
                        quantity=int(record["quantity"]),
                        unit_price=(record.get("price") or "").strip() or None,
                        sale_date=date.fromisoformat(record["date"].strip()),
                    )
                )
            except (AttributeError, TypeError, ValueError) as exc:
                raise click.BadParameter(f"Row {number}: {exc}")
    return rows


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def sale_import(identity: Identity, csv_file: str) -> None:
    """Import sales from CSV; one sale per date, each committed on its own."""
    rows = read_import_rows(csv_file)
    handler = ImportSalesHandler(_create_sale_handler())
    results = handler.handle(identity, rows)

    for result in results:
        if result.ok:
            click.echo(f"{result.sale_date}  OK      sale #{result.sale_id}")
        else:
            click.echo(f"{result.sale_date}  FAILED  {result.error}")

    failed = [r for r in results if not r.ok]
    click.echo(f"{len(results) - len(failed)} of {len(results)} date group(s) imported.")
    if failed:
        raise click.exceptions.Exit(1)
