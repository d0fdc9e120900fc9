"""CLI commands for low-stock and expiry alerts."""

from __future__ import annotations

import logging
import time

import click

from stockroom.application.stock_alerts import ExpiringBatchesHandler, LowStockAlertsHandler
from stockroom.domain.exceptions import DomainException
from stockroom.infrastructure.bootstrap import batch_ledger, product_repository, settings

logger = logging.getLogger(__name__)


def _echo_low_stock(alerts) -> None:
    if not alerts:
        click.echo("All products are at or above their minimum stock.")
        return
    click.echo(f"{'Code':<13} {'Name':<24} {'Category':<14} {'Stock':>6} {'Min':>6}")
    click.echo("-" * 67)
    for a in alerts:
        click.echo(
            f"{a.product_code:<13} {a.product_name:<24} {a.category_name or '-':<14} "
            f"{a.current_stock:>6} {a.min_stock:>6}"
        )


@click.command("low-stock")
def alert_low_stock() -> None:
    """Products below their minimum stock."""
    handler = LowStockAlertsHandler(product_repo=product_repository(), ledger=batch_ledger())
    _echo_low_stock(handler.handle())


@click.command("expiring")
@click.option("--days", default=None, type=int, help="Window in days (default from settings).")
def alert_expiring(days: int | None) -> None:
    """Batches with stock that expire within the window."""
    window = settings().expiry_warning_days if days is None else days
    handler = ExpiringBatchesHandler(product_repo=product_repository(), ledger=batch_ledger())
    try:
        alerts = handler.handle(window)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not alerts:
        click.echo(f"No batches expire within {window} day(s).")
        return
    click.echo(f"{'Batch':<16} {'Product':<24} {'Expires':<11} {'Days':>5} {'Left':>6}")
    click.echo("-" * 66)
    for a in alerts:
        flag = " EXPIRED" if a.expired else ""
        click.echo(
            f"{a.batch_code:<16} {a.product_name:<24} {a.expiration_date.isoformat():<11} "
            f"{a.days_until_expiry:>5} {a.remaining_quantity:>6}{flag}"
        )


@click.command("watch")
@click.option("--interval", default=60.0, show_default=True, type=float, help="Seconds between polls.")
@click.option("--count", default=0, show_default=True, type=int, help="Stop after N polls (0 = forever).")
def alert_watch(interval: float, count: int) -> None:
    """Poll low-stock alerts periodically."""
    handler = LowStockAlertsHandler(product_repo=product_repository(), ledger=batch_ledger())
    polls = 0
    while True:
        alerts = handler.handle()
        logger.info("low-stock poll alerts=%d", len(alerts))
        _echo_low_stock(alerts)
        polls += 1
        if count and polls >= count:
            return
        time.sleep(interval)
