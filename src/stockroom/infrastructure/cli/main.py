import click

from stockroom.domain.exceptions import DomainException
from stockroom.domain.model.identity import Identity
from stockroom.infrastructure.bootstrap import settings
from stockroom.infrastructure.cli.alert_commands import alert_expiring, alert_low_stock, alert_watch
from stockroom.infrastructure.cli.batch_commands import batch_available, batch_list, batch_receive
from stockroom.infrastructure.cli.order_commands import (
    order_approve,
    order_cancel,
    order_create,
    order_delete,
    order_edit_line,
    order_receive,
    order_show,
)
from stockroom.infrastructure.cli.product_commands import product_add, product_list
from stockroom.infrastructure.cli.sale_commands import sale_create, sale_import, sale_show
from stockroom.infrastructure.cli.stock_commands import stock_count, stock_total
from stockroom.infrastructure.config import ConfigurationError
from stockroom.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--user", "user_id", envvar="STOCKROOM_USER_ID", default=1, show_default=True,
              type=int, help="Acting user id.")
@click.option("--role", envvar="STOCKROOM_ROLE", default="staff", show_default=True,
              type=click.Choice(["admin", "staff"], case_sensitive=False), help="Acting role.")
@click.pass_context
def cli(ctx: click.Context, user_id: int, role: str) -> None:
    """stockroom — batch stock allocation for sales and orders"""
    try:
        configure_logging(settings().log_level)
        ctx.obj = Identity.of(user_id, role)
    except (ConfigurationError, DomainException) as exc:
        raise click.ClickException(str(exc))


@cli.group()
def product() -> None:
    """Catalog products."""


@cli.group()
def batch() -> None:
    """Stock batches."""


@cli.group()
def sale() -> None:
    """Sales."""


@cli.group()
def order() -> None:
    """Orders."""


@cli.group()
def alert() -> None:
    """Low-stock and expiry alerts."""


@cli.group()
def stock() -> None:
    """Stock totals and counts."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
batch.add_command(batch_receive)
batch.add_command(batch_available)
batch.add_command(batch_list)
sale.add_command(sale_create)
sale.add_command(sale_show)
sale.add_command(sale_import)
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_approve)
order.add_command(order_cancel)
order.add_command(order_receive)
order.add_command(order_delete)
order.add_command(order_edit_line)
alert.add_command(alert_low_stock)
alert.add_command(alert_expiring)
alert.add_command(alert_watch)
stock.add_command(stock_total)
stock.add_command(stock_count)
