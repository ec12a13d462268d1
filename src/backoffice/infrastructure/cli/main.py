import logging

import click

from backoffice.infrastructure.bootstrap import config
from backoffice.infrastructure.cli.online_order_commands import (
    online_confirm,
    online_create,
    online_list,
    online_reject,
    online_return,
    online_show,
    online_stats,
    online_status,
)
from backoffice.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_return,
    order_show,
    order_stats,
    order_status,
)
from backoffice.infrastructure.cli.product_commands import (
    product_add,
    product_add_variant,
    product_list,
    product_low_stock,
    product_set_stock,
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """Back-office: catalog stock, POS and online orders"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config().LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def product() -> None:
    """Manage products and stock."""


@cli.group()
def order() -> None:
    """Manage POS orders."""


@cli.group("online-order")
def online_order() -> None:
    """Manage storefront orders."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_add_variant)
product.add_command(product_list)
product.add_command(product_low_stock)
product.add_command(product_set_stock)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_return)
order.add_command(order_show)
order.add_command(order_stats)
order.add_command(order_status)
online_order.add_command(online_confirm)
online_order.add_command(online_create)
online_order.add_command(online_list)
online_order.add_command(online_reject)
online_order.add_command(online_return)
online_order.add_command(online_show)
online_order.add_command(online_stats)
online_order.add_command(online_status)
