"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from backoffice.application.add_product import AddProductHandler
from backoffice.application.add_variant import AddVariantHandler
from backoffice.application.list_products import ListProductsHandler, ProductLineDTO
from backoffice.application.reports import LowStockHandler
from backoffice.application.set_stock import SetStockHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import uow_factory


def _parse_options(raw: str) -> dict[str, int]:
    """Parse 'Red=3,Blue=5' into {value: stock}."""
    options: dict[str, int] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid option format '{pair}'. Expected 'Value=Stock'."
            )
        value, qty_str = pair.rsplit("=", 1)
        try:
            options[value.strip()] = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid stock '{qty_str}' for option '{value}'.")
    return options


def _print_products(products: list[ProductLineDTO]) -> None:
    click.echo(f"{'SKU':<12} {'Name':<24} {'Price':>14} {'Stock':>6} {'Min':>4}  ID")
    click.echo("-" * 100)
    for p in products:
        click.echo(
            f"{p.sku:<12} {p.name:<24} {p.sale_price:>14} {p.stock:>6} {p.min_stock:>4}  {p.id}"
        )
        if p.variants:
            click.echo(f"{'':<12} {p.variants}")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Sale price (e.g. 45000).")
@click.option("--base-price", default=None, help="Cost price; defaults to the sale price.")
@click.option("--stock", default=0, type=click.IntRange(min=0), help="Initial stock.")
@click.option("--min-stock", default=5, type=click.IntRange(min=0), help="Low-stock threshold.")
@click.option("--sku", default="", help="SKU; generated when omitted.")
def product_add(
    name: str, price: str, base_price: str | None, stock: int, min_stock: int, sku: str
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow_factory())

    try:
        product = handler.handle(
            name=name,
            sale_price=price,
            base_price=base_price,
            stock=stock,
            min_stock=min_stock,
            sku=sku,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.sku} '{product.name}' added at {product.sale_price} (id={product.id})")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = ListProductsHandler(uow_factory()).handle()

    if not products:
        click.echo("No products found.")
        return
    _print_products(products)


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID or SKU.")
@click.option("--amount", required=True, type=click.IntRange(min=0), help="Units.")
@click.option(
    "--operation",
    type=click.Choice(["set", "add", "subtract"]),
    default="set",
    show_default=True,
)
def product_set_stock(product_id: str, amount: int, operation: str) -> None:
    """Adjust a product's flat stock."""
    handler = SetStockHandler(uow_factory())

    try:
        product = handler.handle(product_id, amount, operation)  # type: ignore[arg-type]
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock of {product.sku} is now {product.stock}")


@click.command("add-variant")
@click.option("--id", "product_id", required=True, help="Product ID or SKU.")
@click.option("--axis", required=True, help="Variant axis, e.g. Color.")
@click.option("--options", required=True, help="Options as 'Value=Stock,Value=Stock'.")
def product_add_variant(product_id: str, axis: str, options: str) -> None:
    """Declare a variant axis with per-option stock."""
    handler = AddVariantHandler(uow_factory())

    try:
        product = handler.handle(product_id, axis, _parse_options(options))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant '{axis}' added to {product.sku}")


@click.command("low-stock")
def product_low_stock() -> None:
    """List active products at or below their minimum stock."""
    products = LowStockHandler(uow_factory()).handle()

    if not products:
        click.echo("No products are low on stock.")
        return
    _print_products(products)
