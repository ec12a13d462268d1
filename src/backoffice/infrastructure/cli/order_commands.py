"""CLI commands for POS orders."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from backoffice.application.cancel_order import CancelOrderHandler
from backoffice.application.create_order import CreateOrderHandler
from backoffice.application.dto import CustomerSpec, OrderDTO, OrderItemSpec, ReturnSpec
from backoffice.application.list_orders import ListOrdersHandler
from backoffice.application.process_return import ProcessReturnHandler
from backoffice.application.reports import SalesStatsHandler
from backoffice.application.show_order import ShowOrderHandler
from backoffice.application.update_order_status import UpdateOrderStatusHandler
from backoffice.domain.exceptions import DomainException
from backoffice.domain.model.order import OrderStatus, PaymentMethod, PaymentStatus
from backoffice.infrastructure.bootstrap import (
    config,
    customer_directory,
    status_policy,
    uow_factory,
)


def parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'ID:3,ID:1:Color=Red;Size=M' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":", 2)
        if len(parts) < 2:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Quantity[:Axis=Value;...]'."
            )
        product_id, qty_str = parts[0].strip(), parts[1].strip()
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )

        selections: dict[str, str] = {}
        if len(parts) == 3:
            for pair in parts[2].split(";"):
                if "=" not in pair:
                    raise click.BadParameter(
                        f"Invalid variant '{pair}'. Expected 'Axis=Value'."
                    )
                axis, value = pair.split("=", 1)
                selections[axis.strip()] = value.strip()

        specs.append(OrderItemSpec(product_id=product_id, quantity=qty, selections=selections))
    return specs


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"ID:       {dto.id}")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*60}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>14} {item.line_total:>14}"
        )
        if item.variant:
            click.echo(f"    {item.variant}")
    click.echo(f"  {'-'*60}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>29}")
    click.echo(f"  {'Order Total':<30} {dto.total:>29}")

    if dto.history:
        click.echo()
        click.echo("History:")
        for line in dto.history:
            click.echo(f"  {line}")
    if dto.internal_notes:
        click.echo()
        click.echo("Notes:")
        for line in dto.internal_notes.splitlines():
            click.echo(f"  {line}")


def print_order_rows(dtos: list[OrderDTO]) -> None:
    """One line per order, for listings."""
    if not dtos:
        click.echo("No orders found.")
        return
    click.echo(
        f"{'Number':<20} {'Status':<22} {'Payment':<10} {'Customer':<20} "
        f"{'Total':>14}  {'Created':<20} ID"
    )
    click.echo("-" * 130)
    for dto in dtos:
        click.echo(
            f"{dto.order_number:<20} {dto.status:<22} {dto.payment_status:<10} "
            f"{dto.customer_name[:20]:<20} {dto.total:>14}  {dto.created_at:<20} {dto.id}"
        )


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty[:Axis=Value;...],...'.")
@click.option("--identifier", default="", help="Customer identifier; links a Customer record.")
@click.option("--phone", default="")
@click.option("--email", default="")
@click.option("--document-type", default="")
@click.option("--document-number", default="")
@click.option("--address", default="")
@click.option("--city", default="")
@click.option("--tax", default=None)
@click.option("--discount", default=None)
@click.option("--shipping", default=None)
@click.option("--payment-method", type=click.Choice([m.value for m in PaymentMethod]), default="cash")
@click.option("--payment-status", type=click.Choice([s.value for s in PaymentStatus]), default="pending")
@click.option("--by", "created_by", default=None, help="Staff user ID.")
def order_create(
    customer: str,
    items: str,
    identifier: str,
    phone: str,
    email: str,
    document_type: str,
    document_number: str,
    address: str,
    city: str,
    tax: str | None,
    discount: str | None,
    shipping: str | None,
    payment_method: str,
    payment_status: str,
    created_by: str | None,
) -> None:
    """Create a POS order (stock is taken immediately)."""
    specs = parse_items(items)
    cfg = config()

    handler = CreateOrderHandler(
        uow_factory(cfg),
        customer_directory(cfg),
        default_state=cfg.DEFAULT_STATE,
        default_country=cfg.DEFAULT_COUNTRY,
    )

    try:
        dto = handler.handle(
            CustomerSpec(
                name=customer,
                identifier=identifier,
                phone=phone,
                email=email,
                document_type=document_type,
                document_number=document_number,
                address=address,
                city=city,
            ),
            specs,
            tax=tax,
            discount=discount,
            shipping=shipping,
            payment_method=payment_method,
            payment_status=payment_status,
            created_by=created_by,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created")
    display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID or order number.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow_factory())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--to", "status", required=True, type=click.Choice([s.value for s in OrderStatus]))
@click.option("--by", "updated_by", default=None, help="Staff user ID.")
def order_status(order_id: str, status: str, updated_by: str | None) -> None:
    """Change an order's status."""
    handler = UpdateOrderStatusHandler(uow_factory(), status_policy())

    try:
        handler.handle(order_id, status, updated_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} is now {status}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--reason", default="", help="Cancellation reason.")
@click.option("--by", "cancelled_by", default=None, help="Staff user ID.")
def order_cancel(order_id: str, reason: str, cancelled_by: str | None) -> None:
    """Cancel an order (puts its stock back)."""
    handler = CancelOrderHandler(uow_factory())

    try:
        handler.handle(order_id, reason, cancelled_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled.")


@click.command("return")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--reason", required=True, help="Return reason.")
@click.option("--notes", default="")
@click.option("--refund", is_flag=True, default=False, help="Refund the order total.")
@click.option("--refund-amount", default=None, help="Refund a specific amount instead.")
@click.option("--exchange-product", default=None, help="Product ID given in exchange.")
@click.option("--no-restock", is_flag=True, default=False, help="Do not put the stock back.")
@click.option("--by", "processed_by", default=None, help="Staff user ID.")
def order_return(
    order_id: str,
    reason: str,
    notes: str,
    refund: bool,
    refund_amount: str | None,
    exchange_product: str | None,
    no_restock: bool,
    processed_by: str | None,
) -> None:
    """Process a return for an order."""
    handler = ProcessReturnHandler(uow_factory())
    spec = ReturnSpec(
        reason=reason,
        notes=notes,
        refund_requested=refund or refund_amount is not None,
        refund_amount=refund_amount,
        exchange_product_id=exchange_product,
        restore_stock=not no_restock,
    )

    try:
        handler.handle(order_id, spec, processed_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Return processed for order {order_id}.")


@click.command("stats")
@click.option("--from", "date_from", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--to", "date_to", type=click.DateTime(["%Y-%m-%d"]), default=None)
def order_stats(date_from: datetime | None, date_to: datetime | None) -> None:
    """Sales figures over paid POS orders."""
    stats = SalesStatsHandler(uow_factory()).handle(
        date_from.date() if date_from else None,
        date_to.date() if date_to else None,
    )
    click.echo(f"Total sales:         {stats.total_sales}")
    click.echo(f"Orders:              {stats.total_orders}")
    click.echo(f"Average order value: {stats.average_order_value}")
    click.echo(f"Items sold:          {stats.total_items}")


@click.command("list")
@click.option("--status", type=click.Choice([s.value for s in OrderStatus]), default=None)
@click.option("--payment", "payment_status", type=click.Choice([s.value for s in PaymentStatus]), default=None)
@click.option("--from", "date_from", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--to", "date_to", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--today", is_flag=True, default=False, help="Only orders created today (UTC).")
@click.option("--limit", type=click.IntRange(min=1), default=None)
def order_list(
    status: str | None,
    payment_status: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
    today: bool,
    limit: int | None,
) -> None:
    """List POS orders, newest first."""
    start = date_from.date() if date_from else None
    end = date_to.date() if date_to else None
    if today:
        start = end = datetime.now(timezone.utc).date()

    try:
        dtos = ListOrdersHandler(uow_factory()).handle(status, payment_status, start, end, limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    print_order_rows(dtos)
