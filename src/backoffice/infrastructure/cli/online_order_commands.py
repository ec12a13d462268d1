"""CLI commands for storefront (online) orders."""

from __future__ import annotations

from datetime import datetime

import click

from backoffice.application.confirm_online_order import ConfirmOnlineOrderHandler
from backoffice.application.create_online_order import CreateOnlineOrderHandler
from backoffice.application.dto import CustomerSpec, ReturnSpec
from backoffice.application.list_orders import ListOnlineOrdersHandler
from backoffice.application.process_online_return import ProcessOnlineReturnHandler
from backoffice.application.reject_online_order import RejectOnlineOrderHandler
from backoffice.application.reports import OnlineOrderStatsHandler
from backoffice.application.show_online_order import ShowOnlineOrderHandler
from backoffice.application.update_online_order_status import (
    UpdateOnlineOrderStatusHandler,
)
from backoffice.domain.exceptions import DomainException
from backoffice.domain.model.online_order import (
    DELIVERY_TYPES,
    PAYMENT_METHODS,
    OnlineOrderStatus,
)
from backoffice.infrastructure.bootstrap import config, email_notifier, uow_factory
from backoffice.infrastructure.cli.order_commands import (
    display_order,
    parse_items,
    print_order_rows,
)

_DELIVERY = dict(zip(("normal", "express", "pickup"), DELIVERY_TYPES))


@click.command("create")
@click.option("--name", required=True, help="Shopper name.")
@click.option("--phone", required=True, help="Shopper phone.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty[:Axis=Value;...],...'.")
@click.option("--email", default="")
@click.option("--address", default="")
@click.option("--city", default="")
@click.option("--state", default="")
@click.option("--notes", default="")
@click.option("--discount", default=None)
@click.option("--shipping", default=None)
@click.option("--delivery", type=click.Choice(list(_DELIVERY)), default="normal")
@click.option("--payment-method", type=click.Choice(PAYMENT_METHODS), default=PAYMENT_METHODS[0])
def online_create(
    name: str,
    phone: str,
    items: str,
    email: str,
    address: str,
    city: str,
    state: str,
    notes: str,
    discount: str | None,
    shipping: str | None,
    delivery: str,
    payment_method: str,
) -> None:
    """Place a storefront order (awaits admin confirmation)."""
    specs = parse_items(items)
    cfg = config()
    handler = CreateOnlineOrderHandler(
        uow_factory(cfg),
        email_notifier(cfg),
        default_state=cfg.DEFAULT_STATE,
    )

    try:
        dto = handler.handle(
            CustomerSpec(
                name=name,
                phone=phone,
                email=email,
                address=address,
                city=city,
                state=state,
                notes=notes,
            ),
            specs,
            discount=discount,
            shipping=shipping,
            delivery_type=_DELIVERY[delivery],
            payment_method=payment_method,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Online order {dto.order_number} placed")
    display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID or order number.")
def online_show(order_id: str) -> None:
    """Show an online order with its status history."""
    try:
        dto = ShowOnlineOrderHandler(uow_factory()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("confirm")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--by", "confirmed_by", required=True, help="Admin user.")
def online_confirm(order_id: str, confirmed_by: str) -> None:
    """Confirm a pending order (takes its stock)."""
    try:
        ConfirmOnlineOrderHandler(uow_factory()).handle(order_id, confirmed_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Online order {order_id} confirmed.")


@click.command("reject")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--reason", required=True, help="Rejection reason.")
@click.option("--by", "rejected_by", required=True, help="Admin user.")
def online_reject(order_id: str, reason: str, rejected_by: str) -> None:
    """Reject a pending order."""
    try:
        RejectOnlineOrderHandler(uow_factory()).handle(order_id, reason, rejected_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Online order {order_id} rejected.")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--to", "status", required=True, type=click.Choice([s.value for s in OnlineOrderStatus]))
@click.option("--by", "updated_by", required=True, help="Admin user.")
@click.option("--notes", default=None)
def online_status(order_id: str, status: str, updated_by: str, notes: str | None) -> None:
    """Move an online order along its workflow."""
    try:
        UpdateOnlineOrderStatusHandler(uow_factory()).handle(order_id, status, updated_by, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Online order {order_id} is now {status}.")


@click.command("return")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--reason", required=True, help="Return reason.")
@click.option("--notes", default="")
@click.option("--refund", is_flag=True, default=False, help="Refund the order total.")
@click.option("--refund-amount", default=None, help="Refund a specific amount instead.")
@click.option("--no-restock", is_flag=True, default=False, help="Do not put the stock back.")
@click.option("--by", "processed_by", default=None, help="Staff user ID.")
def online_return(
    order_id: str,
    reason: str,
    notes: str,
    refund: bool,
    refund_amount: str | None,
    no_restock: bool,
    processed_by: str | None,
) -> None:
    """Process a return for a delivered online order."""
    spec = ReturnSpec(
        reason=reason,
        notes=notes,
        refund_requested=refund or refund_amount is not None,
        refund_amount=refund_amount,
        restore_stock=not no_restock,
    )
    try:
        ProcessOnlineReturnHandler(uow_factory()).handle(order_id, spec, processed_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Return processed for online order {order_id}.")


@click.command("stats")
@click.option("--day", type=click.DateTime(["%Y-%m-%d"]), default=None, help="Defaults to today.")
def online_stats(day: datetime | None) -> None:
    """Pending and today's confirmed/rejected online orders."""
    stats = OnlineOrderStatsHandler(uow_factory()).handle(day.date() if day else None)
    click.echo(f"Pending:         {stats.pending} ({stats.pending_value})")
    click.echo(f"Confirmed today: {stats.confirmed_today} ({stats.confirmed_today_value})")
    click.echo(f"Rejected today:  {stats.rejected_today}")


@click.command("list")
@click.option("--status", type=click.Choice([s.value for s in OnlineOrderStatus]), default=None)
@click.option("--pending", is_flag=True, default=False, help="Shortcut for --status pending_confirmation.")
@click.option("--limit", type=click.IntRange(min=1), default=None)
def online_list(status: str | None, pending: bool, limit: int | None) -> None:
    """List online orders, newest first."""
    if pending:
        status = OnlineOrderStatus.PENDING_CONFIRMATION.value

    try:
        dtos = ListOnlineOrdersHandler(uow_factory()).handle(status, limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    print_order_rows(dtos)
