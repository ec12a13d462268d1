"""Data Transfer Objects: plain containers that cross layer boundaries.

Input DTOs carry already shape-checked data from the CLI (or any other
adapter) into the handlers; output DTOs carry display-ready data back out
without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.online_order import OnlineOrder
from backoffice.domain.model.order import Order, OrderLineItem

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line.

    ``product_id`` may also be the product's SKU.  ``unit_price`` defaults to the product's current sale price;
    ``selections`` maps variant axis to option value.
    """

    product_id: str
    quantity: int
    unit_price: str | None = None
    selections: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CustomerSpec:
    """Input: customer data as typed at the counter or on the storefront."""

    name: str
    identifier: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    document_type: str = ""
    document_number: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    notes: str = ""


@dataclass(frozen=True)
class ReturnSpec:
    reason: str
    notes: str = ""
    refund_requested: bool = False
    refund_amount: str | None = None
    exchange_product_id: str | None = None
    restore_stock: bool = True


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    variant: str = ""


@dataclass(frozen=True)
class OrderDTO:
    """Output: a POS or online order as displayed to the user."""

    id: str
    order_number: str
    customer_name: str
    status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    total: str
    created_at: str
    payment_status: str
    internal_notes: str = ""
    history: list[str] = field(default_factory=list)


def _line_dto(item: OrderLineItem) -> OrderLineItemDTO:
    return OrderLineItemDTO(
        product_name=item.product_name,
        quantity=item.quantity.value,
        unit_price=str(item.unit_price),
        line_total=str(item.line_total),
        variant=item.selected_variant.describe() if item.selected_variant else "",
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_name=order.customer.name,
        status=order.status.value,
        items=[_line_dto(item) for item in order.items],
        subtotal=str(order.subtotal),
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        payment_status=order.payment_status.value,
        internal_notes=order.internal_notes,
    )


def online_order_to_dto(order: OnlineOrder) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_name=order.customer.name,
        status=order.status.value,
        items=[_line_dto(item) for item in order.items],
        subtotal=str(order.subtotal),
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        payment_status=order.payment_status.value,
        internal_notes=order.internal_notes,
        history=[
            f"{entry.timestamp:%Y-%m-%d %H:%M} {entry.status.value} "
            f"({entry.updated_by}): {entry.notes}"
            for entry in order.status_history
        ],
    )


def parse_choice(enum_cls: type[E], value: str, what: str) -> E:
    """Map a raw status/method string onto *enum_cls* or raise ValidationError."""
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {what}: {value}") from None
