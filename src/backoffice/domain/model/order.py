"""Order aggregate for point-of-sale orders.

The Order is an aggregate root that owns its line items and an embedded
customer snapshot.  Stock is committed at creation time by the application
layer; this module only enforces the order's own rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.status_policy import (
    AllowListPolicy,
    StatusPolicy,
    TransitionGraphPolicy,
)
from backoffice.domain.model.value_objects import Money, Quantity, SelectedVariant


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    CHECK = "check"
    CREDIT = "credit"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    REFUNDED = "refunded"


@dataclass
class OrderLineItem:
    """Captures the product data and price of a line at order-creation time.

    Later catalog edits never reach an existing line.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    sku: str = ""
    selected_variant: SelectedVariant | None = None
    image: str = ""
    base_price: Money | None = None
    category: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def selections(self) -> dict[str, str]:
        if self.selected_variant is None:
            return {}
        return self.selected_variant.axis_values()


@dataclass
class CustomerSnapshot:
    """Denormalized copy of the customer at order time."""

    name: str
    customer_id: str | None = None
    email: str = ""
    phone: str = ""
    document_type: str = ""
    document_number: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    notes: str = ""


@dataclass
class ReturnInfo:
    reason: str
    notes: str = ""
    refund_requested: bool = False
    refund_processed: bool = False
    refund_amount: Money = field(default_factory=Money.zero)
    exchange_product_id: str | None = None
    processed_by: str | None = None
    processed_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.reason or not self.reason.strip():
            raise ValidationError("A return reason is required")


def order_totals(items: list[OrderLineItem], charges: Money, discount: Money) -> tuple[Money, Money]:
    """Return (subtotal, total) where total = subtotal + charges - discount."""
    subtotal = Money.zero(charges.currency)
    for item in items:
        subtotal = subtotal + item.line_total
    gross = subtotal + charges
    if discount > gross:
        raise ValidationError(f"Discount {discount} exceeds order value {gross}")
    return subtotal, gross - discount


POS_STATUS_GRAPH: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.CONFIRMED, OrderStatus.CANCELLED],
    OrderStatus.CONFIRMED: [OrderStatus.PREPARING, OrderStatus.CANCELLED],
    OrderStatus.PREPARING: [OrderStatus.SHIPPED, OrderStatus.CANCELLED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    OrderStatus.DELIVERED: [OrderStatus.RETURNED, OrderStatus.REFUNDED],
    OrderStatus.RETURNED: [OrderStatus.REFUNDED],
    OrderStatus.CANCELLED: [],
    OrderStatus.REFUNDED: [],
}

ALLOW_LIST = "allow_list"
TRANSITION_GRAPH = "transition_graph"


def pos_status_policy(name: str = ALLOW_LIST) -> StatusPolicy:
    if name == ALLOW_LIST:
        return AllowListPolicy(OrderStatus)
    if name == TRANSITION_GRAPH:
        return TransitionGraphPolicy(POS_STATUS_GRAPH)
    raise ValueError(f"Unknown POS status policy: {name!r}")


# Statuses from which stock has already gone back (or must not be restored again).
_NOT_CANCELLABLE = (
    OrderStatus.CANCELLED,
    OrderStatus.DELIVERED,
    OrderStatus.RETURNED,
    OrderStatus.REFUNDED,
)
_NOT_RETURNABLE = (OrderStatus.CANCELLED, OrderStatus.RETURNED)


@dataclass
class Order:
    """Aggregate root for POS orders.

    Use ``Order.create()`` for new orders; it enforces all business rules.
    The ``__init__`` stays simple so the repository can reconstitute
    persisted orders without re-validating.
    """

    id: str | None
    order_number: str
    customer: CustomerSnapshot
    items: list[OrderLineItem]
    tax: Money = field(default_factory=Money.zero)
    discount: Money = field(default_factory=Money.zero)
    shipping: Money = field(default_factory=Money.zero)
    status: OrderStatus = OrderStatus.PENDING
    order_type: str = "pos"
    delivery_type: str = "pickup"
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING
    paid_amount: Money = field(default_factory=Money.zero)
    notes: str = ""
    internal_notes: str = ""
    created_by: str | None = None
    updated_by: str | None = None
    return_info: ReturnInfo | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer: CustomerSnapshot,
        items: list[OrderLineItem],
        tax: Money | None = None,
        discount: Money | None = None,
        shipping: Money | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        notes: str = "",
        internal_notes: str = "",
        created_by: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not customer.name or not customer.name.strip():
            raise ValidationError("Customer name is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        order = Order(
            id=None,
            order_number=order_number,
            customer=customer,
            items=list(items),
            tax=tax or Money.zero(),
            discount=discount or Money.zero(),
            shipping=shipping or Money.zero(),
            payment_method=payment_method,
            payment_status=payment_status,
            notes=notes,
            internal_notes=internal_notes,
            created_by=created_by,
        )
        # Evaluated eagerly so a discount larger than the order fails here.
        total = order.total
        if payment_status == PaymentStatus.PAID:
            order.paid_amount = total
        return order

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return order_totals(self.items, self.tax + self.shipping, self.discount)[0]

    @property
    def total(self) -> Money:
        return order_totals(self.items, self.tax + self.shipping, self.discount)[1]

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID or self.paid_amount >= self.total

    @property
    def is_completed(self) -> bool:
        return self.status in (
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
            OrderStatus.RETURNED,
            OrderStatus.REFUNDED,
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    # --- State transitions ----------------------------------------------------

    def change_status(self, target: OrderStatus, policy: StatusPolicy, updated_by: str | None = None) -> None:
        policy.check(self.status, target)
        self.status = target
        self._touch(updated_by)

    def cancel(self, reason: str = "", cancelled_by: str | None = None) -> None:
        """Mark the order cancelled.

        Stock restoration must happen *before* calling this (coordinated by
        the application handler via the domain service).
        """
        if self.status == OrderStatus.CANCELLED:
            raise ValidationError("Order is already cancelled")
        if self.status in _NOT_CANCELLABLE:
            raise ValidationError(f"Cannot cancel an order in {self.status.value} status")
        self.status = OrderStatus.CANCELLED
        self.add_internal_note(f"Cancelled: {reason}")
        self._touch(cancelled_by)

    def ensure_returnable(self) -> None:
        if self.status in _NOT_RETURNABLE:
            raise ValidationError(
                f"Cannot process a return for an order in {self.status.value} status"
            )

    def mark_returned(self, info: ReturnInfo) -> None:
        self.ensure_returnable()
        self.return_info = info
        self.status = OrderStatus.RETURNED
        self._touch(info.processed_by)

    def add_internal_note(self, text: str) -> None:
        self.internal_notes = f"{self.internal_notes}\n{text}".strip()

    # --- Internal helpers -----------------------------------------------------

    def _touch(self, updated_by: str | None) -> None:
        self.updated_by = updated_by
        self.updated_at = _utcnow()
