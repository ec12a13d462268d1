"""OnlineOrder aggregate for storefront orders.

Unlike POS orders, stock for an online order is only *validated* when the
order is placed.  It is committed when an admin confirms the order, so the
status graph below matters for stock consistency as well as for workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.order import (
    OrderLineItem,
    PaymentStatus,
    ReturnInfo,
    order_totals,
)
from backoffice.domain.model.status_policy import TransitionGraphPolicy
from backoffice.domain.model.value_objects import Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OnlineOrderStatus(Enum):
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    RETURNED = "returned"


ONLINE_STATUS_GRAPH: dict[OnlineOrderStatus, list[OnlineOrderStatus]] = {
    OnlineOrderStatus.PENDING_CONFIRMATION: [
        OnlineOrderStatus.CONFIRMED,
        OnlineOrderStatus.REJECTED,
    ],
    OnlineOrderStatus.CONFIRMED: [
        OnlineOrderStatus.PREPARING,
        OnlineOrderStatus.CANCELLED,
    ],
    OnlineOrderStatus.PREPARING: [
        OnlineOrderStatus.SHIPPED,
        OnlineOrderStatus.CANCELLED,
    ],
    OnlineOrderStatus.SHIPPED: [OnlineOrderStatus.DELIVERED],
    OnlineOrderStatus.DELIVERED: [],
    OnlineOrderStatus.REJECTED: [],
    OnlineOrderStatus.CANCELLED: [],
    OnlineOrderStatus.RETURNED: [],
}

ONLINE_STATUS_POLICY = TransitionGraphPolicy(ONLINE_STATUS_GRAPH)

# Statuses in which the order's stock has been taken out of the catalog.
STOCK_COMMITTED_STATUSES = (
    OnlineOrderStatus.CONFIRMED,
    OnlineOrderStatus.PREPARING,
    OnlineOrderStatus.SHIPPED,
    OnlineOrderStatus.DELIVERED,
)

DELIVERY_TYPES = (
    "Entrega normal (1 día habil sin costo)",
    "Entrega express (2-4 horas)",
    "Recoger en tienda",
)
PAYMENT_METHODS = ("contraentrega", "transferencia", "tarjeta_credito", "pse")


@dataclass
class OnlineCustomer:
    """Contact snapshot of the shopper; not linked to a Customer record."""

    name: str
    phone: str
    email: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    notes: str = ""


@dataclass
class StatusHistoryEntry:
    status: OnlineOrderStatus
    updated_by: str
    notes: str
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class OnlineOrder:
    id: str | None
    order_number: str
    customer: OnlineCustomer
    items: list[OrderLineItem]
    discount_amount: Money = field(default_factory=Money.zero)
    shipping_cost: Money = field(default_factory=Money.zero)
    status: OnlineOrderStatus = OnlineOrderStatus.PENDING_CONFIRMATION
    delivery_type: str = DELIVERY_TYPES[0]
    payment_method: str = PAYMENT_METHODS[0]
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: str = ""
    internal_notes: str = ""
    rejection_reason: str = ""
    return_info: ReturnInfo | None = None
    email_sent: bool = False
    confirmation_email_sent: bool = False
    status_history: list[StatusHistoryEntry] = field(default_factory=list)
    updated_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer: OnlineCustomer,
        items: list[OrderLineItem],
        discount_amount: Money | None = None,
        shipping_cost: Money | None = None,
        delivery_type: str = DELIVERY_TYPES[0],
        payment_method: str = PAYMENT_METHODS[0],
        internal_notes: str = "",
    ) -> OnlineOrder:
        if not customer.name or not customer.name.strip():
            raise ValidationError("Customer name is required")
        if not customer.phone or not customer.phone.strip():
            raise ValidationError("Customer phone is required")
        if not items:
            raise ValidationError("Order must contain at least one item")
        if delivery_type not in DELIVERY_TYPES:
            raise ValidationError(f"Invalid delivery type: {delivery_type}")
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"Invalid payment method: {payment_method}")

        order = OnlineOrder(
            id=None,
            order_number=order_number,
            customer=customer,
            items=list(items),
            discount_amount=discount_amount or Money.zero(),
            shipping_cost=shipping_cost or Money.zero(),
            delivery_type=delivery_type,
            payment_method=payment_method,
            notes=customer.notes,
            internal_notes=internal_notes,
        )
        # A discount larger than the order fails here.
        order_totals(order.items, order.shipping_cost, order.discount_amount)
        return order

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return order_totals(self.items, self.shipping_cost, self.discount_amount)[0]

    @property
    def total(self) -> Money:
        return order_totals(self.items, self.shipping_cost, self.discount_amount)[1]

    @property
    def has_committed_stock(self) -> bool:
        return self.status in STOCK_COMMITTED_STATUSES

    # --- State transitions ----------------------------------------------------

    def confirm(self, confirmed_by: str) -> None:
        """pending_confirmation -> confirmed.

        Stock must be committed *before* calling this.
        """
        self._require_pending()
        self._record(OnlineOrderStatus.CONFIRMED, confirmed_by, f"Confirmed by {confirmed_by}")
        self.confirmation_email_sent = True
        self.add_internal_note(f"Confirmed by admin: {confirmed_by}")

    def reject(self, reason: str, rejected_by: str) -> None:
        self._require_pending()
        if not reason or not reason.strip():
            raise ValidationError("A rejection reason is required")
        self._record(OnlineOrderStatus.REJECTED, rejected_by, reason)
        self.rejection_reason = reason
        self.add_internal_note(f"Rejected by admin: {rejected_by}. Reason: {reason}")

    def transition_to(self, target: OnlineOrderStatus, updated_by: str, notes: str | None = None) -> None:
        ONLINE_STATUS_POLICY.check(self.status, target)
        previous = self.status
        self._record(
            target,
            updated_by,
            notes or f"Automatic change from {previous.value} to {target.value}",
        )
        self.add_internal_note(
            f"Status change: {previous.value} -> {target.value} by {updated_by}"
        )
        if notes:
            self.add_internal_note(f"Note: {notes}")

    def mark_returned(self, info: ReturnInfo) -> None:
        if self.status != OnlineOrderStatus.DELIVERED:
            raise ValidationError("Only delivered orders can be returned")
        self.return_info = info
        self._record(OnlineOrderStatus.RETURNED, info.processed_by or "", info.reason)
        self.updated_by = info.processed_by

    def add_internal_note(self, text: str) -> None:
        self.internal_notes = f"{self.internal_notes}\n{text}".strip()

    # --- Internal helpers -----------------------------------------------------

    def _require_pending(self) -> None:
        if self.status != OnlineOrderStatus.PENDING_CONFIRMATION:
            raise ValidationError(
                f"Order has already been processed (status={self.status.value})"
            )

    def _record(self, status: OnlineOrderStatus, updated_by: str, notes: str) -> None:
        self.status = status
        self.status_history.append(
            StatusHistoryEntry(status=status, updated_by=updated_by, notes=notes)
        )
        self.updated_at = _utcnow()
