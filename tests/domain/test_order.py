"""Unit tests for the POS Order aggregate."""

import pytest

from backoffice.domain.exceptions import InvalidStatusTransitionError, ValidationError
from backoffice.domain.model.order import (
    ALLOW_LIST,
    TRANSITION_GRAPH,
    CustomerSnapshot,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentStatus,
    ReturnInfo,
    pos_status_policy,
)
from backoffice.domain.model.value_objects import Money, Quantity, SelectedVariant


def _item(qty: int = 2, price: str = "10000", product_id: str = "p1") -> OrderLineItem:
    return OrderLineItem(
        product_id=product_id,
        product_name="Shirt",
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _order(**kwargs) -> Order:
    kwargs.setdefault("items", [_item()])
    return Order.create(
        order_number="ORD-250101-000001",
        customer=CustomerSnapshot(name="Ana Pérez"),
        **kwargs,
    )


class TestOrderCreation:

    def test_defaults(self):
        order = _order()
        assert order.status == OrderStatus.PENDING
        assert order.id is None
        assert order.item_count == 2

    def test_customer_name_required(self):
        with pytest.raises(ValidationError, match="Customer name is required"):
            Order.create("ORD-1", CustomerSnapshot(name="  "), [_item()])

    def test_at_least_one_item(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _order(items=[])

    def test_totals(self):
        order = _order(
            items=[_item(2, "10000"), _item(1, "5000")],
            tax=Money.of("1000"),
            shipping=Money.of("3000"),
            discount=Money.of("4000"),
        )
        assert order.subtotal == Money.of("25000")
        assert order.total == Money.of("25000")

    def test_discount_larger_than_order_rejected(self):
        with pytest.raises(ValidationError, match="exceeds order value"):
            _order(discount=Money.of("50000"))

    def test_paid_order_records_paid_amount(self):
        order = _order(payment_status=PaymentStatus.PAID)
        assert order.paid_amount == order.total
        assert order.is_paid

    def test_line_selections(self):
        item = _item()
        item.selected_variant = SelectedVariant(selections={"Color": "Red"})
        assert item.selections == {"Color": "Red"}
        assert _item().selections == {}


class TestChangeStatus:

    def test_allow_list_permits_any_status(self):
        order = _order()
        order.status = OrderStatus.CANCELLED
        order.change_status(OrderStatus.DELIVERED, pos_status_policy(ALLOW_LIST), "u1")
        assert order.status == OrderStatus.DELIVERED
        assert order.updated_by == "u1"

    def test_transition_graph_refuses_skipping_steps(self):
        order = _order()
        with pytest.raises(InvalidStatusTransitionError, match="Allowed statuses: confirmed, cancelled"):
            order.change_status(OrderStatus.DELIVERED, pos_status_policy(TRANSITION_GRAPH))
        assert order.status == OrderStatus.PENDING

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            pos_status_policy("anything goes")


class TestCancel:

    def test_cancel_adds_note(self):
        order = _order()
        order.cancel("customer changed mind", "u1")
        assert order.status == OrderStatus.CANCELLED
        assert "Cancelled: customer changed mind" in order.internal_notes

    def test_cancel_twice_rejected(self):
        order = _order()
        order.cancel()
        with pytest.raises(ValidationError, match="already cancelled"):
            order.cancel()

    @pytest.mark.parametrize(
        "status", [OrderStatus.DELIVERED, OrderStatus.RETURNED, OrderStatus.REFUNDED]
    )
    def test_cancel_after_completion_rejected(self, status):
        order = _order()
        order.status = status
        with pytest.raises(ValidationError, match="Cannot cancel"):
            order.cancel()


class TestReturn:

    def test_mark_returned(self):
        order = _order()
        order.status = OrderStatus.DELIVERED
        order.mark_returned(ReturnInfo(reason="defective"))
        assert order.status == OrderStatus.RETURNED
        assert order.return_info.reason == "defective"

    @pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.RETURNED])
    def test_not_returnable(self, status):
        order = _order()
        order.status = status
        with pytest.raises(ValidationError, match="Cannot process a return"):
            order.ensure_returnable()

    def test_return_reason_required(self):
        with pytest.raises(ValidationError, match="return reason is required"):
            ReturnInfo(reason="")
