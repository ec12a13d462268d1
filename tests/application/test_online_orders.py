"""Integration tests for the storefront order lifecycle."""

from decimal import Decimal

import pytest

from backoffice.application.confirm_online_order import ConfirmOnlineOrderHandler
from backoffice.application.create_online_order import CreateOnlineOrderHandler
from backoffice.application.dto import CustomerSpec, OrderItemSpec, ReturnSpec
from backoffice.application.process_online_return import ProcessOnlineReturnHandler
from backoffice.application.reject_online_order import RejectOnlineOrderHandler
from backoffice.application.show_online_order import ShowOnlineOrderHandler
from backoffice.application.update_online_order_status import (
    UpdateOnlineOrderStatusHandler,
)
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    InvalidStatusTransitionError,
    OutOfStockError,
    ValidationError,
)
from backoffice.domain.model.online_order import OnlineOrderStatus
from tests.fakes import FakeDatabase, FakeEmailNotifier, make_product

LUIS = CustomerSpec(name="Luis Gómez", phone="3009998877", email="luis@example.com", city="Neiva")


def _setup(notifier: FakeEmailNotifier | None = None):
    db = FakeDatabase([
        make_product("q1", "Mug", stock=50, price="15000"),
        make_product("p1", "Shirt", stock=20, price="40000", variants={"Color": {"Red": 2, "Blue": 6}}),
    ])
    notifier = notifier or FakeEmailNotifier()
    return db, CreateOnlineOrderHandler(db.uow, notifier), notifier


def _place(db, create, *items) -> str:
    return create.handle(LUIS, list(items) or [OrderItemSpec("q1", 5)]).id


def _status(db, order_id, *statuses):
    handler = UpdateOnlineOrderStatusHandler(db.uow)
    for status in statuses:
        handler.handle(order_id, status, "admin")


class TestCreateOnlineOrder:

    def test_validates_but_does_not_take_stock(self):
        db, create, _ = _setup()
        dto = create.handle(LUIS, [OrderItemSpec("q1", 5)])

        assert dto.status == "pending_confirmation"
        assert dto.order_number.startswith("WEB-")
        assert db.products["q1"].stock == 50
        assert db.online_orders[dto.id].customer.state == "Huila"

    def test_variant_shortfall_rejects_order(self):
        db, create, notifier = _setup()
        with pytest.raises(OutOfStockError, match="Color=Red"):
            create.handle(LUIS, [OrderItemSpec("p1", 3, selections={"Color": "Red"})])

        assert db.online_orders == {}
        assert notifier.sent == []

    def test_sends_confirmation_email_after_commit(self):
        db, create, notifier = _setup()
        dto = create.handle(LUIS, [OrderItemSpec("q1", 1)])

        assert notifier.sent == [dto.order_number]
        assert db.online_orders[dto.id].email_sent

    def test_email_failure_does_not_fail_the_order(self, caplog):
        db, create, _ = _setup(FakeEmailNotifier(fail=True))
        dto = create.handle(LUIS, [OrderItemSpec("q1", 1)])

        assert not db.online_orders[dto.id].email_sent
        assert "Could not send confirmation email" in caplog.text

    def test_no_email_address_no_email(self):
        db, create, notifier = _setup()
        create.handle(CustomerSpec(name="Luis", phone="300"), [OrderItemSpec("q1", 1)])
        assert notifier.sent == []

    def test_phone_required(self):
        db, create, _ = _setup()
        with pytest.raises(ValidationError, match="phone is required"):
            create.handle(CustomerSpec(name="Luis"), [OrderItemSpec("q1", 1)])


class TestConfirmAndReject:

    def test_confirm_takes_stock(self):
        db, create, _ = _setup()
        order_id = _place(db, create)

        ConfirmOnlineOrderHandler(db.uow).handle(order_id, "admin")

        assert db.products["q1"].stock == 45
        assert db.products["q1"].quantities_sold == 5
        assert db.online_orders[order_id].status == OnlineOrderStatus.CONFIRMED

    def test_confirm_revalidates_stock(self):
        db, create, _ = _setup()
        order_id = _place(db, create, OrderItemSpec("q1", 40))
        _place(db, create, OrderItemSpec("q1", 40))
        other = [oid for oid in db.online_orders if oid != order_id][0]
        ConfirmOnlineOrderHandler(db.uow).handle(other, "admin")

        with pytest.raises(OutOfStockError, match="Available: 10, requested: 40"):
            ConfirmOnlineOrderHandler(db.uow).handle(order_id, "admin")

        assert db.online_orders[order_id].status == OnlineOrderStatus.PENDING_CONFIRMATION
        assert db.products["q1"].stock == 10

    def test_confirm_twice_rejected(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        handler = ConfirmOnlineOrderHandler(db.uow)
        handler.handle(order_id, "admin")

        with pytest.raises(ValidationError, match="already been processed"):
            handler.handle(order_id, "admin")
        assert db.products["q1"].stock == 45

    def test_reject_leaves_stock_alone(self):
        db, create, _ = _setup()
        order_id = _place(db, create)

        RejectOnlineOrderHandler(db.uow).handle(order_id, "suspicious", "admin")

        order = db.online_orders[order_id]
        assert order.status == OnlineOrderStatus.REJECTED
        assert order.rejection_reason == "suspicious"
        assert db.products["q1"].stock == 50

    def test_missing_order(self):
        db, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ConfirmOnlineOrderHandler(db.uow).handle("nope", "admin")


class TestUpdateOnlineOrderStatus:

    def test_status_confirm_takes_stock(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, "confirmed")
        assert db.products["q1"].stock == 45

    @pytest.mark.parametrize("path", [["confirmed"], ["confirmed", "preparing"]])
    def test_cancel_after_confirmation_restores_stock(self, path):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, *path, "cancelled")

        assert db.products["q1"].stock == 50
        assert db.online_orders[order_id].status == OnlineOrderStatus.CANCELLED

    def test_full_workflow_keeps_stock_taken(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, "confirmed", "preparing", "shipped", "delivered")

        order = db.online_orders[order_id]
        assert order.status == OnlineOrderStatus.DELIVERED
        assert [e.status.value for e in order.status_history] == [
            "confirmed", "preparing", "shipped", "delivered",
        ]
        assert db.products["q1"].stock == 45

    def test_rejected_transition_mutates_nothing(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        commits = db.commits

        with pytest.raises(InvalidStatusTransitionError):
            _status(db, order_id, "shipped")

        assert db.online_orders[order_id].status == OnlineOrderStatus.PENDING_CONFIRMATION
        assert db.online_orders[order_id].status_history == []
        assert db.products["q1"].stock == 50
        assert db.commits == commits

    def test_shipped_cannot_be_cancelled(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, "confirmed", "preparing", "shipped")

        with pytest.raises(InvalidStatusTransitionError, match="Allowed statuses: delivered"):
            _status(db, order_id, "cancelled")
        assert db.products["q1"].stock == 45

    def test_unknown_status(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        with pytest.raises(ValidationError, match="Invalid status: lost"):
            _status(db, order_id, "lost")


class TestProcessOnlineReturn:

    def test_confirmed_order_cannot_be_returned(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, "confirmed")

        with pytest.raises(ValidationError, match="Only delivered orders can be returned"):
            ProcessOnlineReturnHandler(db.uow).handle(order_id, ReturnSpec(reason="late"))
        assert db.products["q1"].stock == 45

    def test_delivered_order_return_restores_stock(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, "confirmed", "preparing", "shipped", "delivered")

        ProcessOnlineReturnHandler(db.uow).handle(
            order_id, ReturnSpec(reason="broken", refund_requested=True)
        )

        order = db.online_orders[order_id]
        assert order.status == OnlineOrderStatus.RETURNED
        assert order.return_info.refund_amount.amount == Decimal("75000")
        assert db.products["q1"].stock == 50

    def test_return_without_restock(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        _status(db, order_id, "confirmed", "preparing", "shipped", "delivered")

        ProcessOnlineReturnHandler(db.uow).handle(
            order_id, ReturnSpec(reason="broken", restore_stock=False)
        )
        assert db.online_orders[order_id].return_info.refund_amount.amount == Decimal("0")
        assert db.products["q1"].stock == 45


class TestShowOnlineOrder:

    def test_history_is_listed(self):
        db, create, _ = _setup()
        order_id = _place(db, create)
        ConfirmOnlineOrderHandler(db.uow).handle(order_id, "admin")

        dto = ShowOnlineOrderHandler(db.uow).handle(order_id)
        assert dto.status == "confirmed"
        assert len(dto.history) == 1
        assert "confirmed (admin)" in dto.history[0]
