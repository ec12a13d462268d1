"""Tests for the POS and online order listings."""

from datetime import date, datetime, timezone

import pytest

from backoffice.application.create_online_order import CreateOnlineOrderHandler
from backoffice.application.create_order import CreateOrderHandler
from backoffice.application.customer_directory import CustomerDirectory
from backoffice.application.dto import CustomerSpec, OrderItemSpec
from backoffice.application.list_orders import ListOnlineOrdersHandler, ListOrdersHandler
from backoffice.application.reject_online_order import RejectOnlineOrderHandler
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.order import OrderStatus
from tests.fakes import FakeDatabase, FakeEmailNotifier, make_product


def _db() -> FakeDatabase:
    return FakeDatabase([make_product("p1", "Shirt", stock=50, price="10000")])


def _dated(orders: dict, order_id: str, day: int) -> None:
    orders[order_id].created_at = datetime(2025, 3, day, 15, 0, tzinfo=timezone.utc)


class TestListOrders:

    def _setup(self):
        db = _db()
        create = CreateOrderHandler(db.uow, CustomerDirectory(db.uow))
        first = create.handle(CustomerSpec(name="A"), [OrderItemSpec("p1", 1)], payment_status="paid")
        second = create.handle(CustomerSpec(name="B"), [OrderItemSpec("p1", 2)])
        third = create.handle(CustomerSpec(name="C"), [OrderItemSpec("p1", 3)], payment_status="paid")
        _dated(db.orders, first.id, 1)
        _dated(db.orders, second.id, 2)
        _dated(db.orders, third.id, 3)
        return db, [first.id, second.id, third.id]

    def test_newest_first(self):
        db, ids = self._setup()

        listed = ListOrdersHandler(db.uow).handle()

        assert [dto.id for dto in listed] == list(reversed(ids))

    def test_status_filter(self):
        db, ids = self._setup()
        db.orders[ids[1]].status = OrderStatus.DELIVERED

        listed = ListOrdersHandler(db.uow).handle(status="delivered")

        assert [dto.id for dto in listed] == [ids[1]]

    def test_payment_and_date_filters(self):
        db, ids = self._setup()

        listed = ListOrdersHandler(db.uow).handle(
            payment_status="paid", date_from=date(2025, 3, 2), date_to=date(2025, 3, 3)
        )

        assert [dto.id for dto in listed] == [ids[2]]

    def test_limit(self):
        db, ids = self._setup()

        listed = ListOrdersHandler(db.uow).handle(limit=2)

        assert [dto.id for dto in listed] == [ids[2], ids[1]]

    def test_unknown_status(self):
        db, _ = self._setup()

        with pytest.raises(ValidationError, match="Invalid order status"):
            ListOrdersHandler(db.uow).handle(status="lost")


class TestListOnlineOrders:

    def _setup(self):
        db = _db()
        create = CreateOnlineOrderHandler(db.uow, FakeEmailNotifier())
        shopper = CustomerSpec(name="Luis", phone="300")
        ids = [create.handle(shopper, [OrderItemSpec("p1", n)]).id for n in (1, 2, 3)]
        for day, order_id in enumerate(ids, start=1):
            _dated(db.online_orders, order_id, day)
        RejectOnlineOrderHandler(db.uow).handle(ids[1], "fraud", "admin")
        return db, ids

    def test_pending_confirmation_only(self):
        db, ids = self._setup()

        listed = ListOnlineOrdersHandler(db.uow).handle(status="pending_confirmation")

        assert [dto.id for dto in listed] == [ids[2], ids[0]]
        assert {dto.status for dto in listed} == {"pending_confirmation"}

    def test_all_newest_first(self):
        db, ids = self._setup()

        listed = ListOnlineOrdersHandler(db.uow).handle()

        assert [dto.id for dto in listed] == [ids[2], ids[1], ids[0]]

    def test_unknown_status(self):
        db, _ = self._setup()

        with pytest.raises(ValidationError, match="Invalid online order status"):
            ListOnlineOrdersHandler(db.uow).handle(status="lost")
