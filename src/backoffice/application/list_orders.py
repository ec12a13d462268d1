"""Application service: List Orders use cases (queries).

Both listings are newest first.  Unknown status values are a
ValidationError rather than an empty result.
"""

from __future__ import annotations

from datetime import date

from backoffice.application.dto import (
    OrderDTO,
    online_order_to_dto,
    order_to_dto,
    parse_choice,
)
from backoffice.domain.model.online_order import OnlineOrderStatus
from backoffice.domain.model.order import OrderStatus, PaymentStatus
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory


class ListOrdersHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        status: str | None = None,
        payment_status: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int | None = None,
    ) -> list[OrderDTO]:
        """POS orders matching every given filter; dates are inclusive."""
        wanted_status = parse_choice(OrderStatus, status, "order status") if status else None
        wanted_payment = (
            parse_choice(PaymentStatus, payment_status, "payment status") if payment_status else None
        )

        with self._uow_factory() as uow:
            orders = [
                o
                for o in uow.orders.list_all()
                if (wanted_status is None or o.status == wanted_status)
                and (wanted_payment is None or o.payment_status == wanted_payment)
                and (date_from is None or o.created_at.date() >= date_from)
                and (date_to is None or o.created_at.date() <= date_to)
            ]

        orders.sort(key=lambda o: o.created_at, reverse=True)
        return [order_to_dto(o) for o in orders[:limit]]


class ListOnlineOrdersHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, status: str | None = None, limit: int | None = None) -> list[OrderDTO]:
        wanted = parse_choice(OnlineOrderStatus, status, "online order status") if status else None

        with self._uow_factory() as uow:
            orders = [
                o for o in uow.online_orders.list_all() if wanted is None or o.status == wanted
            ]

        orders.sort(key=lambda o: o.created_at, reverse=True)
        return [online_order_to_dto(o) for o in orders[:limit]]
