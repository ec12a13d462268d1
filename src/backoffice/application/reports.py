"""Read-only reporting queries over orders and the catalog.

Nothing here mutates state; every handler opens a unit of work only to
read and lets it roll back on exit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from backoffice.application.list_products import ProductLineDTO, product_to_dto
from backoffice.domain.model.online_order import OnlineOrder, OnlineOrderStatus
from backoffice.domain.model.order import PaymentStatus
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True)
class SalesStatsDTO:
    total_sales: str
    total_orders: int
    average_order_value: str
    total_items: int


@dataclass(frozen=True)
class OnlineOrderStatsDTO:
    pending: int
    confirmed_today: int
    rejected_today: int
    pending_value: str
    confirmed_today_value: str


def _sum(orders: list) -> Money:
    total = Money.zero()
    for order in orders:
        total = total + order.total
    return total


class SalesStatsHandler:
    """Sales figures over *paid* POS orders created within a date range."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, date_from: date | None = None, date_to: date | None = None) -> SalesStatsDTO:
        with self._uow_factory() as uow:
            orders = [
                o
                for o in uow.orders.list_all()
                if o.payment_status == PaymentStatus.PAID
                and (date_from is None or o.created_at.date() >= date_from)
                and (date_to is None or o.created_at.date() <= date_to)
            ]

        total = _sum(orders)
        average = Money(total.amount / len(orders), total.currency) if orders else Money.zero()
        return SalesStatsDTO(
            total_sales=str(total),
            total_orders=len(orders),
            average_order_value=str(average),
            total_items=sum(o.item_count for o in orders),
        )


class OnlineOrderStatsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, today: date | None = None) -> OnlineOrderStatsDTO:
        today = today or datetime.now(timezone.utc).date()
        with self._uow_factory() as uow:
            orders = uow.online_orders.list_all()

        pending = [o for o in orders if o.status == OnlineOrderStatus.PENDING_CONFIRMATION]
        confirmed = [o for o in orders if self._reached_on(o, OnlineOrderStatus.CONFIRMED, today)]
        rejected = [o for o in orders if self._reached_on(o, OnlineOrderStatus.REJECTED, today)]
        return OnlineOrderStatsDTO(
            pending=len(pending),
            confirmed_today=len(confirmed),
            rejected_today=len(rejected),
            pending_value=str(_sum(pending)),
            confirmed_today_value=str(_sum(confirmed)),
        )

    @staticmethod
    def _reached_on(order: OnlineOrder, status: OnlineOrderStatus, day: date) -> bool:
        return any(
            entry.status == status and entry.timestamp.date() == day
            for entry in order.status_history
        )


class LowStockHandler:
    """Active products with some stock left but at or below their minimum."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[ProductLineDTO]:
        with self._uow_factory() as uow:
            products = uow.products.list_all()
        low = [p for p in products if p.is_active and p.is_low_stock]
        return [product_to_dto(p) for p in sorted(low, key=lambda p: p.stock)]
