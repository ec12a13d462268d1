"""Application service: Confirm Online Order use case.

The admin action that turns a storefront order into a real sale: stock is
re-validated (it may have moved since the order was placed) and committed
in the same unit of work as the status change.
"""

from __future__ import annotations

import logging

from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory
from backoffice.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class ConfirmOnlineOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str, confirmed_by: str) -> None:
        with database_errors("Could not confirm the online order"):
            with self._uow_factory() as uow:
                order = uow.online_orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Online order {order_id} not found")

                order.confirm(confirmed_by)

                stock = StockReservationService(uow.products)
                stock.validate_availability(order.items)
                stock.commit_reduction(order.items)

                uow.online_orders.save(order)
                uow.commit()

        logger.info("Confirmed online order %s by %s", order.order_number, confirmed_by)
