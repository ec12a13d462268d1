"""Application service: Cancel Order use case (POS).

POS orders took their stock at creation, so cancelling puts every line
back.  Orders that are already cancelled, delivered, returned or refunded
cannot be cancelled.
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


class CancelOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str, reason: str = "", cancelled_by: str | None = None) -> None:
        with database_errors("Could not cancel the order"):
            with self._uow_factory() as uow:
                order = uow.orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Order {order_id} not found")

                order.cancel(reason, cancelled_by)
                StockReservationService(uow.products).restore_quantity(order.items)

                uow.orders.save(order)
                uow.commit()

        logger.info("Cancelled order %s: %s", order.order_number, reason)
