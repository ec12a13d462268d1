"""Application service: Update Online Order Status use case.

Enforces the online transition graph.  Two edges move stock:

* ``pending_confirmation -> confirmed`` commits the order's stock, exactly
  like the dedicated confirm action;
* ``confirmed|preparing -> cancelled`` puts the committed stock back.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import parse_choice
from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.online_order import OnlineOrderStatus
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory
from backoffice.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class UpdateOnlineOrderStatusHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        order_id: str,
        new_status: str,
        updated_by: str,
        notes: str | None = None,
    ) -> None:
        target = parse_choice(OnlineOrderStatus, new_status, "status")

        with database_errors("Could not update the online order status"):
            with self._uow_factory() as uow:
                order = uow.online_orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Online order {order_id} not found")

                had_stock = order.has_committed_stock
                previous = order.status
                order.transition_to(target, updated_by, notes)

                stock = StockReservationService(uow.products)
                if target == OnlineOrderStatus.CONFIRMED:
                    stock.validate_availability(order.items)
                    stock.commit_reduction(order.items)
                elif target == OnlineOrderStatus.CANCELLED and had_stock:
                    stock.restore_quantity(order.items)

                uow.online_orders.save(order)
                uow.commit()

        logger.info(
            "Online order %s status %s -> %s by %s",
            order.order_number,
            previous.value,
            target.value,
            updated_by,
        )
