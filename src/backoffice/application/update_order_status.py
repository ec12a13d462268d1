"""Application service: Update Order Status use case (POS).

The status policy is injected.  By default it is the flat allow-list: any
legal status may be set from any other, which lets staff correct orders by
hand.  Status changes made here never move stock; use cancel or return for
that.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import parse_choice
from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.order import OrderStatus, pos_status_policy
from backoffice.domain.model.status_policy import StatusPolicy
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        policy: StatusPolicy | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._policy = policy or pos_status_policy()

    def handle(self, order_id: str, status: str, updated_by: str | None = None) -> None:
        target = parse_choice(OrderStatus, status, "status")

        with database_errors("Could not update the order status"):
            with self._uow_factory() as uow:
                order = uow.orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Order {order_id} not found")
                previous = order.status
                order.change_status(target, self._policy, updated_by)
                uow.orders.save(order)
                uow.commit()

        logger.info(
            "Order %s status %s -> %s", order.order_number, previous.value, target.value
        )
