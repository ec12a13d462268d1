"""Application service: Reject Online Order use case.

Rejection only happens before confirmation, so no stock was ever taken and
none is touched here.
"""

from __future__ import annotations

import logging

from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class RejectOnlineOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str, reason: str, rejected_by: str) -> None:
        with database_errors("Could not reject the online order"):
            with self._uow_factory() as uow:
                order = uow.online_orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Online order {order_id} not found")
                order.reject(reason, rejected_by)
                uow.online_orders.save(order)
                uow.commit()

        logger.info("Rejected online order %s: %s", order.order_number, reason)
