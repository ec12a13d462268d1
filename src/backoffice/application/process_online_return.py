"""Application service: Process Online Return use case.

Only delivered orders can be returned.  Stock goes back unless the caller
opts out (e.g. the goods came back damaged).
"""

from __future__ import annotations

import logging

from backoffice.application.dto import ReturnSpec
from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.identifiers import valid_id_or_none
from backoffice.domain.model.order import ReturnInfo
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory
from backoffice.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class ProcessOnlineReturnHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str, spec: ReturnSpec, processed_by: str | None = None) -> None:
        with database_errors("Could not process the online return"):
            with self._uow_factory() as uow:
                order = uow.online_orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Online order {order_id} not found")

                if spec.refund_amount is not None:
                    refund = Money.of(spec.refund_amount)
                else:
                    refund = order.total if spec.refund_requested else Money.zero()

                order.mark_returned(
                    ReturnInfo(
                        reason=spec.reason,
                        notes=spec.notes,
                        refund_requested=spec.refund_requested,
                        refund_amount=refund,
                        exchange_product_id=spec.exchange_product_id,
                        processed_by=valid_id_or_none(processed_by),
                    )
                )
                if spec.restore_stock:
                    StockReservationService(uow.products).restore_quantity(order.items)

                uow.online_orders.save(order)
                uow.commit()

        logger.info("Processed return for online order %s", order.order_number)
