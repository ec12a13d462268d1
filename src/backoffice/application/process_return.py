"""Application service: Process Return use case (POS)."""

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


class ProcessReturnHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str, spec: ReturnSpec, processed_by: str | None = None) -> None:
        """Record a return and, unless told otherwise, put the stock back.

        Cancelled and already-returned orders are refused so stock is never
        restored twice for the same order.
        """
        with database_errors("Could not process the return"):
            with self._uow_factory() as uow:
                order = uow.orders.get_by_id(order_id)
                if order is None:
                    raise EntityNotFoundError(f"Order {order_id} not found")
                order.ensure_returnable()

                if spec.refund_amount is not None:
                    refund = Money.of(spec.refund_amount)
                elif spec.refund_requested:
                    refund = order.total
                else:
                    refund = Money.zero()

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

                uow.orders.save(order)
                uow.commit()

        logger.info("Processed return for order %s", order.order_number)
