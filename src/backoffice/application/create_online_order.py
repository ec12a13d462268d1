"""Application service: Create Online Order use case.

Storefront orders are placed in ``pending_confirmation``.  Stock is
validated but NOT taken: it is committed later, when an admin confirms the
order.  The confirmation email goes out after commit and its failure never
fails the order.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import (
    CustomerSpec,
    OrderDTO,
    OrderItemSpec,
    online_order_to_dto,
)
from backoffice.application.errors import database_errors
from backoffice.application.line_items import build_line_items
from backoffice.application.notifications import EmailNotifier
from backoffice.domain.model.identifiers import OrderNumberGenerator
from backoffice.domain.model.online_order import (
    DELIVERY_TYPES,
    PAYMENT_METHODS,
    OnlineCustomer,
    OnlineOrder,
)
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory
from backoffice.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class CreateOnlineOrderHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        notifier: EmailNotifier,
        order_numbers: OrderNumberGenerator | None = None,
        default_state: str = "Huila",
    ) -> None:
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._order_numbers = order_numbers or OrderNumberGenerator("WEB")
        self._default_state = default_state

    def handle(
        self,
        customer: CustomerSpec,
        item_specs: list[OrderItemSpec],
        discount: str | None = None,
        shipping: str | None = None,
        delivery_type: str = DELIVERY_TYPES[0],
        payment_method: str = PAYMENT_METHODS[0],
        internal_notes: str = "",
    ) -> OrderDTO:
        with database_errors("Could not create the online order"):
            with self._uow_factory() as uow:
                order = OnlineOrder.create(
                    order_number=self._order_numbers.next(),
                    customer=OnlineCustomer(
                        name=customer.name.strip(),
                        phone=customer.phone,
                        email=customer.email.strip().lower(),
                        address=customer.address,
                        city=customer.city,
                        state=customer.state or self._default_state,
                        notes=customer.notes,
                    ),
                    items=build_line_items(uow.products, item_specs),
                    discount_amount=Money.of(discount) if discount else None,
                    shipping_cost=Money.of(shipping) if shipping else None,
                    delivery_type=delivery_type,
                    payment_method=payment_method,
                    internal_notes=internal_notes,
                )

                # Checked only; the reduction happens on confirmation.
                StockReservationService(uow.products).validate_availability(order.items)

                uow.online_orders.save(order)
                uow.commit()

        logger.info("Created online order %s awaiting confirmation", order.order_number)

        if order.customer.email:
            self._send_confirmation(order)

        return online_order_to_dto(order)

    def _send_confirmation(self, order: OnlineOrder) -> None:
        try:
            self._notifier.send_order_confirmation(order)
            with self._uow_factory() as uow:
                stored = uow.online_orders.get_by_id(order.id)  # type: ignore[arg-type]
                if stored is not None:
                    stored.email_sent = True
                    uow.online_orders.save(stored)
                    uow.commit()
            order.email_sent = True
        except Exception:
            logger.warning(
                "Could not send confirmation email for order %s", order.order_number, exc_info=True
            )
