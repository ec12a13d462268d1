"""Application service: Create Order use case (POS).

Stock is committed at creation time.  The whole flow runs in one unit of
work:

1. Build the customer snapshot (upserting the Customer when an identifier
   is given).
2. Build line items with *current* product data (snapshot).
3. Validate availability for every line, then commit the reduction.
4. Persist the order.

Purchase statistics are updated after commit and never fail the order.
"""

from __future__ import annotations

import logging

from backoffice.application.customer_directory import CustomerDirectory
from backoffice.application.dto import (
    CustomerSpec,
    OrderDTO,
    OrderItemSpec,
    order_to_dto,
    parse_choice,
)
from backoffice.application.errors import database_errors
from backoffice.application.line_items import build_line_items
from backoffice.domain.model.identifiers import OrderNumberGenerator
from backoffice.domain.model.order import (
    CustomerSnapshot,
    Order,
    PaymentMethod,
    PaymentStatus,
)
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork, UnitOfWorkFactory
from backoffice.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        customers: CustomerDirectory,
        order_numbers: OrderNumberGenerator | None = None,
        default_state: str = "Huila",
        default_country: str = "Colombia",
    ) -> None:
        self._uow_factory = uow_factory
        self._customers = customers
        self._order_numbers = order_numbers or OrderNumberGenerator("ORD")
        self._default_state = default_state
        self._default_country = default_country

    def handle(
        self,
        customer: CustomerSpec,
        item_specs: list[OrderItemSpec],
        tax: str | None = None,
        discount: str | None = None,
        shipping: str | None = None,
        payment_method: str = "cash",
        payment_status: str = "pending",
        internal_notes: str = "",
        created_by: str | None = None,
    ) -> OrderDTO:
        """Create a POS order and take its stock."""
        with database_errors("Could not create the order"):
            with self._uow_factory() as uow:
                snapshot = self._snapshot(uow, customer)
                order = Order.create(
                    order_number=self._order_numbers.next(),
                    customer=snapshot,
                    items=build_line_items(uow.products, item_specs),
                    tax=Money.of(tax) if tax else None,
                    discount=Money.of(discount) if discount else None,
                    shipping=Money.of(shipping) if shipping else None,
                    payment_method=parse_choice(PaymentMethod, payment_method, "payment method"),
                    payment_status=parse_choice(PaymentStatus, payment_status, "payment status"),
                    notes=customer.notes,
                    internal_notes=internal_notes,
                    created_by=created_by,
                )

                stock = StockReservationService(uow.products)
                stock.validate_availability(order.items)
                stock.commit_reduction(order.items)

                uow.orders.save(order)
                uow.commit()

        logger.info("Created order %s (total %s)", order.order_number, order.total)

        if order.customer.customer_id:
            self._customers.update_purchase_stats(order.customer.customer_id, order.total)

        return order_to_dto(order)

    # --- Customer snapshot ----------------------------------------------------

    def _snapshot(self, uow: UnitOfWork, spec: CustomerSpec) -> CustomerSnapshot:
        snapshot = CustomerSnapshot(
            name=spec.name.strip(),
            email=spec.email.strip().lower(),
            phone=spec.phone,
            document_type=spec.document_type,
            document_number=spec.document_number,
            street=spec.address,
            city=spec.city,
            state=spec.state or self._default_state,
            zip_code=spec.zip_code,
            country=self._default_country,
            notes=spec.notes,
        )
        if not spec.identifier:
            return snapshot

        try:
            record = self._customers.create_or_update(spec, uow)
        except Exception as exc:
            logger.warning(
                "Could not create/update customer %s: %s", spec.identifier, exc, exc_info=True
            )
            return snapshot

        snapshot.customer_id = record.id
        snapshot.name = record.full_name
        snapshot.email = record.email or snapshot.email
        snapshot.phone = record.phone or snapshot.phone
        snapshot.document_type = record.document_type
        snapshot.document_number = record.document_number
        address = record.primary_address
        if address is not None:
            snapshot.street = address.street
            snapshot.city = address.city
            snapshot.state = address.state
            snapshot.zip_code = address.zip_code
            snapshot.country = address.country
        return snapshot
