"""Application service: Customer Directory.

Keeps Customer records in step with the orders placed at the counter:
creates or refreshes the customer behind an order and rolls the order
total into their purchase statistics.
"""

from __future__ import annotations

import logging

from backoffice.application.dto import CustomerSpec
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.customer import Address, Customer, CustomerStatus
from backoffice.domain.model.identifiers import new_id
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)


class CustomerDirectory:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        default_state: str = "Huila",
        default_country: str = "Colombia",
    ) -> None:
        self._uow_factory = uow_factory
        self._default_state = default_state
        self._default_country = default_country

    def create_or_update(self, spec: CustomerSpec, uow: UnitOfWork | None = None) -> Customer:
        """Upsert the customer keyed by ``spec.identifier``.

        Runs inside *uow* when given (the caller commits), otherwise in a
        unit of work of its own.
        """
        if uow is not None:
            return self._upsert(uow, spec)
        with self._uow_factory() as own:
            customer = self._upsert(own, spec)
            own.commit()
        return customer

    def update_purchase_stats(self, customer_id: str, amount: Money) -> Customer | None:
        """Add one order of *amount* to the customer's stats.

        Best-effort: failures are logged and None is returned, so an order
        flow never breaks because of statistics.
        """
        try:
            with self._uow_factory() as uow:
                customer = uow.customers.get_by_id(customer_id)
                if customer is None:
                    raise EntityNotFoundError(f"Customer {customer_id} not found")
                customer.update_purchase_stats(amount.amount)
                uow.customers.save(customer)
                uow.commit()
            return customer
        except Exception:
            logger.warning("Could not update purchase stats for customer %s", customer_id, exc_info=True)
            return None

    # --- Internal helpers -----------------------------------------------------

    def _upsert(self, uow: UnitOfWork, spec: CustomerSpec) -> Customer:
        if not spec.identifier:
            raise ValidationError("A customer identifier is required")

        first_name, last_name = self._split_name(spec)
        customer = uow.customers.get_by_identifier(spec.identifier)

        if customer is None:
            customer = Customer(
                id=new_id(),
                identifier=spec.identifier,
                first_name=first_name,
                last_name=last_name,
                phone=spec.phone,
                email=spec.email.strip().lower(),
                document_type=spec.document_type or "CC",
                document_number=spec.document_number,
            )
            logger.info("Created customer %s", spec.identifier)
        else:
            if customer.status == CustomerStatus.BLOCKED:
                raise ValidationError(f"Customer {spec.identifier} is blocked")
            customer.first_name = spec.first_name or customer.first_name
            customer.last_name = spec.last_name or customer.last_name
            customer.document_type = spec.document_type or customer.document_type
            customer.document_number = spec.document_number or customer.document_number
            customer.phone = spec.phone or customer.phone
            customer.email = spec.email.strip().lower() or customer.email

        if spec.address and spec.city and not customer.has_address(spec.address, spec.city):
            customer.add_address(
                Address(
                    street=spec.address,
                    city=spec.city,
                    state=spec.state or self._default_state,
                    zip_code=spec.zip_code,
                    country=self._default_country,
                )
            )

        uow.customers.save(customer)
        return customer

    @staticmethod
    def _split_name(spec: CustomerSpec) -> tuple[str, str]:
        parts = spec.name.split()
        first = spec.first_name or (parts[0] if parts else "")
        last = spec.last_name or " ".join(parts[1:])
        return first, last
