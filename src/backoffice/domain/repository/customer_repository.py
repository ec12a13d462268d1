"""Abstract repository for Customer aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    def get_by_id(self, customer_id: str) -> Customer | None:
        """Return a customer by its ID, or None if not found."""

    @abstractmethod
    def get_by_identifier(self, identifier: str) -> Customer | None:
        """Return the customer with this external identifier, or None."""

    @abstractmethod
    def save(self, customer: Customer) -> None:
        """Persist a new or updated customer.

        Raises DuplicateKeyError if the identifier belongs to another customer.
        """
