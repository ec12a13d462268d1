"""JSON-document implementation of CustomerRepository."""

from __future__ import annotations

from decimal import Decimal

from backoffice.domain.exceptions import DuplicateKeyError
from backoffice.domain.model.customer import (
    Address,
    Customer,
    CustomerStatus,
    PurchaseStats,
)
from backoffice.domain.repository.customer_repository import CustomerRepository
from backoffice.infrastructure.persistence.serialization import dt_from_raw, dt_to_raw

COLLECTION = "customers"


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, session) -> None:
        self._session = session

    def get_by_id(self, customer_id: str) -> Customer | None:
        raw = self._find("id", customer_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_identifier(self, identifier: str) -> Customer | None:
        raw = self._find("identifier", identifier)
        return self._to_domain(raw) if raw is not None else None

    def save(self, customer: Customer) -> None:
        owner = self._find("identifier", customer.identifier)
        if owner is not None and owner["id"] != customer.id:
            raise DuplicateKeyError(f"Customer identifier {customer.identifier} already exists")

        docs = self._docs()
        for i, raw in enumerate(docs):
            if raw["id"] == customer.id:
                docs[i] = self._to_raw(customer)
                break
        else:
            docs.append(self._to_raw(customer))
        self._session.mark_dirty(COLLECTION)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(customer: Customer) -> dict:
        stats = customer.purchase_stats
        return {
            "id": customer.id,
            "identifier": customer.identifier,
            "first_name": customer.first_name,
            "last_name": customer.last_name,
            "phone": customer.phone,
            "email": customer.email,
            "document_type": customer.document_type,
            "document_number": customer.document_number,
            "addresses": [vars(a).copy() for a in customer.addresses],
            "purchase_stats": {
                "total_orders": stats.total_orders,
                "total_spent": str(stats.total_spent),
                "first_order_date": dt_to_raw(stats.first_order_date),
                "last_order_date": dt_to_raw(stats.last_order_date),
                "average_order_value": str(stats.average_order_value),
            },
            "status": customer.status.value,
            "notes": customer.notes,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Customer:
        stats = raw.get("purchase_stats") or {}
        return Customer(
            id=raw["id"],
            identifier=raw["identifier"],
            first_name=raw["first_name"],
            last_name=raw.get("last_name", ""),
            phone=raw["phone"],
            email=raw.get("email", ""),
            document_type=raw.get("document_type", "CC"),
            document_number=raw.get("document_number", ""),
            addresses=[Address(**a) for a in raw.get("addresses", [])],
            purchase_stats=PurchaseStats(
                total_orders=stats.get("total_orders", 0),
                total_spent=Decimal(stats.get("total_spent", "0")),
                first_order_date=dt_from_raw(stats.get("first_order_date")),
                last_order_date=dt_from_raw(stats.get("last_order_date")),
                average_order_value=Decimal(stats.get("average_order_value", "0")),
            ),
            status=CustomerStatus(raw.get("status", "active")),
            notes=raw.get("notes", ""),
        )

    def _docs(self) -> list[dict]:
        return self._session.documents(COLLECTION)

    def _find(self, key: str, value: str) -> dict | None:
        for raw in self._docs():
            if raw.get(key) == value:
                return raw
        return None
