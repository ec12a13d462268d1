"""JSON-document implementation of OrderRepository (POS orders)."""

from __future__ import annotations

from backoffice.domain.exceptions import DuplicateKeyError
from backoffice.domain.model.identifiers import new_id
from backoffice.domain.model.order import (
    CustomerSnapshot,
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.infrastructure.persistence.serialization import (
    dt_from_raw,
    dt_to_raw,
    line_item_from_raw,
    line_item_to_raw,
    money_from_raw,
    money_to_raw,
    return_info_from_raw,
    return_info_to_raw,
)

COLLECTION = "orders"


class JsonOrderRepository(OrderRepository):

    def __init__(self, session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        raw = self._find("id", order_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_order_number(self, order_number: str) -> Order | None:
        raw = self._find("order_number", order_number)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._docs()]

    def save(self, order: Order) -> None:
        owner = self._find("order_number", order.order_number)
        if owner is not None and owner["id"] != order.id:
            raise DuplicateKeyError(f"Order number {order.order_number} already exists")

        if order.id is None:
            order.id = new_id()

        docs = self._docs()
        for i, raw in enumerate(docs):
            if raw["id"] == order.id:
                # The order number never changes once issued.
                order.order_number = raw["order_number"]
                docs[i] = self._to_raw(order)
                break
        else:
            docs.append(self._to_raw(order))
        self._session.mark_dirty(COLLECTION)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer": vars(order.customer).copy(),
            "items": [line_item_to_raw(item) for item in order.items],
            "tax": money_to_raw(order.tax),
            "discount": money_to_raw(order.discount),
            "shipping": money_to_raw(order.shipping),
            "status": order.status.value,
            "order_type": order.order_type,
            "delivery_type": order.delivery_type,
            "payment_method": order.payment_method.value,
            "payment_status": order.payment_status.value,
            "paid_amount": money_to_raw(order.paid_amount),
            "notes": order.notes,
            "internal_notes": order.internal_notes,
            "created_by": order.created_by,
            "updated_by": order.updated_by,
            "return_info": return_info_to_raw(order.return_info),
            "created_at": dt_to_raw(order.created_at),
            "updated_at": dt_to_raw(order.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            customer=CustomerSnapshot(**raw["customer"]),
            items=[line_item_from_raw(i) for i in raw["items"]],
            tax=money_from_raw(raw.get("tax")),
            discount=money_from_raw(raw.get("discount")),
            shipping=money_from_raw(raw.get("shipping")),
            status=OrderStatus(raw["status"]),
            order_type=raw.get("order_type", "pos"),
            delivery_type=raw.get("delivery_type", "pickup"),
            payment_method=PaymentMethod(raw.get("payment_method", "cash")),
            payment_status=PaymentStatus(raw.get("payment_status", "pending")),
            paid_amount=money_from_raw(raw.get("paid_amount")),
            notes=raw.get("notes", ""),
            internal_notes=raw.get("internal_notes", ""),
            created_by=raw.get("created_by"),
            updated_by=raw.get("updated_by"),
            return_info=return_info_from_raw(raw.get("return_info")),
            created_at=dt_from_raw(raw["created_at"]),  # type: ignore[arg-type]
            updated_at=dt_from_raw(raw["updated_at"]),  # type: ignore[arg-type]
        )

    # --- Session helpers ------------------------------------------------------

    def _docs(self) -> list[dict]:
        return self._session.documents(COLLECTION)

    def _find(self, key: str, value: str) -> dict | None:
        for raw in self._docs():
            if raw.get(key) == value:
                return raw
        return None
