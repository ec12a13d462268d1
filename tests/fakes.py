"""In-memory fakes for testing.

``FakeDatabase`` holds the committed state.  Each ``FakeUnitOfWork`` works
on deep copies of it and only writes them back on ``commit()``, so tests
can assert both on what a handler committed and on what a failed handler
rolled back.  No file I/O, no side effects.
"""

from __future__ import annotations

import copy

from backoffice.application.notifications import EmailNotifier
from backoffice.domain.exceptions import DuplicateKeyError
from backoffice.domain.model.customer import Customer
from backoffice.domain.model.identifiers import new_id
from backoffice.domain.model.online_order import OnlineOrder
from backoffice.domain.model.order import Order
from backoffice.domain.model.product import Product, VariantOption, VariantReference
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.customer_repository import CustomerRepository
from backoffice.domain.repository.online_order_repository import (
    OnlineOrderRepository,
)
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.domain.repository.unit_of_work import UnitOfWork

_COLLECTIONS = ("products", "orders", "online_orders", "customers")


def make_product(
    id: str = "p1",
    name: str = "Shirt",
    stock: int = 10,
    price: str = "50000",
    min_stock: int = 5,
    variants: dict[str, dict[str, int]] | None = None,
    is_active: bool = True,
) -> Product:
    """Build a product; *variants* maps axis -> {value: stock}."""
    return Product(
        id=id,
        name=name,
        sku=f"SKU-{id}",
        sale_price=Money.of(price),
        base_price=Money.of(price),
        stock=stock,
        min_stock=min_stock,
        references=[
            VariantReference(
                name=axis,
                options=[VariantOption(label=v, value=v, stocks=s) for v, s in options.items()],
            )
            for axis, options in (variants or {}).items()
        ],
        is_active=is_active,
    )


class FakeProductRepository(ProductRepository):

    def __init__(self, store: dict[str, Product]) -> None:
        self._store = store

    def get_by_id(self, product_id: str) -> Product | None:
        product = self._store.get(product_id)
        return copy.deepcopy(product) if product is not None else None

    def get_by_sku(self, sku: str) -> Product | None:
        for p in self._store.values():
            if p.sku == sku:
                return copy.deepcopy(p)
        return None

    def list_all(self) -> list[Product]:
        return [copy.deepcopy(p) for p in self._store.values()]

    def save(self, product: Product) -> None:
        for other in self._store.values():
            if product.sku and other.sku == product.sku and other.id != product.id:
                raise DuplicateKeyError(f"SKU {product.sku} is already in use")

        stored = self._store.get(product.id)
        if stored is None:
            self._store[product.id] = copy.deepcopy(product)
        else:
            # Only the fields the aggregate reports as changed are written.
            for name in product.modified_fields:
                setattr(stored, name, copy.deepcopy(getattr(product, name)))
        self._store[product.id].clear_modified()
        product.clear_modified()


class _FakeOrderStore:

    def __init__(self, store: dict) -> None:
        self._store = store

    def get_by_id(self, order_id: str):
        order = self._store.get(order_id)
        return copy.deepcopy(order) if order is not None else None

    def get_by_order_number(self, order_number: str):
        for order in self._store.values():
            if order.order_number == order_number:
                return copy.deepcopy(order)
        return None

    def list_all(self) -> list:
        return [copy.deepcopy(o) for o in self._store.values()]

    def save(self, order) -> None:
        for other in self._store.values():
            if other.order_number == order.order_number and other.id != order.id:
                raise DuplicateKeyError(f"Order number {order.order_number} already exists")
        if order.id is None:
            order.id = new_id()
        self._store[order.id] = copy.deepcopy(order)


class FakeOrderRepository(_FakeOrderStore, OrderRepository):
    pass


class FakeOnlineOrderRepository(_FakeOrderStore, OnlineOrderRepository):
    pass


class FakeCustomerRepository(CustomerRepository):

    def __init__(self, store: dict[str, Customer]) -> None:
        self._store = store

    def get_by_id(self, customer_id: str) -> Customer | None:
        customer = self._store.get(customer_id)
        return copy.deepcopy(customer) if customer is not None else None

    def get_by_identifier(self, identifier: str) -> Customer | None:
        for c in self._store.values():
            if c.identifier == identifier:
                return copy.deepcopy(c)
        return None

    def save(self, customer: Customer) -> None:
        for other in self._store.values():
            if other.identifier == customer.identifier and other.id != customer.id:
                raise DuplicateKeyError(f"Customer identifier {customer.identifier} already exists")
        self._store[customer.id] = copy.deepcopy(customer)


class FakeDatabase:
    """Committed state shared by every unit of work built from it."""

    def __init__(
        self,
        products: list[Product] | None = None,
        customers: list[Customer] | None = None,
    ) -> None:
        self.products: dict[str, Product] = {p.id: p for p in products or []}
        self.orders: dict[str, Order] = {}
        self.online_orders: dict[str, OnlineOrder] = {}
        self.customers: dict[str, Customer] = {c.id: c for c in customers or []}
        self.commits = 0

    def uow(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self)


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db
        self._working: dict[str, dict] = {}

    def __enter__(self) -> FakeUnitOfWork:
        self._working = {name: copy.deepcopy(getattr(self._db, name)) for name in _COLLECTIONS}
        self.products = FakeProductRepository(self._working["products"])
        self.orders = FakeOrderRepository(self._working["orders"])
        self.online_orders = FakeOnlineOrderRepository(self._working["online_orders"])
        self.customers = FakeCustomerRepository(self._working["customers"])
        return self

    def commit(self) -> None:
        for name, data in self._working.items():
            setattr(self._db, name, copy.deepcopy(data))
        self._db.commits += 1

    def rollback(self) -> None:
        self._working = {}


class FakeEmailNotifier(EmailNotifier):

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[str] = []
        self._fail = fail

    def send_order_confirmation(self, order: OnlineOrder) -> None:
        if self._fail:
            raise ConnectionError("SMTP server unavailable")
        self.sent.append(order.order_number)
