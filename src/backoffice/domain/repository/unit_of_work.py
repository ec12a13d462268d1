"""Abstract unit of work: one database transaction.

Every stock-affecting operation runs inside a single unit of work::

    with uow_factory() as uow:
        ...read, validate, mutate, save through uow.products / uow.orders...
        uow.commit()

Leaving the block without ``commit()`` (including via an exception) rolls
back every change made through the repositories.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from backoffice.domain.repository.customer_repository import CustomerRepository
from backoffice.domain.repository.online_order_repository import (
    OnlineOrderRepository,
)
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):
    products: ProductRepository
    orders: OrderRepository
    online_orders: OnlineOrderRepository
    customers: CustomerRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change of this unit of work durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes. A no-op after ``commit()``."""


UnitOfWorkFactory = Callable[[], UnitOfWork]
