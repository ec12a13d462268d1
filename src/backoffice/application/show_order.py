"""Application service: Show Order use case (query)."""

from __future__ import annotations

from backoffice.application.dto import OrderDTO, order_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory


class ShowOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id) or uow.orders.get_by_order_number(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return order_to_dto(order)
