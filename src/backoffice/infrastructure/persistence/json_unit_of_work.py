"""Unit of work over the JSON document store.

A ``JsonSession`` loads the store into memory the first time a repository
touches it.  Repositories read and write those in-memory documents only;
``commit()`` writes everything back in one step when anything changed and
``rollback()`` drops it.
"""

from __future__ import annotations

import logging

from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from backoffice.infrastructure.persistence.json_document_store import (
    JsonDocumentStore,
)
from backoffice.infrastructure.persistence.json_online_order_repository import (
    JsonOnlineOrderRepository,
)
from backoffice.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from backoffice.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

logger = logging.getLogger(__name__)


class JsonSession:

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._collections: dict[str, list[dict]] | None = None
        self._dirty: set[str] = set()

    def documents(self, collection: str) -> list[dict]:
        if self._collections is None:
            self._collections = self._store.load()
        return self._collections.setdefault(collection, [])

    def mark_dirty(self, collection: str) -> None:
        self._dirty.add(collection)

    def flush(self) -> None:
        if self._dirty and self._collections is not None:
            self._store.write(self._collections)
            logger.debug("Committed %s", ", ".join(sorted(self._dirty)))
        self._dirty.clear()

    def discard(self) -> None:
        self._collections = None
        self._dirty.clear()


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._session: JsonSession | None = None

    def __enter__(self) -> JsonUnitOfWork:
        self._store.acquire()
        self._session = JsonSession(self._store)
        self.products = JsonProductRepository(self._session)
        self.orders = JsonOrderRepository(self._session)
        self.online_orders = JsonOnlineOrderRepository(self._session)
        self.customers = JsonCustomerRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._session = None
            self._store.release()

    def commit(self) -> None:
        if self._session is not None:
            self._session.flush()

    def rollback(self) -> None:
        if self._session is not None:
            self._session.discard()
