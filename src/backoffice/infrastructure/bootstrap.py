"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from backoffice.application.customer_directory import CustomerDirectory
from backoffice.application.notifications import EmailNotifier
from backoffice.config import Config
from backoffice.domain.model.order import pos_status_policy
from backoffice.domain.model.status_policy import StatusPolicy
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory
from backoffice.infrastructure.notifications.file_email_notifier import (
    FileEmailNotifier,
)
from backoffice.infrastructure.persistence.json_document_store import (
    JsonDocumentStore,
)
from backoffice.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def config() -> Config:
    return Config()


@lru_cache(maxsize=None)
def _store(data_dir: Path) -> JsonDocumentStore:
    # One store (and lock) per data directory for the whole process.
    return JsonDocumentStore(data_dir)


def uow_factory(cfg: Config | None = None) -> UnitOfWorkFactory:
    store = _store((cfg or config()).DATA_DIR.resolve())
    return lambda: JsonUnitOfWork(store)


def customer_directory(cfg: Config | None = None) -> CustomerDirectory:
    cfg = cfg or config()
    return CustomerDirectory(
        uow_factory(cfg),
        default_state=cfg.DEFAULT_STATE,
        default_country=cfg.DEFAULT_COUNTRY,
    )


def email_notifier(cfg: Config | None = None) -> EmailNotifier:
    cfg = cfg or config()
    return FileEmailNotifier(cfg.outbox_dir, sender=cfg.EMAIL_SENDER)


def status_policy(cfg: Config | None = None) -> StatusPolicy:
    return pos_status_policy((cfg or config()).POS_STATUS_POLICY)
