"""Error boundary shared by the lifecycle handlers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from backoffice.domain.exceptions import DatabaseError, DomainException

logger = logging.getLogger(__name__)


@contextmanager
def database_errors(message: str) -> Iterator[None]:
    """Let domain errors through unchanged; wrap anything else in DatabaseError.

    The original exception is logged with its traceback and chained as the
    cause, but only *message* reaches the caller.
    """
    try:
        yield
    except DomainException:
        raise
    except Exception as exc:
        logger.exception(message)
        raise DatabaseError(message) from exc
