"""Shared handling of backing-store failures."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise SQLAlchemy failures as :class:`StoreUnavailableError`.

    Domain errors raised inside the block pass through untouched, so reads
    never degrade into empty results when the database misbehaves.
    """

    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure while trying to %s", action)
        raise StoreUnavailableError(f"Unable to {action}") from exc


__all__ = ["store_errors"]
