"""
Map storage failures to app-level exceptions.

Repositories wrap their writes in `db_error_handler`, which rolls the session
back and re-raises:

| Storage failure                     | Raised                |
| ----------------------------------- | --------------------- |
| unique violation (IntegrityError)   | `AlreadyExistsError`  |
| any other IntegrityError            | `DefaultError`        |
| any other SQLAlchemyError           | `DefaultError`        |

Raw driver messages are logged at DEBUG only and never reach the client.
"""

import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import ConstraintKind, classify_integrity_error
from .base import AlreadyExistsError, DefaultError

logger = logging.getLogger(__name__)


def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """Translate an IntegrityError into AlreadyExistsError or DefaultError and raise it."""
    kind, constraint_name = classify_integrity_error(exc)
    model_part = model_name or "Record"

    if kind is ConstraintKind.UNIQUE:
        # Expected client-level scenario, INFO without stack trace
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "constraint": constraint_name},
        )
        raise AlreadyExistsError(f"{model_part} already exists") from exc

    raw = str(exc.orig) if exc.orig is not None else str(exc)
    logger.warning(
        "mapper.integrity_violation",
        extra={"model": model_part, "kind": kind.value, "constraint": constraint_name},
    )
    logger.debug("mapper.integrity_raw", extra={"model": model_part, "raw": raw})
    raise DefaultError(f"{model_part} violates a {kind.value} constraint") from exc


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise IntegrityError ...
    """
    try:
        yield
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except SQLAlchemyError as exc:
        await _safe_rollback(db, model_name)
        logger.exception("mapper.unexpected_db_error", extra={"model": model_name})
        raise DefaultError(f"Failed to operate on {model_name or 'database'}") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.exception("mapper.rollback_failed", extra={"model": model_name})
