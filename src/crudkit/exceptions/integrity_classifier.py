"""
Classify SQLAlchemy IntegrityErrors into constraint kinds.

The result is an internal tag only; mapper.py turns it into an app-level
exception (`AlreadyExistsError` or `DefaultError`).
"""

import logging
from enum import Enum

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ConstraintKind(str, Enum):
    UNIQUE = "unique"
    NOT_NULL = "not_null"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
PGCODE_TO_KIND = {
    "23505": ConstraintKind.UNIQUE,
    "23502": ConstraintKind.NOT_NULL,
    "23503": ConstraintKind.FOREIGN_KEY,
    "23514": ConstraintKind.CHECK,
}

# Message fragments for drivers without error codes (SQLite, MySQL), checked in order
_MESSAGE_KEYWORDS = (
    (ConstraintKind.UNIQUE, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (ConstraintKind.NOT_NULL, ("not null constraint", "not null", "null value in column")),
    (ConstraintKind.FOREIGN_KEY, ("foreign key constraint", "foreign key", "is not present in table")),
    (ConstraintKind.CHECK, ("check constraint", "check failed")),
)


def _classify_from_postgres_diag(orig) -> tuple[ConstraintKind | None, str | None]:
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if not pgcode:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None

    kind = PGCODE_TO_KIND.get(pgcode)
    if kind is None:
        logger.warning(
            "integrity.unknown_pgcode",
            extra={"pgcode": pgcode, "constraint_name": constraint_name},
        )
        return ConstraintKind.UNKNOWN, constraint_name

    logger.debug(
        "integrity.postgres_diagnostic",
        extra={"pgcode": pgcode, "constraint_name": constraint_name},
    )
    return kind, constraint_name


def _classify_from_message(msg: str) -> ConstraintKind:
    normalized = (msg or "").lower()
    for kind, keywords in _MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return kind

    logger.warning("integrity.unknown_message", extra={"message_snippet": normalized[:200]})
    return ConstraintKind.UNKNOWN


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintKind, str | None]:
    """
    Return (kind, constraint_name). Postgres diagnostics are preferred;
    other drivers fall back to message heuristics (constraint name unknown).
    """
    kind, constraint_name = _classify_from_postgres_diag(exc.orig)
    if kind is not None:
        return kind, constraint_name

    return _classify_from_message(str(exc.orig) if exc.orig is not None else str(exc)), None
