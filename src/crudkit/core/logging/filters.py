"""
Logging filters.

- RequestIdFilter: stamps `record.request_id` from a contextvar set per HTTP
  request (see middleware.py). Uses contextvars so the id follows the request
  across awaits. Records logged outside a request get the sentinel "-".
- RedactFilter: masks record attributes whose name looks sensitive, so values
  passed through `extra={...}` never reach a handler in clear text.

Both filters only annotate records; they always return True.
"""

import contextvars
import logging
from logging import LogRecord

NO_REQUEST_ID = "-"
REDACTED = "***REDACTED***"

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the id for the current context. Pass the token to `reset_request_id`."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Priority: an explicit `extra={"request_id": ...}`, then the contextvar,
    then NO_REQUEST_ID.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = getattr(record, "request_id", None) or get_request_id() or NO_REQUEST_ID
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = frozenset(
        {"password", "secret", "token", "access_token", "refresh_token", "authorization", "api_key", "dsn"}
    )

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = REDACTED
        return True


__all__ = [
    "NO_REQUEST_ID",
    "REDACTED",
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "RequestIdFilter",
    "RedactFilter",
]
