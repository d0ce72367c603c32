"""
Logging builder: assemble a dictConfig mapping from Settings and apply it.

    setup_logging(get_settings())

What gets wired:

| Component  | Entries                                                            |
| ---------- | ------------------------------------------------------------------ |
| formatters | "standard" (colored text in development, plain text otherwise), "json" |
| filters    | "request_id" (correlation id from the contextvar), "redact"        |
| handlers   | "console" always; "file" + "error_file" when writing to LOG_DIR,   |
|            | "error_console" otherwise                                          |
| loggers    | root, uvicorn.error, uvicorn.access, sqlalchemy.engine, crudkit    |

File logging is enabled only when LOG_TO_STDOUT is false and LOG_DIR is set.
SQL statements are logged at INFO only when ENABLE_SQL_LOGGING is true, since
they may carry row values.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

from crudkit.config.settings import Settings
from crudkit.utils.logging import get_project_name

from .filters import RedactFilter, RequestIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"


def writes_to_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """Build the dictConfig mapping for `settings`. Pure: no side effects."""
    use_color = settings.LOG_FORMAT == "text" and settings.ENV == "development"

    formatters = {
        "standard": {
            "()": ColorFormatter if use_color else logging.Formatter,
            "format": TEXT_FORMAT,
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default="crudkit"),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if writes_to_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    handler_names = list(handlers.keys())

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": handler_names,
                "level": settings.LOG_LEVEL,
            },
            "crudkit": {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "handlers": handler_names,
                "level": settings.LOG_LEVEL,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration. Safe to call more than once (tests and
    app factories do); each call replaces the previous handlers.
    """
    if writes_to_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    # Records logged straight on the root logger get a request_id too
    root = logging.getLogger()
    if not any(isinstance(f, RequestIdFilter) for f in root.filters):
        root.addFilter(RequestIdFilter())


__all__ = ["TEXT_FORMAT", "make_dict_config", "setup_logging", "writes_to_files"]
