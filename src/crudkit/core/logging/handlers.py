"""
Handler factories for logging.dictConfig.

Each factory returns a plain dict; the formatter and filter names it references
("standard", "json", "request_id", "redact") are declared by builder.py.
"""

from pathlib import Path

from crudkit.config.settings import Settings

FILTERS = ["request_id", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """All records at LOG_LEVEL and above, to stdout."""
    return {
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stdout",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(FILTERS),
    }


def get_error_console_handler(settings: Settings) -> dict:
    """ERROR and above as JSON on stderr, for log collectors."""
    return {
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stderr",
        "formatter": "json",
        "level": "ERROR",
        "filters": list(FILTERS),
    }


def _rotating_file(settings: Settings, filename: str, *, formatter: str, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "formatter": formatter,
        "level": level,
        "filters": list(FILTERS),
    }


def get_file_handler(settings: Settings) -> dict:
    return _rotating_file(settings, "crudkit.log", formatter=_formatter_name(settings), level=settings.LOG_LEVEL)


def get_error_file_handler(settings: Settings) -> dict:
    # Error files stay structured regardless of LOG_FORMAT
    return _rotating_file(settings, "errors.log", formatter="json", level="ERROR")
