# src/crudkit/core/logging/
# ├─ __init__.py     # public API: setup_logging, set_request_id, RequestIDMiddleware
# ├─ builder.py      # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py   # JsonFormatter, ColorFormatter
# ├─ filters.py      # RequestIdFilter, RedactFilter (+ contextvar helpers)
# ├─ handlers.py     # handler dict factories (console / rotating files)
# └─ middleware.py   # Starlette middleware setting the request id


from .builder import make_dict_config, setup_logging
from .filters import get_request_id, reset_request_id, set_request_id, RedactFilter, RequestIdFilter
from .middleware import RequestIDMiddleware

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "RequestIdFilter",
    "RedactFilter",
    "RequestIDMiddleware",
]
