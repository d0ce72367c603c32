# exceptions/
# ├── base.py                  # ResponseError family + DefaultError (what the client sees)
# ├── integrity_classifier.py  # IntegrityError -> ConstraintKind (internal tag)
# └── mapper.py                # ConstraintKind -> app-level exception, db_error_handler()

from .base import (
    DETAIL_FIELD,
    ResponseError,
    NotFoundError,
    AlreadyExistsError,
    OperationNotSupportedError,
    DefaultError,
)

__all__ = [
    "DETAIL_FIELD",
    "ResponseError",
    "NotFoundError",
    "AlreadyExistsError",
    "OperationNotSupportedError",
    "DefaultError",
]
