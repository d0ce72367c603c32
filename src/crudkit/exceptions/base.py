"""
Exceptions raised by the service and controller layers.

Two families:

- `ResponseError` and its subclasses: typed, expected failures. Each one knows
  its HTTP status (`http_status()`) and how to render itself as an error
  envelope (`to_envelope()`), so the HTTP boundary only has to match the kind
  once (see api/v1/error_handlers.py).

- `DefaultError`: the uncategorized failure. It is not a `ResponseError` and is
  rendered as plain text with 409 Conflict.
"""

from crudkit.schemas.envelope import APIResponse, ErrorDetail

# Field name used in the single error entry produced for typed failures.
DETAIL_FIELD = "Detail"


class ResponseError(Exception):
    """
    Base class for failures that are reported to the client as an error envelope.

    - message: human-friendly message (safe to show to clients)
    - name: short identifier of the failure, defaults to the class name
    - error_code: canonical code used to pick the HTTP status
    """

    # canonical error_code -> HTTP status
    ERROR_CODE_TO_STATUS = {
        "not_found": 404,
        "already_exists": 403,
        "operation_not_supported": 405,
    }

    error_code: str | None = None

    def __init__(self, message: str, *, name: str | None = None):
        super().__init__(message)
        self.message = message
        self.name = name or type(self).__name__

    def __str__(self) -> str:
        return self.message

    def http_status(self) -> int:
        """
        HTTP status for this error, looked up from `error_code`.
        Unknown or missing codes fall back to 400.
        """
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400

    def to_envelope(self) -> APIResponse:
        """Error envelope with one detail entry carrying the message."""
        return APIResponse.failure([ErrorDetail(field=DETAIL_FIELD, message=self.message)])


class NotFoundError(ResponseError):
    """No entity exists for the requested ID. The message is the ID itself."""

    error_code = "not_found"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class AlreadyExistsError(ResponseError):
    """An equal entity is already stored (duplicate create)."""

    error_code = "already_exists"

    def __init__(self, message: str = "Entity already exists"):
        super().__init__(message)


class OperationNotSupportedError(ResponseError):
    """The HTTP verb is disabled for this entity type."""

    error_code = "operation_not_supported"

    def __init__(self, message: str = "Operation not supported"):
        super().__init__(message)


class DefaultError(RuntimeError):
    """Uncategorized failure, rendered as a plain-text 409."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


__all__ = [
    "DETAIL_FIELD",
    "ResponseError",
    "NotFoundError",
    "AlreadyExistsError",
    "OperationNotSupportedError",
    "DefaultError",
]
