"""
FastAPI exception handlers that turn service/controller failures into HTTP responses.

The mapping lives in one place, `error_response()`:

| Exception                  | Status | Body                                        |
| -------------------------- | ------ | ------------------------------------------- |
| DefaultError               | 409    | text/plain "Error handler: \\n<message>"     |
| NotFoundError              | 404    | error envelope, one detail ("Detail", id)   |
| AlreadyExistsError         | 403    | error envelope, one detail                  |
| OperationNotSupportedError | 405    | error envelope, one detail                  |
| RequestValidationError     | 422    | error envelope, one detail per bad field    |

The handlers registered by `register_exception_handlers()` only log and
delegate to it. Anything else is left to FastAPI's default 500 handling.

How to use:
    app = FastAPI()
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from crudkit.exceptions.base import DefaultError, ResponseError
from crudkit.schemas.envelope import APIResponse, ErrorDetail

logger = logging.getLogger(__name__)

DEFAULT_ERROR_PREFIX = "Error handler: \n"


def validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    """
    One entry per failed field. `field` is the dotted location without the
    leading "body"/"query"/"path" segment, or None when the whole body is invalid.
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "cookie"):
            loc = loc[1:]
        details.append(ErrorDetail(field=".".join(loc) or None, message=error.get("msg", "Invalid value")))
    return details


def error_response(exc: Exception) -> Response:
    """Build the HTTP response for a known failure kind."""
    if isinstance(exc, DefaultError):
        return PlainTextResponse(DEFAULT_ERROR_PREFIX + exc.message, status_code=status.HTTP_409_CONFLICT)
    if isinstance(exc, ResponseError):
        return JSONResponse(status_code=exc.http_status(), content=exc.to_envelope().to_content())
    if isinstance(exc, RequestValidationError):
        envelope = APIResponse.failure(validation_details(exc))
        return JSONResponse(status_code=422, content=envelope.to_content())
    raise TypeError(f"No error response defined for {type(exc).__name__}")


async def default_error_handler(request: Request, exc: DefaultError) -> Response:
    # Uncategorized: keep the traceback for triage
    logger.warning(
        "DefaultError for %s %s: %s", request.method, request.url, exc.message, exc_info=exc
    )
    return error_response(exc)


async def response_error_handler(request: Request, exc: ResponseError) -> Response:
    logger.info("%s for %s %s: %s", exc.name, request.method, request.url, exc.message)
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    logger.info("RequestValidationError for %s %s: errors=%d", request.method, request.url, len(exc.errors()))
    return error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DefaultError, default_error_handler)
    app.add_exception_handler(ResponseError, response_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
