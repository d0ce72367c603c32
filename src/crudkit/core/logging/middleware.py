"""
Request ID middleware.

Each request gets a correlation id: the incoming `X-Request-ID` header when it
is a valid UUID, otherwise a fresh UUID4. The id is stored in the contextvar
read by RequestIdFilter for the duration of the request and echoed back in
the response header.

    app.add_middleware(RequestIDMiddleware)
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def resolve_request_id(incoming: str | None) -> str:
    """Accept only UUID-shaped ids from clients; anything else is replaced."""
    if incoming:
        try:
            return str(uuid.UUID(incoming))
        except ValueError:
            logger.debug("http.request_id.rejected", extra={"length": len(incoming)})
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            logger.info(
                "http.request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                },
            )
            return response
        finally:
            reset_request_id(token)
