"""Request ID middleware.

Every request gets an id in ``request.state.request_id`` and the
X-Request-ID response header. A caller-supplied X-Request-ID is reused when
it is a plain token, so ids can be correlated across services without letting
arbitrary header text into the JSON request logs.
"""

import re
import uuid
from collections.abc import Awaitable, Callable
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def resolve_request_id(header_value: Optional[str]) -> str:
    """Return the incoming id if it is a safe token, otherwise a new UUID4."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request.state.request_id and echoes it in the response header."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
