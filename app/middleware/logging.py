"""Structured JSON request logging."""

import json
import logging
import sys
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Response headers copied into the log line: header -> (log key, converter)
_CONTEXT_HEADERS: Dict[str, Any] = {
    "X-Search-Mode": ("search_mode", str),
    "X-Result-Count": ("result_count", int),
    "X-Cache-Hit": ("cache_hit", lambda v: v == "true"),
}


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout as bare messages (the middleware writes JSON)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )


def _level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one JSON line per request.

    Fields: request id, method, path, status code, processing time, client IP,
    plus search mode, result count and stats cache hits when a route reports
    them through response headers.

    Never logged: request bodies, uploaded file contents, search queries
    (the query string is excluded from ``path``), credentials.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id: str = getattr(request.state, "request_id", None) or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        log_data: Dict[str, Any] = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "user_ip": request.client.host if request.client else "unknown",
        }

        try:
            response = await call_next(request)
        except Exception as e:
            log_data.update({
                "status_code": 500,
                "processing_time_ms": _elapsed_ms(start_time),
                "error": str(e),
                "error_type": type(e).__name__,
                "message": f"Request failed: {request.method} {request.url.path}",
            })
            logger.error(json.dumps(log_data, ensure_ascii=False), exc_info=True)
            raise

        log_data["status_code"] = response.status_code
        log_data["processing_time_ms"] = _elapsed_ms(start_time)

        for header, (key, convert) in _CONTEXT_HEADERS.items():
            value = _header_value(response, header, convert)
            if value is not None:
                log_data[key] = value

        logger.log(_level_for_status(response.status_code), json.dumps(log_data, ensure_ascii=False))

        response.headers["X-Request-ID"] = request_id
        return response


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


def _header_value(response: Response, header: str, convert: Callable[[str], Any]) -> Optional[Any]:
    raw = response.headers.get(header)
    if raw is None:
        return None
    try:
        return convert(raw)
    except (TypeError, ValueError):
        return None  # malformed
