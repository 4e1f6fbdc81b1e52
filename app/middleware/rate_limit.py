"""Per-client rate limits for the document API (slowapi, in-memory storage).

Routes opt in with ``@limiter.limit(RATE_LIMITS[...])``:

- ``write``: upload, delete, seed, classify, bucket creation
- ``search``: POST /api/search
- ``read``: document, category and statistics lookups
"""

import ipaddress
import json
import logging
from functools import lru_cache
from typing import Any, List, Optional, Union

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

RATE_LIMITS = {
    "write": "10/minute",
    "search": "60/minute",
    "read": "100/minute",
}

DEFAULT_RETRY_AFTER_SECONDS = 60


@lru_cache(maxsize=8)
def parse_trusted_proxies(raw: Optional[str]) -> List[IPNetwork]:
    """Parse a comma-separated list of proxy IPs or CIDR ranges.

    Unparseable entries are logged and skipped.
    """
    networks: List[IPNetwork] = []
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.warning(f"Ignoring invalid TRUSTED_PROXIES entry: {entry}")
    return networks


def _is_trusted(ip: str, networks: List[IPNetwork]) -> bool:
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(address in network for network in networks)


def get_client_ip(request: Request) -> str:
    """
    Rate-limit key for a request.

    X-Forwarded-For is honoured only when the direct peer is a configured
    trusted proxy; otherwise any client could pick its own key.
    """
    from app.config import get_settings

    direct_ip: str = get_remote_address(request)

    networks = parse_trusted_proxies(get_settings().trusted_proxies)
    if not networks or not _is_trusted(direct_ip, networks):
        return direct_ip

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    return direct_ip


limiter = Limiter(key_func=get_client_ip, default_limits=["200/minute"])


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Turn slowapi's RateLimitExceeded into a JSON 429.

    Headers: Retry-After, X-RateLimit-Remaining (always 0) and, when known,
    X-RateLimit-Limit with the exceeded limit.
    """
    retry_after = getattr(exc, "retry_after", DEFAULT_RETRY_AFTER_SECONDS)

    error_body = {
        "detail": "Rate limit exceeded",
        "message": f"Too many requests. Please retry after {retry_after} seconds.",
        "retry_after": retry_after,
    }

    response = Response(
        content=json.dumps(error_body),
        status_code=429,
        media_type="application/json",
    )
    response.headers["Retry-After"] = str(retry_after)
    response.headers["X-RateLimit-Remaining"] = "0"

    limit_detail = getattr(exc, "detail", None)
    if limit_detail:
        response.headers["X-RateLimit-Limit"] = str(limit_detail)

    request_id = getattr(getattr(request, "state", None), "request_id", None)
    logger.warning(f"Rate limit exceeded (request_id={request_id}, limit={limit_detail})")

    return response


def get_limiter() -> Any:
    """Return the shared limiter used by the route decorators."""
    return limiter
