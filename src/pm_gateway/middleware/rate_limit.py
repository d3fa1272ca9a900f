"""Rate limiting middleware — Redis fixed window per client per minute.

Key pattern: "ratelimit:{client}:{minute}". The client is the socket peer.
X-Forwarded-For is only read when that peer is a configured trusted proxy,
and then the right-most hop that is not itself a trusted proxy is used:
everything left of it was written by the caller and can be forged.

Exceptions raised here never reach the app's exception handlers (middleware
wraps the router), so the 429 envelope is built directly. If Redis is
unreachable the limiter fails open: requests pass and a WARNING is logged.
"""

import logging
import time
from collections.abc import Iterable

from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from config.settings import settings
from src.pm_common.errors import RateLimitError
from src.pm_common.redis_client import get_redis, hit_fixed_window
from src.pm_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_EXEMPT_PATHS = frozenset({"/health", "/docs", "/openapi.json"})


def client_key(request: Request, trusted_proxies: frozenset[str] = frozenset()) -> str:
    peer = request.client.host if request.client else "unknown"
    if peer not in trusted_proxies:
        return peer
    forwarded = request.headers.get("x-forwarded-for", "")
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in trusted_proxies:
            return hop
    return peer


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit_per_minute: int | None = None,
        trusted_proxies: Iterable[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._limit = limit_per_minute or settings.RATE_LIMIT_PER_MINUTE
        self._trusted = frozenset(
            settings.RATE_LIMIT_TRUSTED_PROXIES if trusted_proxies is None else trusted_proxies
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        window = int(time.time()) // _WINDOW_SECONDS
        key = f"ratelimit:{client_key(request, self._trusted)}:{window}"
        try:
            redis = await get_redis()
            count = await hit_fixed_window(redis, key, _WINDOW_SECONDS)
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, letting %s through: %s", key, exc)
            return await call_next(request)

        if count > self._limit:
            err = RateLimitError()
            logger.info("Rate limit exceeded: %s (%d/%d)", key, count, self._limit)
            body = error_response(err.code, err.message, err.reason)
            body.request_id = getattr(request.state, "request_id", body.request_id)
            return JSONResponse(
                status_code=err.http_status,
                content=body.model_dump(),
                headers={"Retry-After": str(_WINDOW_SECONDS - int(time.time()) % _WINDOW_SECONDS)},
            )
        return await call_next(request)
