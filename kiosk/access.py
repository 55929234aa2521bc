"""Cross-origin access gate for kiosk pages.

Behavior matrix:
  Origin in allow-list      → Access-Control-Allow-Origin echoes the origin
  Origin missing/unlisted   → no Allow-Origin header, request still served
  Any request               → Access-Control-Allow-Headers is set
  CORS preflight (OPTIONS)  → answered here with 204, never routed

The gate is advisory. It decides what a browser may read, not what the
server processes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("kiosk.access")

ALLOWED_HEADERS = "Origin, X-Requested-With, Content-Type, Accept"
ALLOWED_METHODS = "GET, OPTIONS"


def cors_headers(origin: str | None, allowed_origins: Iterable[str]) -> dict[str, str]:
    """Headers granting ``origin`` read access, if it is allow-listed."""
    headers = {"Access-Control-Allow-Headers": ALLOWED_HEADERS, "Vary": "Origin"}
    if origin and origin in set(allowed_origins):
        headers["Access-Control-Allow-Origin"] = origin
    return headers


def _is_preflight(request: Request) -> bool:
    return (
        request.method == "OPTIONS"
        and "access-control-request-method" in request.headers
    )


class AccessGate(BaseHTTPMiddleware):
    """Attach CORS headers for allow-listed kiosk origins."""

    def __init__(self, app: Any, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")
        headers = cors_headers(origin, self.allowed_origins)
        if origin and "Access-Control-Allow-Origin" not in headers:
            log.debug("Origin %s is not allow-listed; no CORS grant", origin)

        if _is_preflight(request):
            headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
