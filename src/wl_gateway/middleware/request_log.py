"""Access log and request correlation.

A caller-supplied X-Request-ID is kept when it looks sane, otherwise a
fresh id is minted. The id lands on request.state for the response
envelope and is echoed back in the X-Request-ID header.

Only method, path, status and latency are logged. Query strings are left
out because they carry pagination cursors, and headers are left out
because they carry bearer tokens.

    INFO [POST] /api/v1/wallets -> 201 (4ms) req_a1b2c3d4e5f6
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.wl_common.response import new_request_id

logger = logging.getLogger("wl.request")

REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


def _incoming_request_id(request: Request) -> str | None:
    value = request.headers.get(REQUEST_ID_HEADER)
    if value and _SAFE_REQUEST_ID.fullmatch(value):
        return value
    return None


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_request_id(request) or new_request_id()
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s -> %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
