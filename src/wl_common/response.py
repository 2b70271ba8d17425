"""Response envelope shared by every ledger endpoint.

    {"code": 0, "message": "success", "data": {...},
     "timestamp": "...Z", "request_id": "req_..."}

`code` is 0 on success and the HTTP status (400/403/404) on failure; there
are no finer-grained error codes. The request id is the one
RequestLogMiddleware put on request.state, so the body, the X-Request-ID
header and the access log line all agree.
"""

import uuid
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.requests import Request

from src.wl_common.datetime_utils import utc_now_iso


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def request_id_of(request: Request | None) -> str:
    if request is None:
        return new_request_id()
    return getattr(request.state, "request_id", None) or new_request_id()


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=utc_now_iso)
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None, request: Request | None = None) -> ApiResponse:
    return ApiResponse(data=data, request_id=request_id_of(request))


def error_response(code: int, message: str, request: Request | None = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None, request_id=request_id_of(request))


def error_json(request: Request, http_status: int, message: str) -> JSONResponse:
    """Failure envelope as a JSONResponse, for exception handlers."""
    body = error_response(http_status, message, request)
    return JSONResponse(status_code=http_status, content=body.model_dump())
