"""ApiResponse envelope shared by every endpoint and the AppError handler.

{
    "code": 0,           // 0=success, otherwise the AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."  // same id as the X-Request-ID response header
}
"""

from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

from src.pm_common.datetime_utils import utc_now


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = ""


def request_id_of(request: Request) -> str:
    """Id assigned by RequestLogMiddleware; empty when the middleware did not run."""
    return getattr(request.state, "request_id", "")


def success_response(request: Request, data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data, request_id=request_id_of(request))


def error_response(request: Request, code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None, request_id=request_id_of(request))
