# apps/api/app/errors.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import Request

from rpcerrors import Code

from apps.api.app.schemas.errors import ErrorResponse


UNKNOWN_REQUEST_ID = "unknown"


def get_request_id(request: Request) -> str:
    """
    Correlation id stored by `request_context_middleware`.

    Handlers that run before the middleware has tagged the request (or
    outside it) get UNKNOWN_REQUEST_ID.
    """
    rid = getattr(request.state, "request_id", None)
    if isinstance(rid, str) and rid.strip():
        return rid
    return UNKNOWN_REQUEST_ID


def make_error(
    *,
    code: Code,
    message: str,
    request_id: str,
    details: Optional[Any] = None,
) -> ErrorResponse:
    """
    Build the canonical error response envelope used by the API.

    Notes:
    - `message` is passed through untouched; classified errors already carry
      a caller-facing message.
    - `request_id` must match the request id response header.
    """
    return ErrorResponse(
        error={
            "code": code.name,
            "status": int(code),
            "message": message,
            "request_id": request_id,
            "details": details,
        }
    )
