from __future__ import annotations

from typing import Any, Dict, Optional

from rpcerrors import Code

from .status_mapping import HTTP_STATUS_BY_CODE


_EXAMPLE_MESSAGES: Dict[Code, str] = {
    Code.CANCELED: "Request cancelled by the client",
    Code.UNKNOWN: "Unknown error",
    Code.INVALID_ARGUMENT: "Request validation failed",
    Code.DEADLINE_EXCEEDED: "Deadline exceeded",
    Code.NOT_FOUND: "code 'NO_SUCH_CODE' is not defined",
    Code.ALREADY_EXISTS: "Entity already exists",
    Code.PERMISSION_DENIED: "Permission denied",
    Code.RESOURCE_EXHAUSTED: "Quota exhausted",
    Code.UNIMPLEMENTED: "Not implemented",
    Code.UNAVAILABLE: "Service is unavailable. Please retry shortly.",
    Code.UNAUTHENTICATED: "Missing or invalid credentials",
}


def _error_example(
    *,
    code: Code,
    message: str,
    request_id: str = "7b2b5a2c4f3a4e1fb7f4f44c9c1c2c9a",
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build a canonical error example matching the runtime error envelope:
    {"error": {"code": "...", "status": 5, "message": "...", "request_id": "...", "details": {...}}}
    """
    payload: Dict[str, Any] = {
        "error": {
            "code": code.name,
            "status": int(code),
            "message": message,
            "request_id": request_id,
        }
    }
    if details is not None:
        payload["error"]["details"] = details
    return payload


def standard_error_responses() -> Dict[int, Dict[str, Any]]:
    """
    Reusable error response docs for FastAPI routes, one per HTTP status.

    Generated from HTTP_STATUS_BY_CODE; when several codes share a status the
    lowest code provides the example.
    """
    responses: Dict[int, Dict[str, Any]] = {}

    for code in sorted(HTTP_STATUS_BY_CODE):
        status_code = HTTP_STATUS_BY_CODE[code]
        if code is Code.OK or status_code in responses:
            continue

        responses[status_code] = {
            "description": code.name.replace("_", " ").capitalize(),
            "content": {
                "application/json": {
                    "example": _error_example(
                        code=code,
                        message=_EXAMPLE_MESSAGES.get(code, code.name),
                    )
                }
            },
        }

    return responses
