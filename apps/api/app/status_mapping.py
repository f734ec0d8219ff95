# apps/api/app/status_mapping.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from rpcerrors import Code


# Standard gRPC -> HTTP mapping (same table as grpc-gateway).
# Every Code must have an entry; the HTTP status is part of the public API.
HTTP_STATUS_BY_CODE: Mapping[Code, int] = MappingProxyType(
    {
        Code.OK: 200,
        Code.CANCELED: 499,
        Code.UNKNOWN: 500,
        Code.INVALID_ARGUMENT: 400,
        Code.DEADLINE_EXCEEDED: 504,
        Code.NOT_FOUND: 404,
        Code.ALREADY_EXISTS: 409,
        Code.PERMISSION_DENIED: 403,
        Code.RESOURCE_EXHAUSTED: 429,
        Code.FAILED_PRECONDITION: 400,
        Code.ABORTED: 409,
        Code.OUT_OF_RANGE: 400,
        Code.UNIMPLEMENTED: 501,
        Code.INTERNAL: 500,
        Code.UNAVAILABLE: 503,
        Code.DATA_LOSS: 500,
        Code.UNAUTHENTICATED: 401,
    }
)


def http_status_for(code: Code) -> int:
    """
    Return the HTTP status used to report `code`.

    Values outside the Code set are reported like UNKNOWN.
    """
    return HTTP_STATUS_BY_CODE.get(code, HTTP_STATUS_BY_CODE[Code.UNKNOWN])


def code_for_http_status(status_code: int) -> Code:
    """
    Classify a framework-level HTTP error (routing 404, 405, ...) into a Code.

    Several codes share a status; the lowest code wins, so 400 is
    INVALID_ARGUMENT and 409 is ALREADY_EXISTS. Unmapped statuses are UNKNOWN.
    """
    for code in sorted(HTTP_STATUS_BY_CODE):
        if code is not Code.OK and HTTP_STATUS_BY_CODE[code] == status_code:
            return code
    return Code.UNKNOWN
