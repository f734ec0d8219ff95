from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rpcerrors import Code, CodedError, RpcError, error_code
from rpcerrors.config import GatewayConfig, load_gateway_config
from rpcerrors.logging_utils import configure_logger

from .errors import get_request_id, make_error
from .routes.codes import router as codes_router
from .routes.health import router as health_router
from .status_mapping import code_for_http_status, http_status_for


config = load_gateway_config()
logger = configure_logger(__name__, level=config.log_level)

# Do not emit request completion logs for health endpoints
HEALTHCHECK_PATHS = {"/v1/health"}

UNCLASSIFIED_MESSAGE = "Unknown error"


def _as_code(value: Any) -> Code:
    if isinstance(value, Code):
        return value
    try:
        return Code(value)
    except (TypeError, ValueError):
        return Code.UNKNOWN


def _error_response(
    *,
    request: Request,
    status_code: int,
    code: Code,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    request_id = get_request_id(request)
    payload = make_error(
        code=code,
        message=message,
        request_id=request_id,
        details=details,
    ).model_dump()

    header = request.app.state.config.request_id_header
    return JSONResponse(
        status_code=status_code,
        content=payload,
        headers={header: request_id},
    )


async def request_context_middleware(request: Request, call_next):
    """
    Attach a request id and emit structured lifecycle logs.

    Also the last stop for failures no exception handler claimed (foreign
    exceptions, classes registered on CodedError): they are classified here
    so nothing reaches the server.
    """
    header = request.app.state.config.request_id_header
    request_id = request.headers.get(header) or uuid.uuid4().hex
    request.state.request_id = request_id

    start = time.perf_counter()
    response = None

    try:
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await classified_exception_handler(request, exc)
        return response

    finally:
        duration_ms = round((time.perf_counter() - start) * 1000.0, 2)
        status_code = getattr(response, "status_code", None)
        path = request.url.path

        if path not in HEALTHCHECK_PATHS:
            logger.info(
                "Request completed",
                extra={
                    "event": "request.completed",
                    "request_id": request_id,
                    "method": request.method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

        if response is not None:
            response.headers[header] = request_id


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        "Request validation failed",
        extra={
            "event": "request.validation_error",
            "request_id": get_request_id(request),
            "method": request.method,
            "path": request.url.path,
            "code": Code.INVALID_ARGUMENT.name,
        },
    )

    return _error_response(
        request=request,
        status_code=http_status_for(Code.INVALID_ARGUMENT),
        code=Code.INVALID_ARGUMENT,
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = code_for_http_status(exc.status_code)
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    details = exc.detail if isinstance(exc.detail, dict) else None

    logger.info(
        "HTTP exception raised",
        extra={
            "event": "request.http_exception",
            "request_id": get_request_id(request),
            "method": request.method,
            "path": request.url.path,
            "status_code": exc.status_code,
            "code": code.name,
        },
    )

    return _error_response(
        request=request,
        status_code=exc.status_code,
        code=code,
        message=message,
        details=details,
    )


async def classified_exception_handler(request: Request, exc: Exception):
    """
    Report any failure through its Code.

    Classified errors keep their message verbatim. Anything else is UNKNOWN
    and its text is withheld, since it was never written for the caller.
    """
    code = _as_code(error_code(exc))
    status_code = http_status_for(code)

    if isinstance(exc, CodedError):
        message = str(exc)
        logger.log(
            logging.WARNING if status_code >= 500 else logging.INFO,
            "Classified error returned",
            extra={
                "event": "error.classified",
                "request_id": get_request_id(request),
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "code": code.name,
            },
        )
    else:
        message = UNCLASSIFIED_MESSAGE
        logger.exception(
            "Unclassified exception",
            extra={
                "event": "error.unclassified",
                "request_id": get_request_id(request),
                "method": request.method,
                "path": request.url.path,
                "code": code.name,
                "exception_type": type(exc).__name__,
            },
        )

    return _error_response(
        request=request,
        status_code=status_code,
        code=code,
        message=message,
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Install the middleware and exception handlers that turn failures into
    the canonical error envelope.

    Expects `app.state.config` to hold a GatewayConfig.
    """
    app.middleware("http")(request_context_middleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RpcError, classified_exception_handler)


def create_app(app_config: Optional[GatewayConfig] = None) -> FastAPI:
    app_config = app_config or config

    app = FastAPI(
        title=app_config.service_name,
        version="0.1.0",
        description="Canonical error classification exposed over HTTP",
    )
    app.state.config = app_config

    register_error_handlers(app)

    app.include_router(health_router, prefix="/v1")
    app.include_router(codes_router, prefix="/v1")
    return app


app = create_app()
