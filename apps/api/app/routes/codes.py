"""
HTTP routes exposing the status code vocabulary.
No business logic lives here.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from apps.api.app.openapi_examples import standard_error_responses
from apps.api.app.schemas.codes import CodeOut
from apps.api.app.schemas.errors import ErrorResponse
from apps.api.app.status_mapping import http_status_for
from rpcerrors import Code, errorf
from rpcerrors.logging_utils import configure_logger

logger = configure_logger(__name__)

router = APIRouter(
    prefix="/codes",
    tags=["codes"],
)

_ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse, **spec}
    for status_code, spec in standard_error_responses().items()
}


def _to_out(code: Code) -> CodeOut:
    return CodeOut(name=code.name, value=int(code), http_status=http_status_for(code))


def lookup_code(key: str) -> Code:
    """
    Resolve a code by name (case-insensitive) or by numeric value.

    Raises:
        RpcError: NOT_FOUND if `key` names no code.
    """
    key = key.strip()

    if key.isdigit():
        try:
            return Code(int(key))
        except ValueError:
            raise errorf(Code.NOT_FOUND, "code %s is not defined", key) from None

    try:
        return Code[key.upper()]
    except KeyError:
        raise errorf(Code.NOT_FOUND, "code %r is not defined", key) from None


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="List every status code with its HTTP mapping",
    response_model=list[CodeOut],
)
def list_codes() -> list[CodeOut]:
    return [_to_out(code) for code in Code]


@router.get(
    "/{key}",
    status_code=status.HTTP_200_OK,
    summary="Describe one status code, by name or numeric value",
    response_model=CodeOut,
    responses=_ERROR_RESPONSES,
)
def get_code(key: str) -> CodeOut:
    code = lookup_code(key)

    logger.info(
        "Code lookup",
        extra={"event": "codes.lookup", "code": code.name},
    )

    return _to_out(code)
