from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorInfo(BaseModel):
    code: str = Field(
        ...,
        description="Canonical status code name",
        json_schema_extra={"example": "NOT_FOUND"},
    )
    status: int = Field(
        ...,
        description="Numeric value of the status code (matches gRPC)",
        json_schema_extra={"example": 5},
    )
    message: str = Field(
        ...,
        json_schema_extra={"example": "code 'NO_SUCH_CODE' is not defined"},
    )
    request_id: Optional[str] = Field(
        None,
        json_schema_extra={"example": "7b2b5a2c4f3a4e1fb7f4f44c9c1c2c9a"},
    )
    details: Optional[Any] = Field(
        None,
        description="Optional structured metadata",
    )


class ErrorResponse(BaseModel):
    error: ErrorInfo
