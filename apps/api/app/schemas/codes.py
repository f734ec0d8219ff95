from __future__ import annotations

from pydantic import BaseModel, Field


class CodeOut(BaseModel):
    name: str = Field(..., json_schema_extra={"example": "FAILED_PRECONDITION"})
    value: int = Field(..., json_schema_extra={"example": 9})
    http_status: int = Field(
        ...,
        description="HTTP status the gateway answers with for this code",
        json_schema_extra={"example": 400},
    )
