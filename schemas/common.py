"""
schemas/common.py

- Shared schemas and response helpers
- Pydantic v2
- Contents:
  1) CamelModel: base class mapping snake_case fields to the camelCase keys
     the front end and the Supabase schema use
  2) error envelope: ErrorDetail, ErrorResponse
  3) ok() / fail(): the {"success": ..., "data"/"error": ..., "message"} envelope
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =========================================================
# 1) camelCase base
# =========================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)


# =========================================================
# 2) error envelope
# =========================================================

class ErrorDetail(BaseModel):
    """Smallest unit of an error: code + human readable message"""
    code: int | str = Field(..., description="HTTP status or error code (e.g. INTERNAL_ERROR)")
    message: str = Field(..., description="Message shown to the user")


class ErrorResponse(BaseModel):
    """Body returned by the global error handler"""
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 3) envelope helpers
# =========================================================

def ok(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": status_code, "message": message}},
    )
