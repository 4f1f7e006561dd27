"""Common response schemas."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    ok: bool = False
    detail: Any


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
