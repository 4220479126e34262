"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class SuccessResponse(BaseModel):
    success: bool = True


def strip_required(value: Any, message: str) -> Any:
    """Strip a string and reject it when nothing is left."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(message)
    return value
