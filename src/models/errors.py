"""Error response models for API."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body returned by the global exception handlers."""

    detail: str
    error_code: Optional[str] = None
