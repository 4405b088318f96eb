"""Base schemas for the application."""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Chat and user ids are stored as signed 64-bit integers
PLATFORM_ID_MIN = -(2**63)
PLATFORM_ID_MAX = 2**63 - 1

PlatformId = Annotated[int, Field(ge=PLATFORM_ID_MIN, le=PLATFORM_ID_MAX)]


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class ResponseSchema(BaseSchema):
    """Standard API response schema."""
    status: str
    message: Optional[str] = None
    data: Optional[Any] = None
