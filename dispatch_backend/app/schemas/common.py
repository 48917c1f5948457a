"""
Shared Pydantic schemas.

Request models reject unknown fields and accept camelCase or snake_case
names. Every successful response is wrapped in APIResponse.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class RequestModel(BaseModel):
    """Base for request bodies."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class APIResponse(BaseModel, Generic[T]):
    """Success envelope: {"success": true, "data": ..., "message"?, "count"?}."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    count: Optional[int] = None
