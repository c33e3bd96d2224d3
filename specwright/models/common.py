"""
Common response models and utilities.

Response envelope and the request base class.

Every JSON response is wrapped as ``{"ok": true, "data": ...}`` or
``{"ok": false, "error": {"code", "message", "details"?}}``. Request bodies
accept snake_case or camelCase keys; responses are snake_case.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any, Generic, TypeVar

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class RequestModel(BaseModel):
    """Base for request bodies: snake_case or camelCase keys."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
    )


class SuccessResponse(BaseModel, Generic[T]):
    """Generic success envelope."""

    ok: bool = True
    data: T


class ErrorBody(BaseModel):
    """Machine-readable error."""

    code: str = Field(description="Error code, e.g. NOT_FOUND or PARSE_ERROR")
    message: str = Field(description="Human-readable message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """Error envelope."""

    ok: bool = False
    error: ErrorBody


class SavedResponse(BaseModel):
    saved: bool = True
