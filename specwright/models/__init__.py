"""API request and response schemas."""

from specwright.models.common import (
    ErrorBody,
    ErrorResponse,
    RequestModel,
    SavedResponse,
    SuccessResponse,
)

__all__ = [
    "ErrorBody",
    "ErrorResponse",
    "RequestModel",
    "SavedResponse",
    "SuccessResponse",
]
