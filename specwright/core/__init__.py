"""
Core business logic module.

Contains the content catalogue, prompt builders, the completion client,
structured-output extraction and the stage workflow rules.
"""

from specwright.core.exceptions import (
    SpecwrightException,
    ValidationError,
    RateLimitedError,
    NotFoundError,
    SessionNotFoundError,
    SessionExpiredError,
    PrerequisiteMissingError,
    MissingArtifactsError,
    ParseError,
    UpstreamTimeoutError,
    InternalError,
)

__all__ = [
    "SpecwrightException",
    "ValidationError",
    "RateLimitedError",
    "NotFoundError",
    "SessionNotFoundError",
    "SessionExpiredError",
    "PrerequisiteMissingError",
    "MissingArtifactsError",
    "ParseError",
    "UpstreamTimeoutError",
    "InternalError",
]
