"""
Exception hierarchy for the Specwright application.

Provides layered exception structure for domain-specific errors.
Every exception carries a machine-readable code and the HTTP status
the API layer renders it with.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SpecwrightException(Exception):
    """Base exception for all Specwright application errors."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(SpecwrightException):
    """Raised when input validation fails."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class RateLimitedError(SpecwrightException):
    """Raised when a caller exceeds its request budget."""

    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, bucket: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["bucket"] = bucket
        super().__init__("Too many requests. Please try again later.", details)


class NotFoundError(SpecwrightException):
    """Raised when a requested record does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class SectionNotFoundError(NotFoundError):
    """Raised when a section has no saved answers yet."""

    def __init__(self, session_id: str, key: str) -> None:
        super().__init__(
            f"Section answers not found: {key}",
            {"session_id": session_id, "key": key},
        )


class ArtifactNotFoundError(NotFoundError):
    """Raised when a generated document is missing."""

    def __init__(self, session_id: str, artifact_type: str) -> None:
        super().__init__(
            f"{artifact_type} not found",
            {"session_id": session_id, "artifact_type": artifact_type},
        )


class WalkthroughNotFoundError(NotFoundError):
    """Raised when a tech walkthrough cannot be found."""

    def __init__(self, identifier: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["walkthrough"] = identifier
        super().__init__("Walkthrough not found", details)


class DecisionNotFoundError(NotFoundError):
    """Raised when an architecture decision id is unknown."""

    def __init__(self, decision_id: str) -> None:
        super().__init__("Decision not found", {"decision_id": decision_id})


class SessionExpiredError(SpecwrightException):
    """Raised when a session is read or mutated after its expiry."""

    code = "SESSION_EXPIRED"
    status_code = 410

    def __init__(self, session_id: str) -> None:
        super().__init__("Session has expired", {"session_id": session_id})


class PrerequisiteMissingError(SpecwrightException):
    """Raised when a stage runs before the stage it depends on."""

    code = "PREREQUISITE_MISSING"
    status_code = 400


class MissingArtifactsError(SpecwrightException):
    """Raised when a stage needs several generated documents and some are absent."""

    code = "MISSING_ARTIFACTS"
    status_code = 400


class ParseError(SpecwrightException):
    """Raised when model output cannot be turned into the expected structure."""

    code = "PARSE_ERROR"
    status_code = 502

    def __init__(
        self,
        message: str,
        preview: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize parse error.

        Args:
            message: Error message
            preview: Leading slice of the raw model output
            details: Additional context
        """
        details = details or {}
        if preview is not None:
            details["preview"] = preview[:500]
        super().__init__(message, details)


class UpstreamTimeoutError(SpecwrightException):
    """Raised when the model provider does not answer within the allowed window."""

    code = "GATEWAY_TIMEOUT"
    status_code = 504


class InternalError(SpecwrightException):
    """Raised for unexpected failures that should surface as a generic 500."""

    code = "INTERNAL_ERROR"
    status_code = 500


_TIMEOUT_CODES = {"ETIMEDOUT", "ECONNABORTED"}


def is_timeout_error(exc: BaseException) -> bool:
    """
    Classify an exception as an upstream timeout.

    Matches the builtin TimeoutError, any exception class whose name contains
    "Timeout" (httpx, openai and asyncio variants), and socket-level errno
    names reported by some transports.
    """
    if isinstance(exc, (TimeoutError, UpstreamTimeoutError)):
        return True
    if any("Timeout" in cls.__name__ for cls in type(exc).__mro__):
        return True
    code = getattr(exc, "code", None)
    return isinstance(code, str) and code in _TIMEOUT_CODES
