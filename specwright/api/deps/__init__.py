"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    client_identifier,
    get_completion_client,
    get_generation_service,
    get_rate_limiter,
    get_section_service,
    get_service_cache,
    get_session_service,
    get_settings_dependency,
    get_walkthrough_service,
    rate_limited,
)

__all__ = [
    "ServiceCache",
    "client_identifier",
    "get_completion_client",
    "get_generation_service",
    "get_rate_limiter",
    "get_section_service",
    "get_service_cache",
    "get_session_service",
    "get_settings_dependency",
    "get_walkthrough_service",
    "rate_limited",
]
