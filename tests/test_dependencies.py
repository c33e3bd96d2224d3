"""
Test suite for dependency injection container.

Tests factory functions for service creation and the process-wide
service cache.

System role: Verification of DI container
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from specwright.api.deps import (
    ServiceCache,
    client_identifier,
    get_generation_service,
    get_section_service,
    get_service_cache,
    get_session_service,
    get_settings_dependency,
    get_walkthrough_service,
)
from specwright.application.services import (
    GenerationService,
    SectionService,
    SessionService,
    WalkthroughService,
)
from specwright.configs import Settings


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


class TestServiceGetters:
    """Test suite for service factory functions."""

    def test_get_session_service_should_wrap_db(self, mock_db_session) -> None:
        # Act
        service = get_session_service(db=mock_db_session)

        # Assert
        assert isinstance(service, SessionService)
        assert service.db is mock_db_session

    def test_get_section_service_should_receive_client(self, mock_db_session) -> None:
        client = MagicMock()

        service = get_section_service(db=mock_db_session, client=client)

        assert isinstance(service, SectionService)
        assert service.client is client

    def test_get_generation_service(self, mock_db_session) -> None:
        service = get_generation_service(db=mock_db_session, client=MagicMock())
        assert isinstance(service, GenerationService)

    def test_get_walkthrough_service(self, mock_db_session) -> None:
        service = get_walkthrough_service(db=mock_db_session, client=MagicMock())
        assert isinstance(service, WalkthroughService)


class TestServiceCache:
    """Test suite for ServiceCache."""

    def test_completion_client_is_created_once(self) -> None:
        # Arrange
        cache = ServiceCache()

        # Act
        with patch("specwright.api.deps.dependencies.CompletionClient") as mock_client_class:
            first = cache.completion_client
            second = cache.completion_client

        # Assert
        assert first is second
        mock_client_class.assert_called_once()

    def test_clear_drops_cached_instances(self) -> None:
        cache = ServiceCache()

        with patch("specwright.api.deps.dependencies.RateLimiter") as mock_limiter_class:
            mock_limiter_class.side_effect = lambda settings: MagicMock()
            first = cache.rate_limiter
            cache.clear()
            second = cache.rate_limiter

        assert first is not second

    @pytest.mark.asyncio
    async def test_aclose_closes_rate_limiter(self) -> None:
        cache = ServiceCache()
        limiter = AsyncMock()
        cache._rate_limiter = limiter

        await cache.aclose()

        limiter.close.assert_awaited_once()

    def test_global_cache_is_singleton(self) -> None:
        assert get_service_cache() is get_service_cache()

    def test_get_settings_dependency_should_return_settings(self) -> None:
        assert isinstance(get_settings_dependency(), Settings)


class TestClientIdentifier:
    def _request(self, headers: dict[str, str], host: str | None = "10.0.0.5"):
        client = SimpleNamespace(host=host) if host else None
        return SimpleNamespace(headers=headers, client=client)

    def test_first_forwarded_hop_wins(self) -> None:
        request = self._request({"x-forwarded-for": "198.51.100.7, 10.0.0.1"})
        assert client_identifier(request) == "198.51.100.7"

    def test_falls_back_to_peer_host(self) -> None:
        assert client_identifier(self._request({})) == "10.0.0.5"

    def test_anonymous_without_peer(self) -> None:
        assert client_identifier(self._request({}, host=None)) == "anonymous"
