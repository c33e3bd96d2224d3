"""
API test fixtures.

Builds the application routes without the lifespan (no database bootstrap,
no provider client) and replaces services with AsyncMocks.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from specwright.api import api_router
from specwright.api.deps import (
    get_generation_service,
    get_rate_limiter,
    get_section_service,
    get_session_service,
    get_walkthrough_service,
)
from specwright.api.errors import register_exception_handlers
from specwright.boundary.ratelimit import RateLimiter
from specwright.configs.rate_limit import RateLimitSettings


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(RateLimitSettings(redis_url=None))
    return app


@pytest.fixture
def client(app):
    # Unhandled exceptions are rendered by the envelope handler, not re-raised.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_session_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_session_service] = lambda: service
    return service


@pytest.fixture
def mock_section_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_section_service] = lambda: service
    return service


@pytest.fixture
def mock_generation_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_generation_service] = lambda: service
    return service


@pytest.fixture
def mock_walkthrough_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_walkthrough_service] = lambda: service
    return service
