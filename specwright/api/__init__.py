"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    generate_router,
    health_router,
    refine_router,
    sections_router,
    sessions_router,
    walkthrough_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(sessions_router)
api_router.include_router(sections_router)
api_router.include_router(generate_router)
api_router.include_router(refine_router)
api_router.include_router(walkthrough_router)

__all__ = ["api_router"]
