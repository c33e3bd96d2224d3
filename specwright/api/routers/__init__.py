"""API routers."""

from .generate import refine_router
from .generate import router as generate_router
from .health import router as health_router
from .sections import router as sections_router
from .sessions import router as sessions_router
from .walkthrough import router as walkthrough_router

__all__ = [
    "generate_router",
    "health_router",
    "refine_router",
    "sections_router",
    "sessions_router",
    "walkthrough_router",
]
