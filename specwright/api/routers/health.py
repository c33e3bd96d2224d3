"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: specwright.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from specwright.boundary.db import get_async_db
from specwright.models.common import SuccessResponse

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=SuccessResponse[HealthResponse])
async def health_check() -> SuccessResponse[HealthResponse]:
    """Basic health check."""
    return SuccessResponse(data=HealthResponse(status="healthy", message="Server Healthy"))


@router.get("/db", response_model=SuccessResponse[HealthResponse])
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> SuccessResponse[HealthResponse]:
    """Database health check; failures surface through the error envelope."""
    await db.execute(text("SELECT 1"))
    return SuccessResponse(data=HealthResponse(status="healthy", message="Database connection OK"))
