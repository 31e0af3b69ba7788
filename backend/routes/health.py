"""Welcome, health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends

from config import settings
from services.analytics import AnalyticsService, get_service

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "social-analytics-api"


@router.get("/")
async def root() -> dict:
    return {"message": "Welcome to the Social Media Analytics Microservice!"}


@router.get("/ready")
async def ready() -> dict:
    """Lightweight readiness check, no I/O."""
    return {"status": "ok", "service": SERVICE_NAME, "commit": settings.git_sha}


@router.get("/health")
async def health(service: AnalyticsService = Depends(get_service)) -> dict:
    """Health check that verifies the cache store answers."""
    result = {"status": "ok", "service": SERVICE_NAME, "commit": settings.git_sha}

    if await service.cache_healthy():
        result["cache"] = "connected"
    else:
        logger.warning("Cache health check failed")
        result["status"] = "degraded"
        result["cache"] = "error"

    return result
