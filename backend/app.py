"""FastAPI application entry point for the social media analytics API."""

import logging
import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from services.analytics import AnalyticsService
from services.scheduler import RefreshScheduler

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(
    service: AnalyticsService | None = None,
    scheduler_enabled: bool | None = None,
) -> FastAPI:
    app = FastAPI(title="Social Media Analytics API", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.analytics import router as analytics_router
    from routes.health import router as health_router
    from routes.refresh import router as refresh_router

    app.include_router(health_router)
    app.include_router(refresh_router)
    app.include_router(analytics_router)

    if service is None:
        service = AnalyticsService.from_settings(settings)
    if scheduler_enabled is None:
        scheduler_enabled = settings.scheduler_enabled

    app.state.analytics = service
    app.state.scheduler = RefreshScheduler(service.refresh_all, minute=settings.refresh_minute)

    @app.on_event("startup")
    async def _startup() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (refresh may fail): %s", ", ".join(missing))
        if scheduler_enabled:
            app.state.scheduler.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.scheduler.stop()
        await app.state.analytics.close()

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
