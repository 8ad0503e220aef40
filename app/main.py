# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# Starts the Plant Care storage service: plugs in the post deletion and photo clean-up endpoints,
# the request diary, the "don't ask too often" limits, and friendly error answers.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and uvicorn entry point. Wires request logging, CORS, slowapi
# rate limiting, the v1 router, the PlantCareException envelope handler and Supabase client
# shutdown.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - slowapi
# - app.shared.config (settings, supabase)
# - app.api.v1.router
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Docker container entry point

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.api.middleware.logging import RequestLoggingMiddleware
from app.api.middleware.rate_limiting import limiter, rate_limit_exceeded_handler
from app.api.v1.router import api_v1_router
from app.shared.config.settings import get_settings
from app.shared.config.supabase import cleanup_supabase
from app.shared.core.exceptions import PlantCareException
from app.shared.utils.logging import get_logger, setup_logging

settings = get_settings()

setup_logging()
logger = get_logger(__name__)

API_V1_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup/shutdown hook.

    The Supabase client is created lazily on first use, so startup only logs.
    """
    logger.info(
        f"🌱 {settings.APP_NAME} {settings.APP_VERSION} starting ({settings.ENVIRONMENT})",
        extra={'environment': settings.ENVIRONMENT}
    )
    try:
        yield
    finally:
        try:
            await cleanup_supabase()
        except Exception as e:
            logger.error(f"❌ Supabase cleanup failed during shutdown: {e}", exc_info=True)
        logger.info(f"🔄 {settings.APP_NAME} stopped")


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


async def plant_care_exception_handler(request: Request, exc: PlantCareException) -> JSONResponse:
    """Render a PlantCareException as its JSON error envelope."""
    if exc.status_code >= 500:
        logger.error(
            f"{exc.error_code}: {exc.message}",
            extra={'path': request.url.path, 'details': exc.details}
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(request_id=_request_id(request)))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort 500; the exception type is only exposed in debug mode."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    envelope = PlantCareException(
        "An internal server error occurred",
        details={"error_type": type(exc).__name__} if settings.DEBUG else {},
        error_code="INTERNAL_SERVER_ERROR",
    )
    return JSONResponse(status_code=500, content=envelope.to_dict(request_id=_request_id(request)))


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    docs_enabled = settings.DEBUG

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE
    # =========================================================================

    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # slowapi reads the limiter from app state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # =========================================================================
    # ROUTES AND ERROR HANDLERS
    # =========================================================================

    app.include_router(api_v1_router, prefix=API_V1_PREFIX)

    app.add_exception_handler(PlantCareException, plant_care_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs_url": "/docs" if docs_enabled else None,
            "health_check": f"{API_V1_PREFIX}/health",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_application()


def main():
    """Run the development server (python -m app.main)."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
