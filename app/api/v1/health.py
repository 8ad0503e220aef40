# 📄 File: app/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Tells monitoring tools whether the service is up, and whether it can still reach the
# photo storage and the background job queue.
# 🧪 Purpose (Technical Summary):
# Liveness and detailed health endpoints. The detailed check probes Supabase storage through
# SupabaseManager.health_check and reports in-flight retry operations.
# 🔗 Dependencies:
# FastAPI, app.shared.config (settings, supabase), app.shared.core.sync_retry
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, load balancers, monitoring systems

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.shared.config.settings import get_settings
from app.shared.config.supabase import get_supabase_manager
from app.shared.core.sync_retry import get_sync_retry_service
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Create router for health endpoints
health_router = APIRouter()

# Application start time for uptime calculation
_app_start_time = datetime.now(timezone.utc)


@health_router.get("/health",
                   summary="Basic Health Check",
                   description="Basic health check endpoint for load balancers and monitoring",
                   tags=["Health Check"])
async def health_check() -> JSONResponse:
    """
    Basic health check endpoint

    Returns simple OK status for quick health verification.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "plant-care-api",
            "version": get_settings().APP_VERSION,
            "uptime_seconds": int((datetime.now(timezone.utc) - _app_start_time).total_seconds()),
        }
    )


@health_router.get("/health/detailed",
                   summary="Detailed Health Check",
                   description="Health of Supabase storage and the sync retry executor",
                   tags=["Health Check"])
async def detailed_health_check() -> JSONResponse:
    """
    Component health check.

    Storage being unreachable degrades the service: deletions still retry,
    but sweeps and cleanups will record errors.
    """
    components = {}
    overall_status = "healthy"

    supabase_health = await get_supabase_manager().health_check()
    components["supabase"] = supabase_health
    if not supabase_health.get("storage_service"):
        overall_status = "degraded"

    retry_stats = get_sync_retry_service().get_retry_stats()
    components["sync_retry"] = {
        "status": "healthy",
        "active_operations": retry_stats["active_operations"],
    }

    if overall_status != "healthy":
        logger.warning("Detailed health check degraded", extra={'components': components})

    return JSONResponse(
        status_code=200 if overall_status == "healthy" else 503,
        content={
            "status": overall_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "components": components,
        }
    )
