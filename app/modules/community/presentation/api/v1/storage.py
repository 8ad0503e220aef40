# 📄 File: app/modules/community/presentation/api/v1/storage.py
# 🧭 Purpose (Layman Explanation):
# Lets a user ask the service to tidy up their photo storage right now, and lets operators
# see which save or delete operations are still being retried.
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints for on-demand orphan sweeps of the current user's namespace and for the
# SyncRetryService in-flight operation stats.
# 🔗 Dependencies:
# FastAPI router, community handlers and schemas, SyncRetryService, slowapi limiter
# 🔄 Connected Modules / Calls From:
# app.api.v1.router (mounted under /storage)

from fastapi import APIRouter, Depends, Request

from app.api.middleware.rate_limiting import limiter, orphan_sweep_limit
from app.shared.core.dependencies import CurrentUser, get_current_user
from app.shared.core.sync_retry import SyncRetryService, get_sync_retry_service

from ....application.commands.sweep_orphans import SweepOrphanedAssetsCommand
from ....application.handlers.command_handlers import SweepOrphanedAssetsCommandHandler
from ...dependencies import get_sweep_orphans_handler
from ..schemas.cleanup_schemas import CleanupResultResponse, RetryStatsResponse

storage_router = APIRouter()


@storage_router.post(
    "/cleanup/orphans",
    response_model=CleanupResultResponse,
    summary="Sweep the current user's orphaned uploads",
    description=(
        "Deletes uploads under the current user's prefix that no record references "
        "and that are older than the configured grace period"
    ),
    responses={
        200: {"description": "Sweep result; per-bucket failures are listed in errors"},
        401: {"description": "Authentication required"},
        429: {"description": "Too many sweeps"},
        503: {"description": "Reference scan failed; nothing was deleted"},
    }
)
@limiter.limit(orphan_sweep_limit)
async def sweep_orphaned_assets(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    handler: SweepOrphanedAssetsCommandHandler = Depends(get_sweep_orphans_handler),
) -> CleanupResultResponse:
    command = SweepOrphanedAssetsCommand(user_id=current_user.user_id, triggered_by="api")
    result = await handler.handle(command)
    return CleanupResultResponse.from_domain(result)


@storage_router.get(
    "/sync/operations",
    response_model=RetryStatsResponse,
    summary="In-flight retryable operations",
)
async def get_sync_operations(
    current_user: CurrentUser = Depends(get_current_user),
    retry_service: SyncRetryService = Depends(get_sync_retry_service),
) -> RetryStatsResponse:
    return RetryStatsResponse.from_stats(retry_service.get_retry_stats())
