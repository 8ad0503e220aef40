# 📄 File: app/background_jobs/tasks/storage_cleanup.py
# 🧭 Purpose (Layman Explanation):
# The nightly clean-up jobs: once a day they go through every user's photo storage and remove
# old photos that no post or profile uses anymore.
# 🧪 Purpose (Technical Summary):
# Celery tasks fanning the orphan sweep out per user. Each task builds its own Supabase client
# inside asyncio.run, runs SweepOrphanedAssetsCommandHandler and returns the CleanupResult as
# JSON. A failed reference scan is retried by Celery with backoff.
# 🔗 Dependencies:
# celery, asyncio, SupabaseManager, community module services
# 🔄 Connected Modules / Calls From:
# celery_config beat schedule ("sweep-orphaned-assets")

import asyncio
from typing import Any, Dict, List

from celery import shared_task

from app.modules.community.application.commands.sweep_orphans import SweepOrphanedAssetsCommand
from app.modules.community.application.handlers.command_handlers import SweepOrphanedAssetsCommandHandler
from app.modules.community.domain.models.record import RecordTable
from app.modules.community.domain.services.storage_cleanup_service import StorageCleanupService
from app.modules.community.infrastructure.database.supabase_record_store import SupabaseRecordStore
from app.modules.community.infrastructure.storage.supabase_object_store import SupabaseObjectStore
from app.shared.config.supabase import SupabaseManager
from app.shared.core.exceptions import RepositoryError
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


async def list_sweep_owners() -> List[str]:
    """Every user id that owns at least one record of any kind."""
    manager = SupabaseManager()
    try:
        record_store = SupabaseRecordStore(await manager.get_client())
        owners: Dict[str, None] = {}
        for table in RecordTable:
            for owner_id in await record_store.list_owner_ids(table):
                owners[owner_id] = None
        return list(owners)
    finally:
        await manager.close()


async def run_user_sweep(user_id: str) -> Dict[str, Any]:
    """Sweep one user's namespace with a task-local Supabase client."""
    manager = SupabaseManager()
    try:
        client = await manager.get_client()
        service = StorageCleanupService(SupabaseRecordStore(client), SupabaseObjectStore(client))
        handler = SweepOrphanedAssetsCommandHandler(service)
        result = await handler.handle(
            SweepOrphanedAssetsCommand(user_id=user_id, triggered_by="scheduler")
        )
        return result.model_dump()
    finally:
        await manager.close()


@shared_task(name="app.background_jobs.tasks.storage_cleanup.sweep_all_orphaned_assets")
def sweep_all_orphaned_assets() -> Dict[str, Any]:
    """Queue one sweep per record owner."""
    owner_ids = asyncio.run(list_sweep_owners())

    for user_id in owner_ids:
        sweep_orphaned_assets_for_user.delay(user_id)

    logger.info(
        f"Scheduled orphan sweeps for {len(owner_ids)} users",
        extra={'user_count': len(owner_ids)}
    )
    return {"scheduled": len(owner_ids)}


@shared_task(
    name="app.background_jobs.tasks.storage_cleanup.sweep_orphaned_assets_for_user",
    autoretry_for=(RepositoryError, ConnectionError),
    retry_backoff=60,
    retry_backoff_max=3600,
    retry_jitter=True,
    max_retries=3,
)
def sweep_orphaned_assets_for_user(user_id: str) -> Dict[str, Any]:
    """Sweep orphaned uploads for one user."""
    result = asyncio.run(run_user_sweep(user_id))

    if result["errors"]:
        logger.warning(
            f"Orphan sweep for user {user_id} finished with {len(result['errors'])} errors",
            extra={'user_id': user_id, 'errors': result['errors']}
        )
    return result
