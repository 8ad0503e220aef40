# 📄 File: app/modules/community/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands each web request the tools it needs (database access, photo storage access, the
# clean-up and delete services) already connected to each other.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency providers wiring the Supabase-backed stores into the community domain
# services and command handlers. Tests replace these through app.dependency_overrides.
# 🔗 Dependencies:
# FastAPI Depends, supabase AsyncClient, community domain/application/infrastructure
# 🔄 Connected Modules / Calls From:
# presentation.api.v1.posts, presentation.api.v1.storage

from fastapi import Depends
from supabase import AsyncClient

from app.shared.config.supabase import get_supabase_client
from app.shared.core.sync_retry import SyncRetryService, get_sync_retry_service

from ..application.handlers.command_handlers import (
    BatchDeletePostsCommandHandler,
    DeletePostCommandHandler,
    SweepOrphanedAssetsCommandHandler,
)
from ..domain.repositories.object_store import ObjectStore
from ..domain.repositories.record_store import RecordStore
from ..domain.services.post_deletion_service import PostDeletionService
from ..domain.services.storage_cleanup_service import StorageCleanupService
from ..infrastructure.database.supabase_record_store import SupabaseRecordStore
from ..infrastructure.storage.supabase_object_store import SupabaseObjectStore


# =========================================================================
# REPOSITORIES
# =========================================================================

async def get_record_store(client: AsyncClient = Depends(get_supabase_client)) -> RecordStore:
    return SupabaseRecordStore(client)


async def get_object_store(client: AsyncClient = Depends(get_supabase_client)) -> ObjectStore:
    return SupabaseObjectStore(client)


# =========================================================================
# DOMAIN SERVICES
# =========================================================================

def get_storage_cleanup_service(
    record_store: RecordStore = Depends(get_record_store),
    object_store: ObjectStore = Depends(get_object_store),
) -> StorageCleanupService:
    return StorageCleanupService(record_store, object_store)


def get_post_deletion_service(
    record_store: RecordStore = Depends(get_record_store),
    cleanup_service: StorageCleanupService = Depends(get_storage_cleanup_service),
    retry_service: SyncRetryService = Depends(get_sync_retry_service),
) -> PostDeletionService:
    return PostDeletionService(record_store, cleanup_service, retry_service)


# =========================================================================
# COMMAND HANDLERS
# =========================================================================

def get_delete_post_handler(
    service: PostDeletionService = Depends(get_post_deletion_service),
) -> DeletePostCommandHandler:
    return DeletePostCommandHandler(service)


def get_batch_delete_posts_handler(
    service: PostDeletionService = Depends(get_post_deletion_service),
) -> BatchDeletePostsCommandHandler:
    return BatchDeletePostsCommandHandler(service)


def get_sweep_orphans_handler(
    service: StorageCleanupService = Depends(get_storage_cleanup_service),
) -> SweepOrphanedAssetsCommandHandler:
    return SweepOrphanedAssetsCommandHandler(service)
