# 📄 File: app/modules/community/domain/services/post_deletion_service.py
# 🧭 Purpose (Layman Explanation):
# Deletes a community post (a question or a plant share) together with its photos. If the network
# hiccups it tries again a few times, and a photo that refuses to go away never blocks the post deletion.
# 🧪 Purpose (Technical Summary):
# Locates the post's table, enforces ownership, then runs "clean assets, delete row" inside
# SyncRetryService.execute_with_retry as a push operation with the deletion retry policy.
# Batch deletion runs each post independently and concurrently.
# 🔗 Dependencies:
# asyncio, uuid, pydantic, RecordStore, StorageCleanupService, SyncRetryService
# 🔄 Connected Modules / Calls From:
# Community post API endpoints, application command handlers

import asyncio
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import AuthorizationError, NotFoundError
from app.shared.core.sync_retry import SyncKind, SyncRetryService
from app.shared.utils.logging import get_logger

from ..models.asset import CleanupResult
from ..models.record import RecordTable
from ..repositories.record_store import RecordStore
from .storage_cleanup_service import StorageCleanupService

logger = get_logger(__name__)


class BatchDeletionReport(BaseModel):
    """Outcome of deleting several posts; each id lands in exactly one field."""
    deleted: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict)


class PostDeletionService:
    """
    Domain service for deleting community posts and their media.

    Deleting the row matters more than deleting its media: asset cleanup
    errors are logged and the row is deleted anyway. Leftover objects are
    picked up by a later orphan sweep.
    """

    def __init__(
        self,
        record_store: RecordStore,
        cleanup_service: StorageCleanupService,
        retry_service: SyncRetryService,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.record_store = record_store
        self.cleanup_service = cleanup_service
        self.retry_service = retry_service
        self.max_retries = settings.DELETION_RETRY_MAX_RETRIES
        self.base_delay = settings.DELETION_RETRY_BASE_DELAY

    async def delete_post(self, post_id: str, user_id: str) -> CleanupResult:
        """
        Delete one post owned by `user_id` along with its assets.

        Args:
            post_id: Question or plant share id
            user_id: Requesting user

        Returns:
            CleanupResult of the asset cleanup from the successful attempt

        Raises:
            NotFoundError: If no post table holds `post_id`
            AuthorizationError: If the post belongs to another user
            Exception: The last attempt's error once deletion retries are exhausted
        """
        table = await self._locate_post(post_id, user_id)

        async def delete_operation() -> CleanupResult:
            try:
                cleanup = await self.cleanup_service.cleanup_post_assets(post_id, user_id)
            except Exception as e:
                logger.error(
                    f"Asset cleanup failed for post {post_id}: {e}",
                    extra={'post_id': post_id, 'user_id': user_id}
                )
                cleanup = CleanupResult(errors=[str(e)])

            if cleanup.errors:
                logger.warning(
                    f"Asset cleanup for post {post_id} finished with {len(cleanup.errors)} errors",
                    extra={'post_id': post_id, 'errors': cleanup.errors}
                )

            await self.record_store.delete_by_id(table, post_id, user_id)
            return cleanup

        result = await self.retry_service.execute_with_retry(
            f"delete_post_{post_id}_{uuid4().hex}",
            delete_operation,
            SyncKind.PUSH,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
        )

        logger.log_business_event(
            "post_deleted",
            f"Deleted post {post_id} from {table.value}",
            entity_id=post_id,
            entity_type=table.value,
            extra={'user_id': user_id, 'assets_deleted': len(result.deleted_assets)}
        )
        return result

    async def batch_delete_posts(self, post_ids: List[str], user_id: str) -> BatchDeletionReport:
        """Delete several posts concurrently; one failure never affects the others."""
        unique_ids = list(dict.fromkeys(post_ids))
        outcomes = await asyncio.gather(
            *(self._delete_isolated(post_id, user_id) for post_id in unique_ids)
        )

        report = BatchDeletionReport()
        for post_id, error in outcomes:
            if error is None:
                report.deleted.append(post_id)
            else:
                report.failed[post_id] = error

        logger.info(
            f"Batch deletion: {len(report.deleted)} deleted, {len(report.failed)} failed",
            extra={'user_id': user_id, 'deleted': report.deleted, 'failed': list(report.failed)}
        )
        return report

    async def _delete_isolated(self, post_id: str, user_id: str):
        try:
            await self.delete_post(post_id, user_id)
        except Exception as e:
            logger.error(
                f"Failed to delete post {post_id}: {e}",
                extra={'post_id': post_id, 'user_id': user_id}
            )
            return post_id, str(e) or e.__class__.__name__
        return post_id, None

    async def _locate_post(self, post_id: str, user_id: str) -> RecordTable:
        for table in RecordTable.deletable_posts():
            record = await self.record_store.find_any_by_id(table, post_id)
            if not record:
                continue
            owner = record.get(table.schema.owner_column)
            if str(owner) != user_id:
                raise AuthorizationError(
                    message="Unauthorized to delete this post",
                    resource_type=table.value,
                    resource_id=post_id,
                    user_id=user_id,
                )
            return table

        raise NotFoundError(
            message=f"Post {post_id} not found",
            resource_type="community_post",
            resource_id=post_id,
        )
