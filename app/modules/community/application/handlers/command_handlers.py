# 📄 File: app/modules/community/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# Carries out the post deletion and storage sweep requests by handing them to the right domain
# service, tagging every log line with who asked.
# 🧪 Purpose (Technical Summary):
# CQRS command handlers for DeletePostCommand, BatchDeletePostsCommand and
# SweepOrphanedAssetsCommand. Handlers own the logging context; domain services own the rules.
# 🔗 Dependencies:
# Domain services, application commands, structured logging
# 🔄 Connected Modules / Calls From:
# presentation.api.v1.posts, presentation.api.v1.storage, background_jobs.tasks.storage_cleanup

from app.shared.utils.logging import get_logger, log_context

from ..commands.delete_post import BatchDeletePostsCommand, DeletePostCommand
from ..commands.sweep_orphans import SweepOrphanedAssetsCommand
from ...domain.models.asset import CleanupResult
from ...domain.services.post_deletion_service import BatchDeletionReport, PostDeletionService
from ...domain.services.storage_cleanup_service import StorageCleanupService

__all__ = [
    "DeletePostCommandHandler",
    "BatchDeletePostsCommandHandler",
    "SweepOrphanedAssetsCommandHandler",
]

logger = get_logger(__name__)


class DeletePostCommandHandler:
    """Handler for deleting a single community post."""

    def __init__(self, post_deletion_service: PostDeletionService):
        self.post_deletion_service = post_deletion_service

    async def handle(self, command: DeletePostCommand) -> CleanupResult:
        with log_context(user_id=command.user_id):
            logger.info(
                f"Handling post deletion for {command.post_id}",
                extra={'post_id': command.post_id}
            )
            return await self.post_deletion_service.delete_post(command.post_id, command.user_id)


class BatchDeletePostsCommandHandler:
    """Handler for deleting several community posts at once."""

    def __init__(self, post_deletion_service: PostDeletionService):
        self.post_deletion_service = post_deletion_service

    async def handle(self, command: BatchDeletePostsCommand) -> BatchDeletionReport:
        with log_context(user_id=command.user_id):
            logger.info(
                f"Handling batch deletion of {len(command.post_ids)} posts",
                extra={'post_count': len(command.post_ids)}
            )
            return await self.post_deletion_service.batch_delete_posts(command.post_ids, command.user_id)


class SweepOrphanedAssetsCommandHandler:
    """Handler for sweeping a user's orphaned uploads."""

    def __init__(self, cleanup_service: StorageCleanupService):
        self.cleanup_service = cleanup_service

    async def handle(self, command: SweepOrphanedAssetsCommand) -> CleanupResult:
        with log_context(user_id=command.user_id):
            logger.info(
                f"Handling orphan sweep for user {command.user_id}",
                extra={'triggered_by': command.triggered_by}
            )
            return await self.cleanup_service.cleanup_orphaned_assets(command.user_id)
