# 📄 File: app/modules/community/domain/services/storage_cleanup_service.py
# 🧭 Purpose (Layman Explanation):
# The clean-up crew for uploaded photos. When a post is deleted it removes that post's photos,
# and from time to time it sweeps a user's storage folder for old photos nothing uses anymore.
# 🧪 Purpose (Technical Summary):
# Orchestrates ReferenceScanner, OrphanDetector, BucketRouter and BatchDeleter into record-scoped
# asset cleanup and user-scoped orphan sweeps. Partial failures are accumulated in CleanupResult;
# only a failed reference scan aborts a sweep, and it does so before any delete call.
# 🔗 Dependencies:
# RecordStore, ObjectStore, Clock, Settings, structured logging
# 🔄 Connected Modules / Calls From:
# PostDeletionService, storage API endpoints, Celery orphan sweep tasks

from collections import defaultdict
from datetime import timedelta
from typing import Dict, List, Optional

from app.shared.config.settings import Settings, get_settings
from app.shared.core.clock import Clock, system_clock
from app.shared.utils.logging import get_logger

from ..models.asset import BucketName, CleanupResult, StorageObjectMeta
from ..repositories.object_store import ObjectStore
from ..repositories.record_store import RecordStore
from .batch_deleter import BatchDeleter
from .bucket_router import BucketRouter
from .orphan_detector import OrphanDetector, full_path_for
from .reference_scanner import ReferenceScanner

logger = get_logger(__name__)


class StorageCleanupService:
    """
    Domain service for storage garbage collection.

    Guarantees:
    - A path reaches a delete call only after passing the ownership check
    - Record cleanup only deletes paths derived from the record itself
    - Sweeps only delete unreferenced objects older than the age threshold
    - Paths whose bucket cannot be determined are skipped, never guessed
    """

    def __init__(
        self,
        record_store: RecordStore,
        object_store: ObjectStore,
        settings: Optional[Settings] = None,
        clock: Clock = system_clock,
        bucket_router: Optional[BucketRouter] = None,
    ):
        settings = settings or get_settings()

        self.object_store = object_store
        self.reference_scanner = ReferenceScanner(record_store)
        self.orphan_detector = OrphanDetector(clock)
        self.bucket_router = bucket_router or BucketRouter()
        self.batch_deleter = BatchDeleter(object_store)

        self.batch_size: int = settings.STORAGE_CLEANUP_BATCH_SIZE
        self.orphan_age_threshold: timedelta = settings.orphan_age_threshold
        self.list_page_size: int = settings.STORAGE_LIST_PAGE_SIZE

    # =========================================================================
    # RECORD CLEANUP
    # =========================================================================

    async def cleanup_post_assets(self, record_id: str, user_id: str) -> CleanupResult:
        """
        Delete every asset referenced by one post owned by `user_id`.

        Idempotent: a missing or already-cleaned record yields an empty result.
        Scan and delete failures are reported in `errors`, never raised.
        """
        result = CleanupResult()

        try:
            assets = await self.reference_scanner.scan_for_record(record_id, user_id)
        except Exception as e:
            logger.error(
                f"Failed to scan assets for record {record_id}: {e}",
                extra={'record_id': record_id, 'user_id': user_id}
            )
            result.errors.append(f"Scan failed for record {record_id}: {e}")
            return result

        if not assets:
            return result

        by_bucket: Dict[BucketName, List[str]] = defaultdict(list)
        for asset in assets:
            bucket = self.bucket_router.route(asset.path, asset.bucket)
            if not bucket.is_known:
                continue
            by_bucket[bucket].append(asset.path)

        for bucket, paths in by_bucket.items():
            batch_result = await self.batch_deleter.delete_batches(
                paths, bucket, self.batch_size, owner_id=user_id
            )
            result.merge(batch_result)

        logger.log_business_event(
            "post_assets_cleaned",
            f"Cleaned {len(result.deleted_assets)} assets for record {record_id}",
            entity_id=record_id,
            entity_type="community_post",
            extra={
                'user_id': user_id,
                'deleted_count': len(result.deleted_assets),
                'error_count': len(result.errors),
                'total_size': result.total_size,
            }
        )
        return result

    # =========================================================================
    # ORPHAN SWEEP
    # =========================================================================

    async def cleanup_orphaned_assets(self, user_id: str) -> CleanupResult:
        """
        Sweep every known bucket under "<user_id>/" and delete orphaned objects.

        A listing failure on one bucket is recorded in `errors` and the sweep
        continues with the other buckets.

        Raises:
            ReferenceScanError: If the referenced set could not be fully built.
                Nothing is deleted in that case.
        """
        result = CleanupResult()

        if not user_id or "/" in user_id:
            logger.warning("Refusing orphan sweep for invalid user id", extra={'user_id': repr(user_id)})
            result.errors.append(f"Invalid user id: {user_id!r}")
            return result

        listed: Dict[BucketName, List[StorageObjectMeta]] = {}
        for bucket in BucketName.known():
            try:
                listed[bucket] = await self._list_all(bucket, f"{user_id}/")
            except Exception as e:
                logger.error(
                    f"Failed to list {bucket.value} for user {user_id}: {e}",
                    extra={'bucket': bucket.value, 'user_id': user_id}
                )
                result.errors.append(f"List failed for {bucket.value}: {e}")

        # listed before scanning so references written meanwhile are still seen
        referenced = await self.reference_scanner.scan_all_for_user(user_id)

        for bucket, objects in listed.items():
            orphans = self.orphan_detector.find_orphans(
                user_id, objects, referenced, self.orphan_age_threshold
            )
            if not orphans:
                continue

            # the listing bucket is authoritative for listed objects
            paths = [full_path_for(user_id, orphan) for orphan in orphans]
            batch_result = await self.batch_deleter.delete_batches(
                paths, bucket, self.batch_size, owner_id=user_id
            )
            result.merge(batch_result)

        logger.log_business_event(
            "orphaned_assets_swept",
            f"Swept {len(result.deleted_assets)} orphaned assets for user {user_id}",
            entity_id=user_id,
            entity_type="user",
            extra={
                'deleted_count': len(result.deleted_assets),
                'error_count': len(result.errors),
                'total_size': result.total_size,
                'referenced_count': len(referenced),
            }
        )
        return result

    async def _list_all(self, bucket: BucketName, prefix: str) -> List[StorageObjectMeta]:
        objects: List[StorageObjectMeta] = []
        offset = 0
        while True:
            page = await self.object_store.list(bucket, prefix, limit=self.list_page_size, offset=offset)
            objects.extend(page)
            if len(page) < self.list_page_size:
                return objects
            offset += self.list_page_size
