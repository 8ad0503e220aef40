# 📄 File: app/modules/community/domain/services/batch_deleter.py
# 🧭 Purpose (Layman Explanation):
# Deletes photos from one storage bucket in small groups. If one group fails, the other groups
# still get deleted and the failure is written down instead of stopping everything.
# 🧪 Purpose (Technical Summary):
# Chunks validated paths into fixed-size batches and issues one ObjectStore.remove per batch,
# sequentially, accumulating deleted names, sizes and per-batch errors into a CleanupResult.
# 🔗 Dependencies:
# ObjectStore, CleanupResult, ownership, path_resolver
# 🔄 Connected Modules / Calls From:
# StorageCleanupService

from typing import Iterable, List, Optional

from app.shared.utils.logging import get_logger

from ..models.asset import BucketName, CleanupResult
from ..repositories.object_store import ObjectStore
from .ownership import is_owned_by
from .path_resolver import normalize

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 50


class BatchDeleter:
    """Bucket-scoped batched removal with per-batch error isolation."""

    def __init__(self, object_store: ObjectStore):
        self.object_store = object_store

    async def delete_batches(
        self,
        paths: Iterable[str],
        bucket: BucketName,
        batch_size: int = DEFAULT_BATCH_SIZE,
        owner_id: Optional[str] = None,
    ) -> CleanupResult:
        """
        Remove `paths` from `bucket` in chunks of `batch_size`.

        Args:
            paths: Storage paths to remove
            bucket: Target bucket; UNKNOWN results in no remove calls
            batch_size: Maximum paths per remove call
            owner_id: When given, paths not owned by this user are dropped first

        Returns:
            CleanupResult with deleted names, one error per failed batch and
            the total reported size
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        result = CleanupResult()

        if not bucket.is_known:
            logger.warning(
                "Refusing to delete from unknown bucket",
                extra={'path_count': len(list(paths))}
            )
            return result

        validated = self._prepare(paths, owner_id)
        if not validated:
            return result

        batches = [validated[i:i + batch_size] for i in range(0, len(validated), batch_size)]

        for index, batch in enumerate(batches, start=1):
            try:
                response = await self.object_store.remove(bucket, batch)
            except Exception as e:
                message = f"Batch {index}/{len(batches)} delete error in {bucket.value}: {e}"
                logger.error(
                    message,
                    extra={'bucket': bucket.value, 'batch': index, 'batch_size': len(batch)}
                )
                result.errors.append(message)
                continue

            result.deleted_assets.extend(response.deleted_names)
            result.total_size += response.total_size
            for error in response.errors:
                result.errors.append(f"{bucket.value}: {error}")

        logger.info(
            f"Deleted {len(result.deleted_assets)} of {len(validated)} assets from {bucket.value}",
            extra={
                'bucket': bucket.value,
                'deleted_count': len(result.deleted_assets),
                'error_count': len(result.errors),
                'total_size': result.total_size,
            }
        )
        return result

    @staticmethod
    def _prepare(paths: Iterable[str], owner_id: Optional[str]) -> List[str]:
        prepared: List[str] = []
        seen = set()
        for raw in paths:
            path = normalize(raw)
            if not path or path in seen:
                continue
            if owner_id is not None and not is_owned_by(path, owner_id):
                continue
            seen.add(path)
            prepared.append(path)
        return prepared
