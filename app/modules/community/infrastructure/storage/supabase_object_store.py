# 📄 File: app/modules/community/infrastructure/storage/supabase_object_store.py

# 🧭 Purpose (Layman Explanation):
# Handles looking inside the cloud photo storage: listing a user's uploaded files
# and deleting groups of files that are no longer needed.

# 🧪 Purpose (Technical Summary):
# ObjectStore implementation over the supabase-py async storage client. Converts listing
# entries into StorageObjectMeta (folder placeholders keep null timestamps), turns remove
# responses into RemovalResponse, and wraps backend failures in StorageError.

# 🔗 Dependencies:
# - supabase: AsyncClient storage API
# - app.shared.core.exceptions.StorageError

# 🔄 Connected Modules / Calls From:
# Called by: BatchDeleter, StorageCleanupService
# Connects to: Supabase Storage buckets (avatars, posts, journals, plants, community-*)

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from app.shared.core.exceptions import StorageError
from app.shared.utils.logging import get_logger

from ...domain.models.asset import BucketName, RemovalResponse, StorageObjectMeta
from ...domain.repositories.object_store import ObjectStore

logger = get_logger(__name__)


class SupabaseObjectStore(ObjectStore):
    """
    Supabase Storage access for the cleanup subsystem.

    Only list, remove and public URL generation are exposed; uploads belong
    to the clients.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def list(
        self,
        bucket: BucketName,
        prefix: str,
        limit: int = 1000,
        offset: int = 0,
    ) -> List[StorageObjectMeta]:
        """List one page of objects under `prefix`."""
        _require_known(bucket, "list")
        try:
            response = await self.client.storage.from_(bucket.value).list(
                prefix.rstrip("/"),
                {
                    "limit": limit,
                    "offset": offset,
                    "sortBy": {"column": "name", "order": "asc"},
                },
            )
        except Exception as e:
            logger.error(
                f"File listing failed in {bucket.value}: {e}",
                extra={'bucket': bucket.value, 'prefix': prefix, 'offset': offset}
            )
            raise StorageError(
                f"Listing failed: {e}",
                operation="list",
                bucket=bucket.value,
                storage_path=prefix,
            ) from e

        return [self._to_meta(bucket, item) for item in response or []]

    async def remove(self, bucket: BucketName, paths: List[str]) -> RemovalResponse:
        """Remove a batch of paths in one call."""
        _require_known(bucket, "remove")
        if not paths:
            return RemovalResponse()

        try:
            response = await self.client.storage.from_(bucket.value).remove(list(paths))
        except Exception as e:
            logger.error(
                f"File deletion failed in {bucket.value}: {e}",
                extra={'bucket': bucket.value, 'path_count': len(paths)}
            )
            raise StorageError(
                f"Deletion failed: {e}",
                operation="remove",
                bucket=bucket.value,
            ) from e

        removal = RemovalResponse()
        for item in response or []:
            if not isinstance(item, dict):
                continue
            if item.get("error"):
                removal.errors.append(f"{item.get('name', '?')}: {item['error']}")
                continue
            name = item.get("name")
            if name:
                removal.deleted_names.append(name)
            removal.total_size += _size_of(item)

        logger.debug(
            f"Removed {len(removal.deleted_names)} of {len(paths)} files from {bucket.value}",
            extra={'bucket': bucket.value, 'deleted': len(removal.deleted_names)}
        )
        return removal

    async def get_public_url(self, bucket: BucketName, path: str) -> str:
        _require_known(bucket, "get_public_url")
        return await self.client.storage.from_(bucket.value).get_public_url(path.lstrip("/"))

    @staticmethod
    def _to_meta(bucket: BucketName, item: Dict[str, Any]) -> StorageObjectMeta:
        return StorageObjectMeta(
            name=item.get("name") or None,
            bucket=bucket,
            created_at=_parse_timestamp(item.get("created_at")),
            updated_at=_parse_timestamp(item.get("updated_at")),
            size=_size_of(item),
        )


def _require_known(bucket: BucketName, operation: str) -> None:
    if not bucket.is_known:
        raise StorageError(
            "Refusing to operate on unknown bucket",
            operation=operation,
            bucket=bucket.value,
        )


def _size_of(item: Dict[str, Any]) -> int:
    metadata = item.get("metadata") or {}
    try:
        return int(metadata.get("size") or 0)
    except (TypeError, ValueError):
        return 0


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable storage timestamp: {value}", extra={'timestamp': value})
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
