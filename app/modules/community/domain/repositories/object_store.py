# 📄 File: app/modules/community/domain/repositories/object_store.py
# 🧭 Purpose (Layman Explanation):
# Defines what we need from the photo storage service: see which files are in a folder,
# delete a group of files, and build a public link for a file.
# 🧪 Purpose (Technical Summary):
# Bucket-scoped object storage interface used by the cleanup services. Implementations raise
# StorageError on transport or backend failure and never retry on their own.
# 🔗 Dependencies:
# abc, typing, asset value objects
# 🔄 Connected Modules / Calls From:
# BatchDeleter, StorageCleanupService, SupabaseObjectStore

from abc import ABC, abstractmethod
from typing import List

from ..models.asset import BucketName, RemovalResponse, StorageObjectMeta


class ObjectStore(ABC):
    """Repository interface for object storage operations."""

    @abstractmethod
    async def list(
        self,
        bucket: BucketName,
        prefix: str,
        limit: int = 1000,
        offset: int = 0,
    ) -> List[StorageObjectMeta]:
        """
        List objects directly under `prefix` in `bucket`.

        Args:
            bucket: Known bucket to list
            prefix: Folder prefix, e.g. "<user_id>/"
            limit: Page size
            offset: Number of objects to skip

        Returns:
            One page of objects; names are relative to `prefix`

        Raises:
            StorageError: If the listing call fails
        """
        pass

    @abstractmethod
    async def remove(self, bucket: BucketName, paths: List[str]) -> RemovalResponse:
        """
        Remove the given paths from `bucket` in a single call.

        Raises:
            StorageError: If the remove call fails as a whole
        """
        pass

    @abstractmethod
    async def get_public_url(self, bucket: BucketName, path: str) -> str:
        """Percent-encoded public URL for `path` in `bucket`."""
        pass
