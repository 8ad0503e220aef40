# 📄 File: app/modules/community/domain/models/asset.py
# 🧭 Purpose (Layman Explanation):
# Describes the uploaded photos we keep in cloud storage - which storage "bucket" they live in,
# which post or profile points at them, and what happened when we tried to clean them up.
# 🧪 Purpose (Technical Summary):
# Value objects for storage garbage collection: the closed BucketName enum, located and
# referenced asset paths, object-store listing metadata, and the append-only CleanupResult.
# 🔗 Dependencies:
# pydantic, datetime, typing, enum
# 🔄 Connected Modules / Calls From:
# path_resolver, bucket_router, reference_scanner, orphan_detector, batch_deleter,
# storage_cleanup_service, Supabase object store, API schemas

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BucketName(str, Enum):
    """
    Closed set of storage buckets the app uploads into.

    UNKNOWN is a sentinel meaning "do not operate"; it is never a real bucket.
    """
    AVATARS = "avatars"
    POSTS = "posts"
    JOURNALS = "journals"
    PLANTS = "plants"
    COMMUNITY_QUESTIONS = "community-questions"
    COMMUNITY_PLANT_SHARES = "community-plant-shares"
    PLANT_IMAGES = "plant-images"
    UNKNOWN = "unknown"

    @classmethod
    def known(cls) -> List["BucketName"]:
        """Every real bucket, in declaration order."""
        return [bucket for bucket in cls if bucket is not cls.UNKNOWN]

    @classmethod
    def parse(cls, value: Optional[str]) -> "BucketName":
        """Map a raw bucket string to a known bucket, or UNKNOWN."""
        if not value or not isinstance(value, str):
            return cls.UNKNOWN
        try:
            bucket = cls(value)
        except ValueError:
            return cls.UNKNOWN
        return bucket

    @property
    def is_known(self) -> bool:
        return self is not BucketName.UNKNOWN


class LocatedPath(BaseModel):
    """A normalized storage path plus the bucket it was found in, when known."""
    model_config = ConfigDict(frozen=True)

    path: str
    bucket: Optional[BucketName] = None


class ReferencedAsset(BaseModel):
    """
    A storage path referenced by a live record.

    Produced transiently by the reference scanner and never persisted.
    """
    model_config = ConfigDict(frozen=True)

    path: str
    source_table: str
    source_record_id: str
    bucket: Optional[BucketName] = None


class StorageObjectMeta(BaseModel):
    """
    One object as reported by an object-store listing.

    `name` is relative to the listed prefix. Read-only mirror of remote state,
    never cached beyond a single sweep.
    """
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    bucket: BucketName
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    size: int = 0

    @property
    def last_modified(self) -> Optional[datetime]:
        """Latest of updated_at/created_at, or None when the store reported neither."""
        stamps = [
            stamp if stamp.tzinfo is not None else stamp.replace(tzinfo=timezone.utc)
            for stamp in (self.updated_at, self.created_at)
            if stamp is not None
        ]
        return max(stamps) if stamps else None


class RemovalResponse(BaseModel):
    """What the object store reported for one remove call."""
    deleted_names: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    total_size: int = 0


class CleanupResult(BaseModel):
    """
    Accumulated outcome of a cleanup run.

    Append-only: results are merged, never partially rolled back, so a result
    always reflects exactly what succeeded.
    """
    deleted_assets: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    total_size: int = 0

    def merge(self, other: "CleanupResult") -> "CleanupResult":
        """Append another result into this one and return self."""
        self.deleted_assets.extend(other.deleted_assets)
        self.errors.extend(other.errors)
        self.total_size += other.total_size
        return self

    @classmethod
    def combine(cls, results: Iterable["CleanupResult"]) -> "CleanupResult":
        combined = cls()
        for result in results:
            combined.merge(result)
        return combined

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
