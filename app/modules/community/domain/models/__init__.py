"""
Community domain models.
Value objects for media references, cleanup results and record table schemas.
"""

from .asset import (
    BucketName,
    CleanupResult,
    LocatedPath,
    ReferencedAsset,
    RemovalResponse,
    StorageObjectMeta,
)
from .record import RECORD_SCHEMAS, RecordSchema, RecordTable

__all__ = [
    "BucketName",
    "CleanupResult",
    "LocatedPath",
    "ReferencedAsset",
    "RemovalResponse",
    "StorageObjectMeta",
    "RECORD_SCHEMAS",
    "RecordSchema",
    "RecordTable",
]
