"""
Community domain services.
Storage garbage collection (path resolution, ownership, routing, scanning,
orphan detection, batched deletion) and post deletion.
"""

from .batch_deleter import BatchDeleter
from .bucket_router import BucketRouter
from .orphan_detector import OrphanDetector
from .ownership import is_owned_by
from .path_resolver import extract_embedded, extract_located_path, extract_path, normalize
from .post_deletion_service import BatchDeletionReport, PostDeletionService
from .reference_scanner import ReferenceScanner
from .storage_cleanup_service import StorageCleanupService

__all__ = [
    "BatchDeleter",
    "BucketRouter",
    "OrphanDetector",
    "is_owned_by",
    "extract_embedded",
    "extract_located_path",
    "extract_path",
    "normalize",
    "BatchDeletionReport",
    "PostDeletionService",
    "ReferenceScanner",
    "StorageCleanupService",
]
