# 📄 File: app/modules/community/domain/services/bucket_router.py
# 🧭 Purpose (Layman Explanation):
# Works out which storage bucket (avatars, posts, plants...) a photo lives in. If it cannot tell
# for sure, it says "unknown" so we never delete a file from the wrong place.
# 🧪 Purpose (Technical Summary):
# Maps a storage path to a BucketName. A bucket threaded from the source URL wins, then a public
# URL carried in the path itself, then an ordered (pattern -> bucket) heuristic table. No match
# yields BucketName.UNKNOWN and callers skip the path.
# 🔗 Dependencies:
# typing, BucketName, path_resolver
# 🔄 Connected Modules / Calls From:
# StorageCleanupService (record cleanup and orphan sweep)

from typing import Optional, Sequence, Tuple

from app.shared.utils.logging import get_logger

from ..models.asset import BucketName
from .path_resolver import extract_located_path, normalize

logger = get_logger(__name__)

# Checked in order; first substring hit wins.
DEFAULT_BUCKET_PATTERNS: Tuple[Tuple[str, BucketName], ...] = (
    ("/avatar/", BucketName.AVATARS),
    ("_avatar_", BucketName.AVATARS),
    ("/post/", BucketName.POSTS),
    ("_post_", BucketName.POSTS),
    ("/journal/", BucketName.JOURNALS),
    ("_journal_", BucketName.JOURNALS),
    ("/plant/", BucketName.PLANTS),
    ("_plant_", BucketName.PLANTS),
    ("/question/", BucketName.COMMUNITY_QUESTIONS),
    ("_question_", BucketName.COMMUNITY_QUESTIONS),
    ("/share/", BucketName.COMMUNITY_PLANT_SHARES),
    ("_share_", BucketName.COMMUNITY_PLANT_SHARES),
)


class BucketRouter:
    """Resolves the bucket for a storage path, declining to guess."""

    def __init__(self, patterns: Sequence[Tuple[str, BucketName]] = DEFAULT_BUCKET_PATTERNS):
        self.patterns = tuple(patterns)

    def route(self, path: str, source_bucket: Optional[BucketName] = None) -> BucketName:
        """
        Determine the bucket for `path`.

        Args:
            path: Storage path or public URL
            source_bucket: Bucket parsed from the URL the path was extracted from

        Returns:
            A known BucketName, or BucketName.UNKNOWN when nothing matches
        """
        if source_bucket is not None and source_bucket.is_known:
            return source_bucket

        located = extract_located_path(path)
        if located is not None and located.bucket is not None:
            return located.bucket

        candidate = normalize(path)
        for pattern, bucket in self.patterns:
            if pattern in candidate:
                return bucket

        logger.warning(
            f"Could not determine bucket for path, skipping: {candidate}",
            extra={'path': candidate}
        )
        return BucketName.UNKNOWN
