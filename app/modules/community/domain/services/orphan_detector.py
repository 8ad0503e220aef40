# 📄 File: app/modules/community/domain/services/orphan_detector.py
# 🧭 Purpose (Layman Explanation):
# Compares the photos a user actually has in storage with the photos their posts still use,
# and picks out old, unused ones. Brand-new photos are left alone in case a post is still being saved.
# 🧪 Purpose (Technical Summary):
# Set difference of listed objects against the referenced path set, gated by ownership and by an
# age threshold measured from max(updated_at, created_at) on an injected Clock.
# 🔗 Dependencies:
# datetime, Clock, path_resolver, ownership
# 🔄 Connected Modules / Calls From:
# StorageCleanupService.cleanup_orphaned_assets

from datetime import datetime, timedelta, timezone
from typing import Collection, Iterable, List, Optional

from app.shared.core.clock import Clock, system_clock
from app.shared.utils.logging import get_logger

from ..models.asset import StorageObjectMeta
from .ownership import is_owned_by
from .path_resolver import normalize

logger = get_logger(__name__)


class OrphanDetector:
    """Selects unreferenced objects older than a grace period."""

    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    def find_orphans(
        self,
        user_id: str,
        user_assets: Iterable[StorageObjectMeta],
        referenced: Collection[str],
        age_threshold: timedelta,
        now: Optional[datetime] = None,
    ) -> List[StorageObjectMeta]:
        """
        Objects under the user's prefix that nothing references and that are old enough.

        Args:
            user_id: Owner whose prefix was listed
            user_assets: Listing results; names are relative to "<user_id>/"
            referenced: Normalized referenced paths (membership only)
            age_threshold: Objects younger than this are never orphans
            now: Reference instant, defaults to the injected clock

        Returns:
            Orphaned objects in listing order
        """
        current = _as_utc(now or self.clock.now())
        orphans: List[StorageObjectMeta] = []

        for asset in user_assets:
            if not asset.name:
                continue

            full_path = full_path_for(user_id, asset)
            if not is_owned_by(full_path, user_id):
                continue
            if full_path in referenced:
                continue

            last_modified = asset.last_modified
            if last_modified is None:
                # folder placeholders carry no timestamps
                continue

            if current - _as_utc(last_modified) > age_threshold:
                orphans.append(asset)

        logger.debug(
            f"Found {len(orphans)} orphaned assets for user {user_id}",
            extra={'user_id': user_id, 'orphan_count': len(orphans)}
        )
        return orphans


def full_path_for(user_id: str, asset: StorageObjectMeta) -> str:
    """Normalized storage path of a listed object."""
    return normalize(f"{user_id}/{asset.name}")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
