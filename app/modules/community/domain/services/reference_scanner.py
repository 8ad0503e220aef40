# 📄 File: app/modules/community/domain/services/reference_scanner.py
# 🧭 Purpose (Layman Explanation):
# Finds every photo that a user's posts, questions, plant shares and profile still point at,
# so the cleanup job knows which photos are in use and must be kept.
# 🧪 Purpose (Technical Summary):
# Reads every column that can embed a storage reference (direct URL, URL array, free-text content)
# through the RecordStore, resolves each value with path_resolver, drops anything failing the
# ownership check and returns de-duplicated normalized paths with their source bucket threaded.
# 🔗 Dependencies:
# asyncio, RecordStore, path_resolver, ownership, ReferenceScanError
# 🔄 Connected Modules / Calls From:
# StorageCleanupService.cleanup_post_assets, StorageCleanupService.cleanup_orphaned_assets

import asyncio
from typing import Any, Dict, Iterable, List

from app.shared.core.exceptions import ReferenceScanError
from app.shared.utils.logging import get_logger

from ..models.asset import LocatedPath, ReferencedAsset
from ..models.record import RecordTable
from ..repositories.record_store import Record, RecordStore
from .ownership import is_owned_by
from .path_resolver import extract_embedded, extract_located_path, normalize

logger = get_logger(__name__)


class ReferenceScanner:
    """
    Builds the set of storage paths referenced by live records.

    Only paths that pass the ownership check for the scanning user are ever
    returned, so a record embedding another user's URL cannot widen the
    set of objects a cleanup may consider.
    """

    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    async def scan_for_record(self, record_id: str, user_id: str) -> List[ReferencedAsset]:
        """
        Referenced assets of one post owned by `user_id`.

        Tries each post table in turn since an id belongs to exactly one of them.
        A missing record yields an empty list.

        Raises:
            RepositoryError: If the record store lookup fails
        """
        for table in RecordTable.deletable_posts():
            record = await self.record_store.find_by_id(table, record_id, user_id)
            if record:
                assets = self.extract_references(table, record, user_id)
                logger.debug(
                    f"Found {len(assets)} assets for record {record_id}",
                    extra={'record_id': record_id, 'table': table.value, 'user_id': user_id}
                )
                return assets

        logger.info(
            f"Record {record_id} not found for user {user_id}, nothing to scan",
            extra={'record_id': record_id, 'user_id': user_id}
        )
        return []

    async def scan_all_for_user(self, user_id: str) -> Dict[str, str]:
        """
        Every path referenced by any record the user owns, mapped to its source table.

        Raises:
            ReferenceScanError: If any table could not be read. A partial map is
                never returned.
        """
        tables = list(RecordTable)
        outcomes = await asyncio.gather(
            *(self._fetch_owned(table, user_id) for table in tables),
            return_exceptions=True,
        )

        referenced: Dict[str, str] = {}
        failed_tables: Dict[str, str] = {}

        for table, outcome in zip(tables, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                failed_tables[table.value] = str(outcome)
                continue
            for record in outcome:
                for asset in self.extract_references(table, record, user_id):
                    referenced.setdefault(asset.path, table.value)

        if failed_tables:
            logger.error(
                f"Reference scan failed for user {user_id}",
                extra={'user_id': user_id, 'failed_tables': failed_tables}
            )
            raise ReferenceScanError(user_id, failed_tables)

        logger.debug(
            f"User {user_id} references {len(referenced)} assets",
            extra={'user_id': user_id, 'referenced_count': len(referenced)}
        )
        return referenced

    async def _fetch_owned(self, table: RecordTable, user_id: str) -> List[Record]:
        if table.schema.singleton_per_owner:
            record = await self.record_store.find_by_id(table, user_id, user_id)
            return [record] if record else []
        return await self.record_store.find_all_by_owner(table, user_id)

    # =========================================================================
    # EXTRACTION
    # =========================================================================

    def extract_references(self, table: RecordTable, record: Record, user_id: str) -> List[ReferencedAsset]:
        """Owned, normalized, de-duplicated references found in one row."""
        schema = table.schema
        record_id = str(record.get(schema.id_column, ""))

        candidates: List[LocatedPath] = []
        for column in schema.direct_columns:
            candidates.extend(self._resolve_values([record.get(column)]))
        for column in schema.array_columns:
            candidates.extend(self._resolve_values(_as_list(record.get(column))))
        for column in schema.content_columns:
            candidates.extend(extract_embedded(record.get(column)))

        assets: Dict[str, ReferencedAsset] = {}
        for located in candidates:
            path = normalize(located.path)
            if not is_owned_by(path, user_id):
                continue
            existing = assets.get(path)
            if existing is None or (existing.bucket is None and located.bucket is not None):
                assets[path] = ReferencedAsset(
                    path=path,
                    source_table=table.value,
                    source_record_id=record_id,
                    bucket=located.bucket,
                )

        return list(assets.values())

    @staticmethod
    def _resolve_values(values: Iterable[Any]) -> List[LocatedPath]:
        resolved = []
        for value in values:
            located = extract_located_path(value)
            if located is not None:
                resolved.append(located)
        return resolved


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []
