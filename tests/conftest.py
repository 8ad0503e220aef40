"""Shared fixtures for the storage maintenance tests.

Environment defaults are set before any app import so Settings can load
without a .env file. Record and object stores are replaced by in-memory
fakes with failure injection; no Supabase project is needed.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402
from urllib.parse import quote  # noqa: E402

import pytest  # noqa: E402

from app.modules.community.domain.models.asset import (  # noqa: E402
    BucketName,
    RemovalResponse,
    StorageObjectMeta,
)
from app.modules.community.domain.models.record import RecordTable  # noqa: E402
from app.modules.community.domain.repositories.object_store import ObjectStore  # noqa: E402
from app.modules.community.domain.repositories.record_store import Record, RecordStore  # noqa: E402
from app.shared.config.settings import Settings  # noqa: E402
from app.shared.core.clock import FixedClock  # noqa: E402

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
PUBLIC_BASE = "https://test-project.supabase.co/storage/v1/object/public"


def public_url(bucket: str, path: str) -> str:
    return f"{PUBLIC_BASE}/{bucket}/{path}"


class FakeRecordStore(RecordStore):
    """In-memory record store keyed by table."""

    def __init__(self):
        self.rows: Dict[RecordTable, List[Record]] = {table: [] for table in RecordTable}
        self.read_failures: Dict[RecordTable, Exception] = {}
        self.delete_failures: List[Exception] = []
        self.deleted: List[tuple] = []

    def add(self, table: RecordTable, **row: Any) -> Record:
        self.rows[table].append(dict(row))
        return row

    def _check_read(self, table: RecordTable) -> None:
        if table in self.read_failures:
            raise self.read_failures[table]

    def _find(self, table: RecordTable, record_id: str) -> Optional[Record]:
        id_column = table.schema.id_column
        for row in self.rows[table]:
            if str(row.get(id_column)) == record_id:
                return row
        return None

    async def find_by_id(self, table, record_id, owner_id):
        self._check_read(table)
        row = self._find(table, record_id)
        if row and row.get(table.schema.owner_column) == owner_id:
            return dict(row)
        return None

    async def find_any_by_id(self, table, record_id):
        self._check_read(table)
        row = self._find(table, record_id)
        return dict(row) if row else None

    async def find_all_by_owner(self, table, owner_id):
        self._check_read(table)
        owner_column = table.schema.owner_column
        return [dict(row) for row in self.rows[table] if row.get(owner_column) == owner_id]

    async def delete_by_id(self, table, record_id, owner_id):
        if self.delete_failures:
            raise self.delete_failures.pop(0)
        row = self._find(table, record_id)
        if row and row.get(table.schema.owner_column) == owner_id:
            self.rows[table].remove(row)
        self.deleted.append((table, record_id))

    async def update_by_id(self, table, record_id, patch, owner_id):
        row = self._find(table, record_id)
        if not row or row.get(table.schema.owner_column) != owner_id:
            return None
        row.update(patch)
        return dict(row)

    async def list_owner_ids(self, table):
        self._check_read(table)
        owner_column = table.schema.owner_column
        return list(dict.fromkeys(row[owner_column] for row in self.rows[table]))


class FakeObjectStore(ObjectStore):
    """In-memory object store; objects are keyed by full path per bucket."""

    def __init__(self):
        self.objects: Dict[BucketName, Dict[str, StorageObjectMeta]] = {}
        self.list_failures: Dict[BucketName, Exception] = {}
        self.remove_failures: Dict[int, Exception] = {}
        self.remove_calls: List[tuple] = []
        self.list_calls: List[tuple] = []

    def put(
        self,
        bucket: BucketName,
        path: str,
        age: Optional[timedelta] = timedelta(days=2),
        size: int = 100,
    ) -> None:
        stamp = NOW - age if age is not None else None
        self.objects.setdefault(bucket, {})[path] = StorageObjectMeta(
            name=path, bucket=bucket, created_at=stamp, updated_at=stamp, size=size
        )

    def paths(self, bucket: BucketName) -> List[str]:
        return sorted(self.objects.get(bucket, {}))

    async def list(self, bucket, prefix, limit=1000, offset=0):
        self.list_calls.append((bucket, prefix, limit, offset))
        if bucket in self.list_failures:
            raise self.list_failures[bucket]
        matching = sorted(
            (path, meta) for path, meta in self.objects.get(bucket, {}).items()
            if path.startswith(prefix)
        )
        page = matching[offset:offset + limit]
        return [meta.model_copy(update={"name": path[len(prefix):]}) for path, meta in page]

    async def remove(self, bucket, paths):
        call_number = len(self.remove_calls) + 1
        self.remove_calls.append((bucket, list(paths)))
        if call_number in self.remove_failures:
            raise self.remove_failures[call_number]

        response = RemovalResponse()
        stored = self.objects.get(bucket, {})
        for path in paths:
            meta = stored.pop(path, None)
            if meta is not None:
                response.deleted_names.append(path)
                response.total_size += meta.size
        return response

    async def get_public_url(self, bucket, path):
        return public_url(bucket.value, quote(path))


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def no_sleep():
    """Records requested delays instead of sleeping."""
    delays: List[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    sleep.delays = delays
    return sleep


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        STORAGE_CLEANUP_BATCH_SIZE=50,
        STORAGE_ORPHAN_AGE_THRESHOLD_HOURS=24,
        STORAGE_LIST_PAGE_SIZE=1000,
        DELETION_RETRY_MAX_RETRIES=3,
        DELETION_RETRY_BASE_DELAY=0.01,
    )
