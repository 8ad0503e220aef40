# 📄 File: app/modules/community/infrastructure/database/supabase_record_store.py
# 🧭 Purpose (Layman Explanation):
# Talks to the app's database to read, change and delete community posts and profiles,
# always filtering by the user who owns them.
# 🧪 Purpose (Technical Summary):
# Concrete RecordStore on the supabase-py AsyncClient (PostgREST). Every owner-scoped call adds an
# eq() filter on the table's owner column; failures are wrapped in RepositoryError.
# 🔗 Dependencies:
# - supabase (AsyncClient)
# - app.modules.community.domain.repositories.record_store (interface)
# - app.modules.community.domain.models.record (RecordTable schemas)
# 🔄 Connected Modules / Calls From:
# - presentation.dependencies (request-scoped wiring)
# - background_jobs.tasks.storage_cleanup (scheduled sweeps)

from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from app.shared.core.exceptions import RepositoryError
from app.shared.utils.logging import get_logger

from ...domain.models.record import RecordTable
from ...domain.repositories.record_store import Record, RecordStore

logger = get_logger(__name__)

OWNER_PAGE_SIZE = 1000


class SupabaseRecordStore(RecordStore):
    """RecordStore implementation backed by Supabase PostgREST."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def find_by_id(self, table: RecordTable, record_id: str, owner_id: str) -> Optional[Record]:
        schema = table.schema
        try:
            response = await (
                self.client.table(table.value)
                .select(schema.select_columns)
                .eq(schema.id_column, record_id)
                .eq(schema.owner_column, owner_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise self._error("find_by_id", table, e) from e

        return _single_row(response)

    async def find_any_by_id(self, table: RecordTable, record_id: str) -> Optional[Record]:
        schema = table.schema
        try:
            response = await (
                self.client.table(table.value)
                .select(f"{schema.id_column},{schema.owner_column}")
                .eq(schema.id_column, record_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise self._error("find_any_by_id", table, e) from e

        return _single_row(response)

    async def find_all_by_owner(self, table: RecordTable, owner_id: str) -> List[Record]:
        schema = table.schema
        try:
            response = await (
                self.client.table(table.value)
                .select(schema.select_columns)
                .eq(schema.owner_column, owner_id)
                .execute()
            )
        except Exception as e:
            raise self._error("find_all_by_owner", table, e) from e

        return list(response.data or [])

    async def delete_by_id(self, table: RecordTable, record_id: str, owner_id: str) -> None:
        schema = table.schema
        try:
            await (
                self.client.table(table.value)
                .delete()
                .eq(schema.id_column, record_id)
                .eq(schema.owner_column, owner_id)
                .execute()
            )
        except Exception as e:
            raise self._error("delete_by_id", table, e) from e

        logger.info(
            f"Deleted {table.value} record {record_id}",
            extra={'table': table.value, 'record_id': record_id, 'owner_id': owner_id}
        )

    async def update_by_id(
        self,
        table: RecordTable,
        record_id: str,
        patch: Dict[str, Any],
        owner_id: str,
    ) -> Optional[Record]:
        schema = table.schema
        # ownership and identity are never patchable
        safe_patch = {
            key: value for key, value in patch.items()
            if key not in (schema.id_column, schema.owner_column)
        }
        if not safe_patch:
            return await self.find_by_id(table, record_id, owner_id)

        try:
            response = await (
                self.client.table(table.value)
                .update(safe_patch)
                .eq(schema.id_column, record_id)
                .eq(schema.owner_column, owner_id)
                .execute()
            )
        except Exception as e:
            raise self._error("update_by_id", table, e) from e

        rows = response.data or []
        return rows[0] if rows else None

    async def list_owner_ids(self, table: RecordTable) -> List[str]:
        owner_column = table.schema.owner_column
        owners: Dict[str, None] = {}
        start = 0

        while True:
            try:
                response = await (
                    self.client.table(table.value)
                    .select(owner_column)
                    .order(owner_column)
                    .range(start, start + OWNER_PAGE_SIZE - 1)
                    .execute()
                )
            except Exception as e:
                raise self._error("list_owner_ids", table, e) from e

            rows = response.data or []
            for row in rows:
                owner = row.get(owner_column)
                if owner:
                    owners[str(owner)] = None

            if len(rows) < OWNER_PAGE_SIZE:
                return list(owners)
            start += OWNER_PAGE_SIZE

    @staticmethod
    def _error(operation: str, table: RecordTable, error: Exception) -> RepositoryError:
        logger.error(
            f"Record store {operation} failed on {table.value}: {error}",
            extra={'operation': operation, 'table': table.value}
        )
        return RepositoryError(
            message=f"Record store {operation} failed on {table.value}: {error}",
            operation=operation,
            entity=table.value,
        )


def _single_row(response) -> Optional[Record]:
    # maybe_single() yields None or an empty payload when no row matches
    if response is None:
        return None
    data = getattr(response, "data", None)
    if isinstance(data, list):
        return data[0] if data else None
    return data or None
