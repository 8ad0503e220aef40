# 📄 File: app/modules/community/domain/repositories/record_store.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for reading, changing and deleting saved community posts and profiles,
# always on behalf of a specific user so nobody can touch someone else's records.
# 🧪 Purpose (Technical Summary):
# Repository interface for owner-scoped row access keyed by (table, id, owner). Rows are returned
# as plain dicts because the cleanup services only read the columns named by RecordSchema.
# 🔗 Dependencies:
# abc, typing, RecordTable
# 🔄 Connected Modules / Calls From:
# ReferenceScanner, PostDeletionService, SupabaseRecordStore, Celery sweep tasks

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models.record import RecordTable

Record = Dict[str, Any]


class RecordStore(ABC):
    """
    Repository interface for the relational record store.

    Implementation Notes:
    - Every call except list_owner_ids is scoped by an owner id supplied by the caller
    - Concrete implementations are in the infrastructure layer
    - Failures surface as RepositoryError
    """

    @abstractmethod
    async def find_by_id(self, table: RecordTable, record_id: str, owner_id: str) -> Optional[Record]:
        """
        Get one record owned by `owner_id`.

        Args:
            table: Table to look in
            record_id: Record identifier (the owner id for singleton tables)
            owner_id: Owner the record must belong to

        Returns:
            The row if found and owned, None otherwise
        """
        pass

    @abstractmethod
    async def find_any_by_id(self, table: RecordTable, record_id: str) -> Optional[Record]:
        """
        Get one record regardless of owner.

        Used only to tell "missing" apart from "owned by someone else" before
        an owner-scoped mutation.
        """
        pass

    @abstractmethod
    async def find_all_by_owner(self, table: RecordTable, owner_id: str) -> List[Record]:
        """Get every record in `table` owned by `owner_id`."""
        pass

    @abstractmethod
    async def delete_by_id(self, table: RecordTable, record_id: str, owner_id: str) -> None:
        """
        Delete one owned record.

        Raises:
            RepositoryError: If the delete call fails
        """
        pass

    @abstractmethod
    async def update_by_id(
        self,
        table: RecordTable,
        record_id: str,
        patch: Dict[str, Any],
        owner_id: str,
    ) -> Optional[Record]:
        """Apply `patch` to one owned record and return the updated row, or None if not found."""
        pass

    @abstractmethod
    async def list_owner_ids(self, table: RecordTable) -> List[str]:
        """Distinct owner ids present in `table`. Used by the scheduled sweep fan-out."""
        pass
