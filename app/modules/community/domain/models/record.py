# 📄 File: app/modules/community/domain/models/record.py
# 🧭 Purpose (Layman Explanation):
# Lists the kinds of saved things (community questions, plant shares, user profiles) that can point
# at uploaded photos, and which of their fields may hold a photo link.
# 🧪 Purpose (Technical Summary):
# Closed RecordTable enum plus a per-table RecordSchema naming the direct image columns, image-array
# columns, free-text content columns and owner column the reference scanner must read.
# 🔗 Dependencies:
# dataclasses, enum, typing
# 🔄 Connected Modules / Calls From:
# reference_scanner, post_deletion_service, SupabaseRecordStore, celery sweep tasks

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class RecordTable(str, Enum):
    """Record tables whose rows may reference uploaded media."""
    COMMUNITY_QUESTIONS = "community_questions"
    COMMUNITY_PLANT_SHARES = "community_plant_shares"
    PROFILES = "profiles"

    @classmethod
    def deletable_posts(cls) -> List["RecordTable"]:
        """Post tables in lookup order; a post id lives in exactly one of them."""
        return [cls.COMMUNITY_QUESTIONS, cls.COMMUNITY_PLANT_SHARES]

    @property
    def schema(self) -> "RecordSchema":
        return RECORD_SCHEMAS[self]


@dataclass(frozen=True)
class RecordSchema:
    """Which columns of a table can hold storage references."""
    direct_columns: Tuple[str, ...] = ()
    array_columns: Tuple[str, ...] = ()
    content_columns: Tuple[str, ...] = ()
    owner_column: str = "user_id"
    id_column: str = "id"
    singleton_per_owner: bool = False

    @property
    def select_columns(self) -> str:
        """PostgREST select list covering every column the scanner reads."""
        columns = [self.id_column, self.owner_column]
        columns.extend(self.direct_columns)
        columns.extend(self.array_columns)
        columns.extend(self.content_columns)
        return ",".join(dict.fromkeys(columns))


RECORD_SCHEMAS: Dict[RecordTable, RecordSchema] = {
    RecordTable.COMMUNITY_QUESTIONS: RecordSchema(
        direct_columns=("image_url",),
        content_columns=("content",),
    ),
    RecordTable.COMMUNITY_PLANT_SHARES: RecordSchema(
        array_columns=("images_urls",),
        content_columns=("content",),
    ),
    # profiles are keyed by the owner; there is one row per user
    RecordTable.PROFILES: RecordSchema(
        direct_columns=("avatar_url",),
        id_column="user_id",
        singleton_per_owner=True,
    ),
}
