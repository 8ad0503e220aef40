from .database.supabase_record_store import SupabaseRecordStore
from .storage.supabase_object_store import SupabaseObjectStore

__all__ = ["SupabaseObjectStore", "SupabaseRecordStore"]
