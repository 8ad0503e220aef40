from .object_store import ObjectStore
from .record_store import Record, RecordStore

__all__ = ["ObjectStore", "Record", "RecordStore"]
