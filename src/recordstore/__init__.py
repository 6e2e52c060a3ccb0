"""
recordstore - File-backed record collections with CRUD and query support
"""

from recordstore.exceptions import PersistenceError, RecordStoreError, UnknownRecordTypeError
from recordstore.query import RecordQuery, filter_and_sort, parse_query
from recordstore.repository import Repository, UpdateResult, next_id
from recordstore.storage import JsonFileStore, LoadResult, LoadStatus

__all__ = [
    "Repository",
    "UpdateResult",
    "next_id",
    "JsonFileStore",
    "LoadResult",
    "LoadStatus",
    "RecordQuery",
    "parse_query",
    "filter_and_sort",
    "RecordStoreError",
    "PersistenceError",
    "UnknownRecordTypeError",
]
