"""
Repository - CRUD operations on a file-backed record collection

Every record carries an integer ``Id``. The collection is read from its
store on first access, kept in memory, and written back in full after each
successful add, update or remove. If the store file does not exist it is
created on demand by the first write.

Outcomes such as an invalid record, a key conflict or an unknown Id are
returned to the caller, never raised.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from recordstore.exceptions import PersistenceError
from recordstore.models.base import RecordModel
from recordstore.query import filter_and_sort, parse_query
from recordstore.settings import get_settings
from recordstore.storage import JsonFileStore, LoadResult, LoadStatus

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Enrichment = Callable[[Record], Record]


class UpdateResult(str, Enum):
    OK = "ok"
    CONFLICT = "conflict"
    NOT_FOUND = "notFound"
    INVALID = "invalid"


def next_id(records: Iterable[Mapping[str, Any]]) -> int:
    """One more than the highest Id in the collection, 1 when it is empty."""
    max_id = 0
    for record in records:
        record_id = record.get("Id")
        if isinstance(record_id, (int, float)) and not isinstance(record_id, bool) and record_id > max_id:
            max_id = record_id
    return int(max_id) + 1


class Repository:
    """File-backed collection of records of one model type"""

    def __init__(
        self,
        model: RecordModel,
        data_root: Optional[Path] = None,
        enrichment: Optional[Enrichment] = None,
        indent: Optional[int] = None,
    ):
        settings = get_settings()
        self.model = model
        self.objects_name = model.resource_name
        root = Path(data_root) if data_root is not None else settings.data_root
        self.store = JsonFileStore(
            root / f"{self.objects_name}.json",
            self.objects_name,
            indent=indent if indent is not None else settings.json_indent,
        )
        self._records: Optional[List[Record]] = None
        self._enrichment = enrichment
        self.load_result: Optional[LoadResult] = None

    # ---- Storage ----

    def set_enrichment(self, enrichment: Optional[Enrichment]) -> None:
        """Install the transform applied to every record returned by reads"""
        self._enrichment = enrichment

    def _load(self) -> Optional[List[Record]]:
        if self._records is None:
            self.load_result = self.store.load()
            if self.load_result.status is not LoadStatus.CORRUPT:
                self._records = self.load_result.records
        return self._records

    def objects(self) -> List[Record]:
        """
        The live collection, loaded on first access.

        While the store is corrupt this returns an empty list and the load is
        retried on the next access.
        """
        records = self._load()
        return records if records is not None else []

    def reload(self) -> None:
        """Forget the in-memory collection so the next access re-reads the store"""
        self._records = None
        self.load_result = None

    def _write(self, previous: List[Record]) -> None:
        # Restore the last persisted state if the write fails
        try:
            self.store.persist(self._records)
        except PersistenceError:
            self._records[:] = previous
            raise

    # ---- Writes ----

    def add(self, candidate: Mapping[str, Any]) -> Optional[Record]:
        """
        Validate, conflict-check, assign an Id and store a new record.

        Returns:
            The stored record, the candidate flagged with ``conflict: True``
            when its key value is taken, or None when it is invalid or the
            write failed.
        """
        try:
            if not self.model.valid(candidate):
                return None

            record = dict(candidate)
            record.pop("conflict", None)
            if self.model.key and self.find_by_field(self.model.key, record.get(self.model.key)) is not None:
                record["conflict"] = True
                return record

            records = self._load()
            if records is None:
                raise RuntimeError(f"{self.objects_name} repository is unreadable: {self.load_result.error}")

            previous = list(records)
            record["Id"] = next_id(records)
            records.append(record)
            self._write(previous)
            logger.info(f"Added {self.model.type_name} {record['Id']}")
            return record
        except Exception as e:
            logger.error(f"Error adding new item in {self.objects_name} repository: {e}", exc_info=True)
            return None

    def update(self, candidate: Mapping[str, Any]) -> UpdateResult:
        """
        Replace the stored record carrying the candidate's Id.

        Checks run in order: invalid, conflict, not found, ok.
        """
        if not self.model.valid(candidate):
            return UpdateResult.INVALID

        record_id = candidate.get("Id")
        if self.model.key:
            holder = self.find_by_field(self.model.key, candidate.get(self.model.key), excluded_id=record_id)
            if holder is not None:
                return UpdateResult.CONFLICT

        records = self.objects()
        for index, existing in enumerate(records):
            if existing.get("Id") == record_id:
                previous = list(records)
                # Keep the stored Id so a lax match such as 1.0 == 1 never changes its type
                records[index] = {**candidate, "Id": existing["Id"]}
                self._write(previous)
                logger.info(f"Updated {self.model.type_name} {record_id}")
                return UpdateResult.OK
        return UpdateResult.NOT_FOUND

    def remove(self, record_id: int) -> bool:
        """Delete the record with this Id; False when there is none"""
        records = self.objects()
        for index, existing in enumerate(records):
            if existing.get("Id") == record_id:
                previous = list(records)
                del records[index]
                self._write(previous)
                logger.info(f"Removed {self.model.type_name} {record_id}")
                return True
        return False

    def remove_by_index(self, indices: Iterable[int]) -> None:
        """Delete the records at these positions with a single write"""
        records = self.objects()
        positions = sorted(set(indices), reverse=True)
        if not positions:
            return

        previous = list(records)
        removed = 0
        for position in positions:
            if 0 <= position < len(records):
                del records[position]
                removed += 1
            else:
                logger.warning(f"Index {position} out of range for {self.objects_name} ({len(previous)} records)")
        if removed:
            self._write(previous)
            logger.info(f"Removed {removed} {self.objects_name} by index")

    # ---- Reads ----

    def _enrich(self, record: Record) -> Record:
        record = dict(record)
        if self._enrichment is not None:
            return self._enrichment(record)
        return record

    def get_all(self, params: Optional[Mapping[str, str]] = None) -> List[Record]:
        """
        All records, enriched, then filtered and sorted per params.

        Args:
            params: Raw query parameters (field filters and ``sort``)
        """
        records = [self._enrich(record) for record in self.objects()]
        if not params:
            return records
        query = parse_query(params, self.model.queryable_fields())
        logger.debug(f"Query on {self.objects_name}: {len(query.filters)} filters, sort={query.sort}")
        return filter_and_sort(records, query)

    def get(self, record_id: int) -> Optional[Record]:
        for record in self.objects():
            if record.get("Id") == record_id:
                return self._enrich(record)
        return None

    def find_by_field(self, field_name: str, value: Any, excluded_id: Optional[int] = None) -> Optional[Record]:
        """First record whose field equals value, skipping the excluded Id"""
        if not field_name:
            return None
        for record in self.objects():
            if field_name in record and record[field_name] == value and record.get("Id") != excluded_id:
                return record
        return None
