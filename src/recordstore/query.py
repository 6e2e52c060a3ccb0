"""
Query mini-language for record collections.

Raw request parameters are parsed once into a RecordQuery:
- ``sort=<field>`` or ``sort=<field>,desc`` orders by one field
- ``<field>=<pattern>`` keeps records whose field matches the pattern as a
  whole, ignoring case, where ``*`` stands for any run of characters

Parameters naming fields the model does not expose are ignored.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

SORT_PARAM = "sort"


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def compare_values(a: Any, b: Any) -> int:
    """Numeric comparison when both values read as numbers, else string comparison."""
    num_a, num_b = _as_number(a), _as_number(b)
    if num_a is not None and num_b is not None:
        left, right = num_a, num_b
    else:
        left, right = _as_text(a), _as_text(b)
    if left > right:
        return 1
    if left < right:
        return -1
    return 0


@dataclass(frozen=True)
class FieldFilter:
    field: str
    pattern: str
    regex: re.Pattern = field(compare=False, repr=False)

    @classmethod
    def from_pattern(cls, field_name: str, pattern: str) -> "FieldFilter":
        body = re.escape(pattern).replace(r"\*", ".*")
        return cls(field_name, pattern, re.compile(body, re.IGNORECASE | re.DOTALL))

    def matches(self, record: Mapping[str, Any]) -> bool:
        return self.regex.fullmatch(_as_text(record.get(self.field))) is not None


@dataclass(frozen=True)
class SortDirective:
    field: str
    descending: bool = False

    @classmethod
    def parse(cls, value: str) -> "SortDirective":
        name, _, suffix = value.rpartition(",")
        if name and suffix.strip().lower() in ("desc", "asc"):
            return cls(name.strip(), suffix.strip().lower() == "desc")
        return cls(value.strip())

    def apply(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        key = cmp_to_key(lambda a, b: compare_values(a.get(self.field), b.get(self.field)))
        return sorted(records, key=key, reverse=self.descending)


@dataclass
class RecordQuery:
    filters: List[FieldFilter] = field(default_factory=list)
    sort: Optional[SortDirective] = None

    @property
    def is_empty(self) -> bool:
        return not self.filters and self.sort is None


def parse_query(params: Optional[Mapping[str, str]], fields: Iterable[str]) -> RecordQuery:
    """
    Build a RecordQuery from raw parameters.

    Args:
        params: Parameter name to raw string value
        fields: Field names the model allows to filter and sort on

    Returns:
        RecordQuery with at most one sort directive (the last one supplied)
    """
    query = RecordQuery()
    if not params:
        return query

    allowed = set(fields)
    for name, value in params.items():
        if value is None:
            continue
        value = str(value)
        if name.lower() == SORT_PARAM:
            directive = SortDirective.parse(value)
            if directive.field in allowed:
                query.sort = directive
            else:
                logger.debug(f"Ignoring sort on unknown field '{directive.field}'")
        elif name in allowed:
            query.filters.append(FieldFilter.from_pattern(name, value))
        else:
            logger.debug(f"Ignoring filter on unknown field '{name}'")
    return query


def filter_and_sort(records: List[Dict[str, Any]], query: RecordQuery) -> List[Dict[str, Any]]:
    """
    Apply a parsed query to a collection.

    Filters combine with AND. The sort is stable, so sorting after filtering
    gives the same order as interleaving them. The input list is left as is.
    """
    result = list(records)
    for field_filter in query.filters:
        result = [record for record in result if field_filter.matches(record)]
        logger.debug(f"Filter {field_filter.field}={field_filter.pattern!r} kept {len(result)} records")
    if query.sort is not None:
        result = query.sort.apply(result)
    return result
