"""
Base Record Model - Contract every record type supplies to a Repository

A model names its record type, optionally declares a key field whose value
must be unique across the collection, and validates candidate records
against a pydantic schema.
"""

import logging
from abc import ABC
from typing import Any, ClassVar, Mapping, Optional, Set, Type

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

# Model descriptors that are never record fields
RESERVED_FIELDS = frozenset({"validator", "key"})


class RecordModel(ABC):
    """Abstract base class for record models"""

    type_name: ClassVar[str]
    schema: ClassVar[Type[BaseModel]]
    key: ClassVar[Optional[str]] = None

    @property
    def resource_name(self) -> str:
        """Plural name used for the store file and the HTTP resource"""
        return f"{self.type_name}s"

    def valid(self, record: Mapping[str, Any]) -> bool:
        """Check a candidate record against the schema"""
        try:
            self.schema.model_validate(dict(record))
        except ValidationError as e:
            logger.debug(f"Invalid {self.type_name}: {e.errors()}")
            return False
        return True

    def queryable_fields(self) -> Set[str]:
        """Field names usable in filters and sort directives"""
        return set(self.schema.model_fields) - RESERVED_FIELDS
