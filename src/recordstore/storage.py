"""
JSON File Store - Storage engine for one record collection

Each record type lives in a single JSON file holding an array of flat
objects. The file is read in full and rewritten in full; there is no
append or partial update.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from recordstore.exceptions import PersistenceError
from recordstore.io.readers import read_json
from recordstore.io.writers import atomic_write_json

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    CORRUPT = "corrupt"


@dataclass
class LoadResult:
    """
    Outcome of reading a store file.

    EMPTY: the file does not exist yet (records is an empty list).
    LOADED: records holds the parsed collection.
    CORRUPT: the file exists but could not be used; error holds the cause.
    """

    status: LoadStatus
    records: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is not LoadStatus.CORRUPT


class JsonFileStore:
    """Loads and persists a whole collection as one JSON array file"""

    def __init__(self, path: Path, name: str, indent: Optional[int] = None):
        self.path = Path(path)
        self.name = name
        self.indent = indent

    def load(self) -> LoadResult:
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            logger.warning(f"{self.name} repository does not exist. It will be created on demand")
            return LoadResult(LoadStatus.EMPTY)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            logger.error(f"Error while reading {self.name} repository at {self.path}: {e}")
            return LoadResult(LoadStatus.CORRUPT, error=e)

        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            error = ValueError(f"{self.path} does not hold a JSON array of objects")
            logger.error(f"Error while reading {self.name} repository: {error}")
            return LoadResult(LoadStatus.CORRUPT, error=error)

        logger.info(f"Loaded {len(data)} {self.name} from {self.path}")
        return LoadResult(LoadStatus.LOADED, records=data)

    def persist(self, records: List[Dict[str, Any]]) -> None:
        try:
            atomic_write_json(records, self.path, indent=self.indent)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(self.path, e) from e
        logger.debug(f"Wrote {len(records)} {self.name} to {self.path}")
