"""JSON-file record store.

All collections live in one JSON document that is loaded once and rewritten
in full after every mutation. Writes go to a temporary file that atomically
replaces the original; a process-wide lock serializes them.
"""

import copy
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pdf_summarizer.core.exceptions import StorageError
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

COLLECTIONS = ("users", "documents", "summaries")

Record = Dict[str, Any]


class JsonRecordStore:
    """Thread-safe, whole-file JSON persistence for plain dict records."""

    def __init__(self, path: str):
        """Open (or create) the store at ``path``.

        Args:
            path: Location of the JSON database file

        Raises:
            StorageError: If an existing file cannot be parsed
        """
        self.path = Path(path)
        self._lock = threading.RLock()
        self._data: Dict[str, List[Record]] = self._load()

    def _load(self) -> Dict[str, List[Record]]:
        if not self.path.exists():
            data = {name: [] for name in COLLECTIONS}
            self._write(data)
            LOGGER.info(f"Initialized empty record store at {self.path}")
            return data

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read record store {self.path}: {e}", original_error=e) from e

        for name in COLLECTIONS:
            data.setdefault(name, [])
        return data

    def _write(self, data: Dict[str, List[Record]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Failed to write record store {self.path}: {e}", original_error=e) from e

    def reload(self) -> None:
        """Re-read the file from disk, discarding the in-memory copy."""
        with self._lock:
            self._data = self._load()

    def insert(self, collection: str, record: Record) -> Record:
        with self._lock:
            self._collection(collection).append(copy.deepcopy(record))
            self._write(self._data)
            return copy.deepcopy(record)

    def find_one(self, collection: str, predicate: Callable[[Record], bool]) -> Optional[Record]:
        with self._lock:
            for record in self._collection(collection):
                if predicate(record):
                    return copy.deepcopy(record)
            return None

    def find_all(self, collection: str, predicate: Callable[[Record], bool]) -> List[Record]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._collection(collection) if predicate(r)]

    def update(self, collection: str, record_id: str, updates: Record) -> Optional[Record]:
        with self._lock:
            records = self._collection(collection)
            for index, record in enumerate(records):
                if record.get("id") == record_id:
                    records[index] = {**record, **copy.deepcopy(updates)}
                    self._write(self._data)
                    return copy.deepcopy(records[index])
            return None

    def delete(self, collection: str, record_id: str) -> bool:
        with self._lock:
            records = self._collection(collection)
            for index, record in enumerate(records):
                if record.get("id") == record_id:
                    records.pop(index)
                    self._write(self._data)
                    return True
            return False

    def _collection(self, name: str) -> List[Record]:
        if name not in self._data:
            raise StorageError(f"Unknown collection: {name}")
        return self._data[name]
