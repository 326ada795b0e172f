from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from uuid import uuid4

from pdf_summarizer.core.database import JsonRecordStore
from pdf_summarizer.models.records import RecordBase
from pdf_summarizer.utils.logging import get_logger

ModelType = TypeVar("ModelType", bound=RecordBase)

LOGGER = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseRepository(Generic[ModelType]):
    """Base repository implementing common CRUD operations.

    Records are stored as JSON-compatible dicts in one collection of the
    record store and returned as pydantic models. Lookups are linear scans.
    """

    collection: str

    def __init__(self, store: JsonRecordStore, model: Type[ModelType]):
        """Initialize the repository.

        Args:
            store: Shared JSON record store
            model: The record model this repository manages
        """
        self.store = store
        self.model = model
        self.logger = LOGGER

    def _to_model(self, record: Optional[Dict[str, Any]]) -> Optional[ModelType]:
        if record is None:
            return None
        return self.model.model_validate(record)

    def get_by_id(self, id: str) -> Optional[ModelType]:
        """Get a record by its ID.

        Args:
            id: The record ID

        Returns:
            The record if found, None otherwise
        """
        return self._to_model(self.store.find_one(self.collection, lambda r: r.get("id") == id))

    def get_all(self, filters: Optional[Dict[str, Any]] = None) -> List[ModelType]:
        """Get all records, optionally filtered by exact field values."""
        filters = filters or {}
        records = self.store.find_all(
            self.collection,
            lambda r: all(r.get(field) == value for field, value in filters.items()),
        )
        return [self.model.model_validate(r) for r in records]

    def create(self, **kwargs) -> ModelType:
        """Create a new record with a generated ID and timestamps."""
        now = utc_now()
        instance = self.model(id=str(uuid4()), created_at=now, updated_at=now, **kwargs)
        self.store.insert(self.collection, instance.model_dump(mode="json"))
        self.logger.debug(f"Created {self.model.__name__} {instance.id}")
        return instance

    def update(self, id: str, **kwargs) -> Optional[ModelType]:
        """Update an existing record.

        Args:
            id: The ID of the record to update
            **kwargs: Fields and values to update

        Returns:
            The updated record if found, None otherwise
        """
        current = self.get_by_id(id)
        if current is None:
            return None

        updated = current.model_copy(update={**kwargs, "updated_at": utc_now()})
        # Round-trip through validation so enum/datetime fields serialize cleanly
        updated = self.model.model_validate(updated.model_dump())
        record = self.store.update(self.collection, id, updated.model_dump(mode="json"))
        return self._to_model(record)

    def delete(self, id: str) -> bool:
        """Delete a record by ID; returns False when nothing was deleted."""
        deleted = self.store.delete(self.collection, id)
        if deleted:
            self.logger.debug(f"Deleted {self.model.__name__} {id}")
        return deleted

    def list_paginated(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[ModelType], int]:
        """List matching records newest first.

        Returns:
            Tuple of (page of records, total matching records)
        """
        items = sorted(self.get_all(filters), key=lambda r: r.created_at, reverse=True)
        total = len(items)

        if offset:
            items = items[offset:]
        if limit:
            items = items[:limit]
        return items, total
