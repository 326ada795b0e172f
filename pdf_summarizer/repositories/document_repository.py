"""Repository for uploaded documents."""

from typing import List, Optional, Tuple

from pdf_summarizer.core.database import JsonRecordStore
from pdf_summarizer.models.records import DocumentRecord, DocumentStatus
from pdf_summarizer.repositories.base_repository import BaseRepository


class DocumentRepository(BaseRepository[DocumentRecord]):
    collection = "documents"

    def __init__(self, store: JsonRecordStore):
        super().__init__(store, DocumentRecord)

    def get_for_user(self, document_id: str, user_id: str) -> Optional[DocumentRecord]:
        """Get a document only if it belongs to ``user_id``."""
        document = self.get_by_id(document_id)
        if document is None or document.user_id != user_id:
            return None
        return document

    def list_by_user(
        self,
        user_id: str,
        status: Optional[DocumentStatus] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[DocumentRecord], int]:
        filters = {"user_id": user_id}
        if status:
            filters["status"] = DocumentStatus(status).value
        return self.list_paginated(filters, limit=limit, offset=offset)
