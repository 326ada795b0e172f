"""Repository for generated summaries."""

from typing import List, Optional, Tuple

from pdf_summarizer.core.database import JsonRecordStore
from pdf_summarizer.models.records import SummaryRecord, SummaryType
from pdf_summarizer.repositories.base_repository import BaseRepository


class SummaryRepository(BaseRepository[SummaryRecord]):
    collection = "summaries"

    def __init__(self, store: JsonRecordStore):
        super().__init__(store, SummaryRecord)

    def get_for_user(self, summary_id: str, user_id: str) -> Optional[SummaryRecord]:
        summary = self.get_by_id(summary_id)
        if summary is None or summary.user_id != user_id:
            return None
        return summary

    def list_by_user(
        self,
        user_id: str,
        summary_type: Optional[SummaryType] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[SummaryRecord], int]:
        filters = {"user_id": user_id}
        if summary_type:
            filters["type"] = SummaryType(summary_type).value
        return self.list_paginated(filters, limit=limit, offset=offset)
