"""Document schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from pdf_summarizer.models.records import DocumentStatus


class DocumentResponse(BaseModel):
    id: str
    original_name: str
    file_size: int
    page_count: Optional[int] = None
    status: DocumentStatus
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    extracted_text: Optional[str] = Field(None, description="Only present when requested")


class DeleteDocumentsRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1, description="IDs of the documents to delete")
