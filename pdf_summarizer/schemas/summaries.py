"""Summary request/response schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from pdf_summarizer.models.records import SummaryType


class SingleSummaryRequest(BaseModel):
    document_id: str = Field(..., min_length=1)
    title: Optional[str] = None
    model: Optional[str] = Field(None, description="Override the default model")


class MultipleSummaryRequest(BaseModel):
    document_ids: List[str] = Field(..., description="At least two document IDs")
    title: Optional[str] = None
    model: Optional[str] = None


class DocumentRef(BaseModel):
    id: str
    original_name: str
    page_count: Optional[int] = None


class IndividualSummaryResponse(BaseModel):
    name: str
    summary: str


class SummaryResponse(BaseModel):
    id: str
    title: str
    type: SummaryType
    document_ids: List[str]
    model: str
    tokens_used: int
    processing_time_ms: int
    method: str
    chunk_count: Optional[int] = None
    document_count: Optional[int] = None
    created_at: datetime
    content: Optional[str] = Field(None, description="Omitted in list views")
    documents: Optional[List[DocumentRef]] = None
    individual_summaries: Optional[List[IndividualSummaryResponse]] = None


class ConnectionTestResponse(BaseModel):
    success: bool
    model: Optional[str] = None
    response_preview: Optional[str] = None
    error: Optional[str] = None


class ApiStatusResponse(BaseModel):
    configured: bool
    default_model: str
    context_window: int
    message: str
    connection_test: Optional[ConnectionTestResponse] = None
