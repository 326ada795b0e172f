"""Persisted record models for users, documents and summaries."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DocumentStatus(str, Enum):
    """Text extraction state of an uploaded document."""

    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class SummaryType(str, Enum):
    """Whether a summary covers one or several documents."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class RecordBase(BaseModel):
    """Fields every stored record carries."""

    id: str
    created_at: datetime
    updated_at: datetime


class UserRecord(RecordBase):
    full_name: str
    username: str
    email: str
    password_hash: str
    description: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool = True


class DocumentRecord(RecordBase):
    user_id: str
    original_name: str
    stored_name: str
    file_path: str
    file_size: int
    mime_type: str = "application/pdf"
    status: DocumentStatus = DocumentStatus.PENDING
    extracted_text: Optional[str] = None
    page_count: Optional[int] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None


class SummaryRecord(RecordBase):
    user_id: str
    title: str
    content: str
    type: SummaryType
    document_ids: List[str] = Field(default_factory=list)
    model: str
    tokens_used: int
    processing_time_ms: int
    method: str
    chunk_count: Optional[int] = None
    document_count: Optional[int] = None
