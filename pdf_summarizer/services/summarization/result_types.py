"""Data structures passed through the summarization engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SummaryMethod(str, Enum):
    """Strategy that produced a summary."""

    STUFF = "stuff"
    MAP_REDUCE = "map_reduce"
    HIERARCHICAL = "hierarchical"


@dataclass(frozen=True)
class SummaryOptions:
    """Per-request generation options; ``None`` means use the configured default."""

    model: Optional[str] = None
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None


@dataclass(frozen=True)
class DocumentInput:
    """One named document of a multi-document request."""

    name: str
    text: str


@dataclass(frozen=True)
class IndividualSummary:
    """Per-document summary produced by the hierarchical strategy."""

    name: str
    summary: str


@dataclass(frozen=True)
class SummaryResult:
    """Normalized output of every strategy executor.

    Attributes:
        content: Generated summary, stripped of surrounding whitespace
        model: Model identifier used
        tokens_used: Estimated input plus output tokens (4 chars per token)
        processing_time_ms: Wall-clock duration of the whole strategy
        method: Strategy actually executed
        chunk_count: Number of chunks processed (map_reduce only)
        document_count: Number of input documents (multi-document only)
        individual_summaries: Per-document breakdown (hierarchical only)
    """

    content: str
    model: str
    tokens_used: int
    processing_time_ms: int
    method: SummaryMethod
    chunk_count: Optional[int] = None
    document_count: Optional[int] = None
    individual_summaries: Tuple[IndividualSummary, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "content": self.content,
            "model": self.model,
            "tokens_used": self.tokens_used,
            "processing_time_ms": self.processing_time_ms,
            "method": self.method.value,
        }
        if self.chunk_count is not None:
            data["chunk_count"] = self.chunk_count
        if self.document_count is not None:
            data["document_count"] = self.document_count
        return data


@dataclass(frozen=True)
class ConnectionStatus:
    """Outcome of a connectivity probe against the model backend."""

    success: bool
    model: Optional[str] = None
    response_preview: Optional[str] = None
    error: Optional[str] = None
