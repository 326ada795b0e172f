"""Summarization engine: strategy selection and execution."""

from pdf_summarizer.services.summarization.connectivity import ConnectivityProbe
from pdf_summarizer.services.summarization.orchestrator import SummarizationOrchestrator
from pdf_summarizer.services.summarization.result_types import (
    ConnectionStatus,
    DocumentInput,
    IndividualSummary,
    SummaryMethod,
    SummaryOptions,
    SummaryResult,
)
from pdf_summarizer.services.summarization.text_chunker import Chunk, TextChunker, split_text
from pdf_summarizer.services.summarization.token_estimator import estimate_tokens

__all__ = [
    "Chunk",
    "ConnectionStatus",
    "ConnectivityProbe",
    "DocumentInput",
    "IndividualSummary",
    "SummarizationOrchestrator",
    "SummaryMethod",
    "SummaryOptions",
    "SummaryResult",
    "TextChunker",
    "estimate_tokens",
    "split_text",
]
