"""Summarization strategy selector.

Routes each request to a strategy based on its estimated token volume:

    single document   <= threshold  -> stuff
                      >  threshold  -> map_reduce
    several documents <= threshold  -> stuff (multi-document prompt)
                      >  threshold  -> hierarchical

The threshold (12 000 estimated tokens by default) stays well below common
context windows, leaving room for the prompt template and the output.
"""

import asyncio
from typing import Optional, Sequence

from pdf_summarizer.core.config import LLMSettings
from pdf_summarizer.core.exceptions import InvalidInputError, UpstreamUnavailableError
from pdf_summarizer.services.summarization.result_types import (
    DocumentInput,
    SummaryOptions,
    SummaryResult,
)
from pdf_summarizer.services.summarization.strategies import (
    HierarchicalExecutor,
    MapReduceExecutor,
    ModelInvoker,
    StuffExecutor,
    format_documents,
)
from pdf_summarizer.services.summarization.text_chunker import TextChunker
from pdf_summarizer.services.summarization.token_estimator import estimate_tokens
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

MIN_DOCUMENTS = 2


class SummarizationOrchestrator:
    """Chooses and runs the summarization strategy for a request.

    Stateless between calls: each request gets its own concurrency limiter,
    so concurrent requests share nothing but the injected collaborators.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        llm_settings: LLMSettings,
        chunker: Optional[TextChunker] = None,
    ):
        """Initialize the orchestrator.

        Args:
            invoker: Model invoker (real client or a stub in tests)
            llm_settings: Threshold, chunking and generation defaults
            chunker: Optional chunker override; built from settings otherwise
        """
        self.settings = llm_settings
        self.token_threshold = llm_settings.token_threshold
        self.chunker = chunker or TextChunker(
            chunk_size=llm_settings.chunk_size,
            chunk_overlap=llm_settings.chunk_overlap,
        )

        self.stuff = StuffExecutor(invoker, llm_settings)
        self.map_reduce = MapReduceExecutor(invoker, llm_settings, self.chunker)
        self.hierarchical = HierarchicalExecutor(invoker, llm_settings, self._summarize_single)

    async def summarize_single(
        self, text: str, options: Optional[SummaryOptions] = None
    ) -> SummaryResult:
        """Summarize one document's text.

        Raises:
            InvalidInputError: If the text is empty
            UpstreamUnavailableError: If the model backend is not configured
            UpstreamError: If any model call fails
        """
        if not text or not text.strip():
            raise InvalidInputError("Document has no text content to summarize")
        self._ensure_configured()

        options = options or SummaryOptions()
        LOGGER.info(f"Generating single summary with {options.model or self.settings.default_model}")
        return await self._summarize_single(text, options, self._new_limiter())

    async def summarize_multiple(
        self, documents: Sequence[DocumentInput], options: Optional[SummaryOptions] = None
    ) -> SummaryResult:
        """Produce one integrated summary of several documents.

        Args:
            documents: At least two named documents, in the order to present them
            options: Generation options

        Raises:
            InvalidInputError: If fewer than two documents are given
            UpstreamUnavailableError: If the model backend is not configured
            UpstreamError: If any model call fails
        """
        if not documents or len(documents) < MIN_DOCUMENTS:
            raise InvalidInputError(f"At least {MIN_DOCUMENTS} documents are required")
        self._ensure_configured()

        options = options or SummaryOptions()
        documents = list(documents)
        LOGGER.info(f"Generating integrated summary for {len(documents)} documents")

        combined_text = format_documents(documents)
        total_tokens = estimate_tokens(combined_text)
        limiter = self._new_limiter()

        if total_tokens > self.token_threshold:
            LOGGER.info(
                f"Documents too large ({total_tokens} tokens), using hierarchical summarization"
            )
            return await self.hierarchical.summarize(documents, options, limiter)

        return await self.stuff.summarize_multiple(
            documents, options, limiter, combined_text=combined_text
        )

    async def _summarize_single(
        self, text: str, options: SummaryOptions, limiter: asyncio.Semaphore
    ) -> SummaryResult:
        # Reentrant: the hierarchical executor calls this once per document.
        estimated_tokens = estimate_tokens(text)

        if estimated_tokens > self.token_threshold:
            LOGGER.info(f"Text too long ({estimated_tokens} tokens), using map-reduce")
            return await self.map_reduce.summarize(text, options, limiter)

        return await self.stuff.summarize_single(text, options, limiter)

    def _ensure_configured(self) -> None:
        if not self.settings.is_configured:
            raise UpstreamUnavailableError("OpenAI API key is not configured")

    def _new_limiter(self) -> asyncio.Semaphore:
        return asyncio.Semaphore(max(1, self.settings.max_concurrency))
