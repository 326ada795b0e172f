"""Strategy executors: single-pass ("stuff"), map-reduce and hierarchical.

Each executor runs one summarization algorithm end to end and returns a
``SummaryResult``. Model calls inside one request share a semaphore that is
held only for the duration of a single invocation, so the hierarchical
strategy can recurse into map-reduce without starving itself.

Any failed invocation aborts the whole strategy; partial summaries are never
returned.
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, TypeVar

from pdf_summarizer.core.config import LLMSettings
from pdf_summarizer.core.llm_client import InvocationResult
from pdf_summarizer.services.summarization import prompts
from pdf_summarizer.services.summarization.result_types import (
    DocumentInput,
    IndividualSummary,
    SummaryMethod,
    SummaryOptions,
    SummaryResult,
)
from pdf_summarizer.services.summarization.text_chunker import TextChunker
from pdf_summarizer.services.summarization.token_estimator import estimate_tokens
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


class ModelInvoker(Protocol):
    """Anything that can turn a prompt into generated text."""

    async def invoke(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> InvocationResult:
        ...


SingleSummarizer = Callable[[str, SummaryOptions, asyncio.Semaphore], Awaitable[SummaryResult]]


def format_documents(documents: Sequence[DocumentInput]) -> str:
    """Concatenate documents, each under a header naming its source."""
    return prompts.SECTION_SEPARATOR.join(
        f"{prompts.DOCUMENT_HEADER.format(index=i, name=doc.name)}\n{doc.text}"
        for i, doc in enumerate(documents, start=1)
    )


def format_summaries(summaries: Sequence[IndividualSummary]) -> str:
    """Concatenate per-document summaries, each under a labelled header."""
    return prompts.SECTION_SEPARATOR.join(
        f"{prompts.SUMMARY_HEADER.format(index=i, name=item.name)}\n{item.summary}"
        for i, item in enumerate(summaries, start=1)
    )


async def gather_in_order(coros: Sequence[Awaitable[T]]) -> List[T]:
    """Await all coroutines concurrently, returning results in input order.

    The first failure cancels the remaining calls and is re-raised.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class StrategyExecutor:
    """Shared invocation plumbing for the strategy executors."""

    method: SummaryMethod

    def __init__(self, invoker: ModelInvoker, llm_settings: LLMSettings):
        self.invoker = invoker
        self.settings = llm_settings

    def resolve_model(self, options: SummaryOptions) -> str:
        return options.model or self.settings.default_model

    async def invoke(
        self,
        prompt: str,
        options: SummaryOptions,
        limiter: asyncio.Semaphore,
        default_max_tokens: int,
    ) -> str:
        """Invoke the model once while holding a concurrency slot."""
        async with limiter:
            result = await self.invoker.invoke(
                prompt,
                model=self.resolve_model(options),
                temperature=self.settings.temperature if options.temperature is None else options.temperature,
                max_output_tokens=options.max_output_tokens or default_max_tokens,
            )
        return result.text

    def render(self, template: str, **slots) -> str:
        return template.format(language=self.settings.summary_language, **slots)


class StuffExecutor(StrategyExecutor):
    """Single-pass summarization: the whole input goes into one prompt."""

    method = SummaryMethod.STUFF

    async def summarize_single(
        self, text: str, options: SummaryOptions, limiter: asyncio.Semaphore
    ) -> SummaryResult:
        start = time.perf_counter()
        prompt = self.render(prompts.SINGLE_DOCUMENT_PROMPT, text=text)

        summary = await self.invoke(prompt, options, limiter, self.settings.max_output_tokens)

        duration = _elapsed_ms(start)
        LOGGER.info(f"Single-pass summary generated in {duration}ms")
        return SummaryResult(
            content=summary.strip(),
            model=self.resolve_model(options),
            tokens_used=estimate_tokens(text) + estimate_tokens(summary),
            processing_time_ms=duration,
            method=self.method,
        )

    async def summarize_multiple(
        self,
        documents: Sequence[DocumentInput],
        options: SummaryOptions,
        limiter: asyncio.Semaphore,
        combined_text: Optional[str] = None,
    ) -> SummaryResult:
        start = time.perf_counter()
        documents_text = combined_text if combined_text is not None else format_documents(documents)
        prompt = self.render(
            prompts.MULTI_DOCUMENT_PROMPT, count=len(documents), documents=documents_text
        )

        summary = await self.invoke(prompt, options, limiter, self.settings.multi_max_output_tokens)

        duration = _elapsed_ms(start)
        LOGGER.info(f"Integrated single-pass summary of {len(documents)} documents generated in {duration}ms")
        return SummaryResult(
            content=summary.strip(),
            model=self.resolve_model(options),
            tokens_used=estimate_tokens(documents_text) + estimate_tokens(summary),
            processing_time_ms=duration,
            method=self.method,
            document_count=len(documents),
        )


class MapReduceExecutor(StrategyExecutor):
    """Chunked summarization: summarize each chunk, then combine the summaries."""

    method = SummaryMethod.MAP_REDUCE

    def __init__(self, invoker: ModelInvoker, llm_settings: LLMSettings, chunker: TextChunker):
        super().__init__(invoker, llm_settings)
        self.chunker = chunker

    async def summarize(
        self, text: str, options: SummaryOptions, limiter: asyncio.Semaphore
    ) -> SummaryResult:
        start = time.perf_counter()

        chunks = self.chunker.split_chunks(text)
        LOGGER.info(f"Map-reduce: split text into {len(chunks)} chunks")

        # Map: chunk summaries come back in ascending chunk index order
        chunk_summaries = await gather_in_order([
            self.invoke(
                self.render(prompts.MAP_PROMPT, text=chunk.text),
                options,
                limiter,
                self.settings.max_output_tokens,
            )
            for chunk in chunks
        ])

        # Reduce
        combined = prompts.SECTION_SEPARATOR.join(summary.strip() for summary in chunk_summaries)
        final_summary = await self.invoke(
            self.render(prompts.REDUCE_PROMPT, text=combined),
            options,
            limiter,
            self.settings.max_output_tokens,
        )

        duration = _elapsed_ms(start)
        LOGGER.info(f"Map-reduce summary of {len(chunks)} chunks generated in {duration}ms")
        return SummaryResult(
            content=final_summary.strip(),
            model=self.resolve_model(options),
            tokens_used=estimate_tokens(text) + estimate_tokens(final_summary),
            processing_time_ms=duration,
            method=self.method,
            chunk_count=len(chunks),
        )


class HierarchicalExecutor(StrategyExecutor):
    """Multi-document summarization: summarize each document, then combine."""

    method = SummaryMethod.HIERARCHICAL

    def __init__(
        self,
        invoker: ModelInvoker,
        llm_settings: LLMSettings,
        summarize_single: SingleSummarizer,
    ):
        """Initialize the executor.

        Args:
            invoker: Model invoker for the combine step
            llm_settings: Generation defaults
            summarize_single: Single-document entry point of the selector, used
                for every individual document so large ones go through map-reduce
        """
        super().__init__(invoker, llm_settings)
        self.summarize_single = summarize_single

    async def summarize(
        self,
        documents: Sequence[DocumentInput],
        options: SummaryOptions,
        limiter: asyncio.Semaphore,
    ) -> SummaryResult:
        start = time.perf_counter()
        LOGGER.info(f"Hierarchical summarization of {len(documents)} documents")

        individual_options = SummaryOptions(
            model=options.model,
            temperature=options.temperature,
            max_output_tokens=self.settings.individual_max_output_tokens,
        )
        results = await gather_in_order([
            self.summarize_single(doc.text, individual_options, limiter)
            for doc in documents
        ])
        individual = tuple(
            IndividualSummary(name=doc.name, summary=result.content)
            for doc, result in zip(documents, results)
        )

        summaries_text = format_summaries(individual)
        final_summary = await self.invoke(
            self.render(
                prompts.HIERARCHICAL_COMBINE_PROMPT, count=len(documents), summaries=summaries_text
            ),
            options,
            limiter,
            self.settings.max_output_tokens,
        )

        duration = _elapsed_ms(start)
        LOGGER.info(f"Hierarchical summary completed in {duration}ms")
        return SummaryResult(
            content=final_summary.strip(),
            model=self.resolve_model(options),
            tokens_used=estimate_tokens(summaries_text) + estimate_tokens(final_summary),
            processing_time_ms=duration,
            method=self.method,
            document_count=len(documents),
            individual_summaries=individual,
        )
