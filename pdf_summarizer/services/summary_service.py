"""Summary service: generates, stores and lists document summaries."""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pdf_summarizer.core.config import LLMSettings, get_model_info
from pdf_summarizer.core.exceptions import (
    InvalidInputError,
    NotFoundError,
    UpstreamUnavailableError,
)
from pdf_summarizer.models.records import (
    DocumentRecord,
    DocumentStatus,
    SummaryRecord,
    SummaryType,
)
from pdf_summarizer.repositories.document_repository import DocumentRepository
from pdf_summarizer.repositories.summary_repository import SummaryRepository
from pdf_summarizer.schemas.summaries import (
    ApiStatusResponse,
    ConnectionTestResponse,
    DocumentRef,
    IndividualSummaryResponse,
    SummaryResponse,
)
from pdf_summarizer.services.base_service import BaseService
from pdf_summarizer.services.summarization import (
    ConnectivityProbe,
    DocumentInput,
    SummarizationOrchestrator,
    SummaryOptions,
    SummaryResult,
)
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)


def to_summary_response(
    summary: SummaryRecord,
    include_content: bool = True,
    documents: Optional[List[DocumentRecord]] = None,
    result: Optional[SummaryResult] = None,
) -> SummaryResponse:
    """Build the API view of a stored summary."""
    response = SummaryResponse(
        **summary.model_dump(exclude={"content", "user_id", "updated_at"}),
        content=summary.content if include_content else None,
    )
    if documents is not None:
        response.documents = [
            DocumentRef(id=d.id, original_name=d.original_name, page_count=d.page_count)
            for d in documents
        ]
    if result is not None and result.individual_summaries:
        response.individual_summaries = [
            IndividualSummaryResponse(name=s.name, summary=s.summary)
            for s in result.individual_summaries
        ]
    return response


def is_summarizable(document: DocumentRecord) -> bool:
    return document.status == DocumentStatus.PROCESSED and bool(document.extracted_text)


class SummaryService(BaseService):
    """Service for summary generation and management."""

    def __init__(
        self,
        doc_repo: DocumentRepository,
        summary_repo: SummaryRepository,
        orchestrator: SummarizationOrchestrator,
        probe: ConnectivityProbe,
        llm_settings: LLMSettings,
    ):
        super().__init__()
        self.doc_repo = doc_repo
        self.summary_repo = summary_repo
        self.orchestrator = orchestrator
        self.probe = probe
        self.settings = llm_settings

    def handlers(self) -> Dict[str, Callable[..., Any]]:
        return {
            "create_single": self._create_single_logic,
            "create_multiple": self._create_multiple_logic,
        }

    def validate(self, action: str, **kwargs) -> None:
        if not self.settings.is_configured:
            raise UpstreamUnavailableError(
                "OpenAI API key is not configured. Configure OPENAI_API_KEY to use summaries."
            )
        if action == "create_multiple" and len(kwargs.get("document_ids") or []) < 2:
            raise InvalidInputError("At least 2 documents are required for an integrated summary")

    async def create_single(
        self,
        user_id: str,
        document_id: str,
        title: Optional[str] = None,
        model: Optional[str] = None,
    ) -> SummaryResponse:
        """Summarize one processed document and store the result.

        Raises:
            UpstreamUnavailableError: If the model backend is not configured
            NotFoundError: If the document does not exist for this user
            InvalidInputError: If the document is not processed or has no text
            UpstreamError: If the model call fails
        """
        return await self.execute(
            action="create_single", user_id=user_id, document_id=document_id, title=title, model=model
        )

    async def create_multiple(
        self,
        user_id: str,
        document_ids: Sequence[str],
        title: Optional[str] = None,
        model: Optional[str] = None,
    ) -> SummaryResponse:
        """Produce one integrated summary of several documents.

        Unknown, foreign, unprocessed or empty documents are skipped; at least
        two usable documents must remain.
        """
        return await self.execute(
            action="create_multiple",
            user_id=user_id,
            document_ids=list(document_ids),
            title=title,
            model=model,
        )

    async def _create_single_logic(
        self, user_id: str, document_id: str, title: Optional[str], model: Optional[str]
    ) -> SummaryResponse:
        document = await asyncio.to_thread(self.doc_repo.get_for_user, document_id, user_id)
        if document is None:
            raise NotFoundError("Document not found")
        if document.status != DocumentStatus.PROCESSED:
            raise InvalidInputError("Document has not been processed yet")
        if not document.extracted_text:
            raise InvalidInputError("Document has no extracted text")

        result = await self.orchestrator.summarize_single(
            document.extracted_text, SummaryOptions(model=model)
        )

        summary = await asyncio.to_thread(
            self._store,
            user_id=user_id,
            title=title or f"Summary of {document.original_name}",
            summary_type=SummaryType.SINGLE,
            documents=[document],
            result=result,
        )
        LOGGER.info(
            f"Single summary created: {summary.id}",
            extra={"document_id": document.id, "method": result.method.value},
        )
        return to_summary_response(summary, documents=[document], result=result)

    async def _create_multiple_logic(
        self, user_id: str, document_ids: List[str], title: Optional[str], model: Optional[str]
    ) -> SummaryResponse:
        documents = await asyncio.to_thread(self._summarizable_documents, document_ids, user_id)

        if len(documents) < 2:
            raise InvalidInputError("At least 2 processed documents are required")

        result = await self.orchestrator.summarize_multiple(
            [DocumentInput(name=d.original_name, text=d.extracted_text) for d in documents],
            SummaryOptions(model=model),
        )

        summary = await asyncio.to_thread(
            self._store,
            user_id=user_id,
            title=title or f"Integrated Summary ({len(documents)} documents)",
            summary_type=SummaryType.MULTIPLE,
            documents=documents,
            result=result,
        )
        LOGGER.info(
            f"Multiple summary created: {summary.id}",
            extra={"document_count": len(documents), "method": result.method.value},
        )
        return to_summary_response(summary, documents=documents, result=result)

    def _summarizable_documents(self, document_ids: List[str], user_id: str) -> List[DocumentRecord]:
        """Owned, processed documents with text, in request order."""
        documents = []
        for document_id in document_ids:
            document = self.doc_repo.get_for_user(document_id, user_id)
            if document is not None and is_summarizable(document):
                documents.append(document)
        return documents

    def _store(
        self,
        user_id: str,
        title: str,
        summary_type: SummaryType,
        documents: List[DocumentRecord],
        result: SummaryResult,
    ) -> SummaryRecord:
        return self.summary_repo.create(
            user_id=user_id,
            title=title,
            content=result.content,
            type=summary_type,
            document_ids=[d.id for d in documents],
            model=result.model,
            tokens_used=result.tokens_used,
            processing_time_ms=result.processing_time_ms,
            method=result.method.value,
            chunk_count=result.chunk_count,
            document_count=result.document_count,
        )

    def list_summaries(
        self,
        user_id: str,
        summary_type: Optional[SummaryType] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[SummaryResponse], int]:
        """List summaries newest first, without their content."""
        offset = (page - 1) * limit
        summaries, total = self.summary_repo.list_by_user(
            user_id, summary_type=summary_type, limit=limit, offset=offset
        )
        return [to_summary_response(s, include_content=False) for s in summaries], total

    def get_summary(self, summary_id: str, user_id: str) -> SummaryResponse:
        """Get a summary with information about its source documents.

        Source documents deleted since are left out of ``documents``.
        """
        summary = self.summary_repo.get_for_user(summary_id, user_id)
        if summary is None:
            raise NotFoundError("Summary not found")

        documents = [
            document
            for document in (self.doc_repo.get_by_id(doc_id) for doc_id in summary.document_ids)
            if document is not None
        ]
        return to_summary_response(summary, documents=documents)

    def delete_summary(self, summary_id: str, user_id: str) -> None:
        summary = self.summary_repo.get_for_user(summary_id, user_id)
        if summary is None:
            raise NotFoundError("Summary not found")
        self.summary_repo.delete(summary.id)
        LOGGER.info(f"Summary deleted: {summary.id}")

    async def get_api_status(self) -> ApiStatusResponse:
        """Report model configuration and, when configured, probe connectivity."""
        model_info = get_model_info(self.settings.default_model)
        configured = self.settings.is_configured

        if not configured:
            return ApiStatusResponse(
                configured=False,
                default_model=self.settings.default_model,
                context_window=model_info["max_tokens"],
                message="OpenAI API key not configured",
            )

        status = await self.probe.test_connection()
        return ApiStatusResponse(
            configured=True,
            default_model=self.settings.default_model,
            context_window=model_info["max_tokens"],
            message="API is working correctly" if status.success else "API connection error",
            connection_test=ConnectionTestResponse(
                success=status.success,
                model=status.model,
                response_preview=status.response_preview,
                error=status.error,
            ),
        )
