"""Centralized dependency injection for the FastAPI application.

Shared singletons (settings, record store, model client) are cached; services
are built per request from them. Tests replace any of these through
``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from pdf_summarizer.core.config import Settings, settings
from pdf_summarizer.core.database import JsonRecordStore
from pdf_summarizer.core.llm_client import ChatCompletionClient
from pdf_summarizer.core.security import AuthManager
from pdf_summarizer.repositories import DocumentRepository, SummaryRepository, UserRepository
from pdf_summarizer.services.document_service import DocumentService
from pdf_summarizer.services.pdf_service import PDFService
from pdf_summarizer.services.storage_service import StorageService
from pdf_summarizer.services.summarization import ConnectivityProbe, SummarizationOrchestrator
from pdf_summarizer.services.summary_service import SummaryService
from pdf_summarizer.services.user_service import UserService


def get_settings() -> Settings:
    return settings


@lru_cache
def get_record_store() -> JsonRecordStore:
    return JsonRecordStore(settings.storage.db_path)


@lru_cache
def get_llm_client() -> ChatCompletionClient:
    return ChatCompletionClient(settings.llm)


def get_auth_manager(
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> AuthManager:
    return AuthManager(app_settings.auth)


def get_user_repository(
    store: Annotated[JsonRecordStore, Depends(get_record_store)],
) -> UserRepository:
    return UserRepository(store)


def get_document_repository(
    store: Annotated[JsonRecordStore, Depends(get_record_store)],
) -> DocumentRepository:
    return DocumentRepository(store)


def get_summary_repository(
    store: Annotated[JsonRecordStore, Depends(get_record_store)],
) -> SummaryRepository:
    return SummaryRepository(store)


def get_orchestrator(
    client: Annotated[ChatCompletionClient, Depends(get_llm_client)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> SummarizationOrchestrator:
    return SummarizationOrchestrator(client, app_settings.llm)


def get_connectivity_probe(
    client: Annotated[ChatCompletionClient, Depends(get_llm_client)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> ConnectivityProbe:
    return ConnectivityProbe(client, app_settings.llm)


def get_storage_service(
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> StorageService:
    return StorageService(app_settings.storage)


def get_pdf_service() -> PDFService:
    return PDFService()


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    auth_manager: Annotated[AuthManager, Depends(get_auth_manager)],
) -> UserService:
    return UserService(user_repo, auth_manager)


def get_document_service(
    doc_repo: Annotated[DocumentRepository, Depends(get_document_repository)],
    storage_service: Annotated[StorageService, Depends(get_storage_service)],
    pdf_service: Annotated[PDFService, Depends(get_pdf_service)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> DocumentService:
    return DocumentService(doc_repo, storage_service, pdf_service, app_settings.storage)


def get_summary_service(
    doc_repo: Annotated[DocumentRepository, Depends(get_document_repository)],
    summary_repo: Annotated[SummaryRepository, Depends(get_summary_repository)],
    orchestrator: Annotated[SummarizationOrchestrator, Depends(get_orchestrator)],
    probe: Annotated[ConnectivityProbe, Depends(get_connectivity_probe)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> SummaryService:
    return SummaryService(doc_repo, summary_repo, orchestrator, probe, app_settings.llm)
