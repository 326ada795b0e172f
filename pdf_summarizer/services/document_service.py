"""Document service for upload, text extraction and document management."""

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pdf_summarizer.core.config import StorageSettings
from pdf_summarizer.core.exceptions import AppError, InvalidInputError, NotFoundError
from pdf_summarizer.models.records import DocumentRecord, DocumentStatus
from pdf_summarizer.repositories.document_repository import DocumentRepository
from pdf_summarizer.services.base_service import BaseService
from pdf_summarizer.services.pdf_service import PDFService
from pdf_summarizer.services.storage_service import StorageService
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

ALLOWED_EXTENSIONS = {".pdf"}
ALLOWED_MIME_TYPES = {"application/pdf"}


class DocumentService(BaseService):
    """Service for document management operations.

    Uploads are stored immediately with status ``pending``; text extraction
    runs later through ``process_document`` and moves the record to
    ``processed`` or ``failed``.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        storage_service: StorageService,
        pdf_service: PDFService,
        storage_settings: StorageSettings,
    ):
        super().__init__()
        self.doc_repo = doc_repo
        self.storage_service = storage_service
        self.pdf_service = pdf_service
        self.max_file_size = storage_settings.max_file_size
        self.max_files = storage_settings.max_files_per_upload

    def handlers(self) -> Dict[str, Callable[..., Any]]:
        return {"upload_documents": self._upload_documents_logic}

    def validate(self, action: str, **kwargs) -> None:
        if action != "upload_documents":
            return

        files = kwargs.get("files") or []
        if not files:
            raise InvalidInputError("No file uploaded")
        if len(files) > self.max_files:
            raise InvalidInputError(f"Too many files. Maximum is {self.max_files} files at once.")

        for file in files:
            filename = file.filename or ""
            extension = Path(filename).suffix.lower()
            if extension not in ALLOWED_EXTENSIONS or file.content_type not in ALLOWED_MIME_TYPES:
                raise InvalidInputError(f"Only PDF files are allowed: {filename or 'unknown'}")

    async def upload_documents(self, files: Sequence[Any], user_id: str) -> List[DocumentRecord]:
        """Store uploaded PDFs and create pending document records.

        Args:
            files: Uploaded files (FastAPI ``UploadFile``)
            user_id: Owner of the documents

        Returns:
            Created document records, in upload order

        Raises:
            InvalidInputError: If a file is not a PDF, too large, or too many files were sent
        """
        return await self.execute(action="upload_documents", files=list(files), user_id=user_id)

    async def _upload_documents_logic(self, files: List[Any], user_id: str) -> List[DocumentRecord]:
        contents = []
        for file in files:
            content = await file.read()
            if len(content) > self.max_file_size:
                raise InvalidInputError(
                    f"File too large. Maximum size is {self.max_file_size // (1024 * 1024)}MB."
                )
            contents.append((file, content))

        return await asyncio.to_thread(self._persist_uploads, contents, user_id)

    def _persist_uploads(self, contents: List[Tuple[Any, bytes]], user_id: str) -> List[DocumentRecord]:
        documents: List[DocumentRecord] = []
        stored_paths: List[str] = []
        try:
            for file, content in contents:
                stored = self.storage_service.save_bytes(content, user_id, file.filename)
                stored_paths.append(stored.path)

                document = self.doc_repo.create(
                    user_id=user_id,
                    original_name=file.filename,
                    stored_name=stored.stored_name,
                    file_path=stored.path,
                    file_size=stored.size,
                    mime_type=file.content_type,
                    status=DocumentStatus.PENDING,
                )
                documents.append(document)
                LOGGER.info(
                    f"Document created: document_id={document.id}, filename={file.filename}",
                    extra={"user_id": user_id},
                )
        except AppError:
            # Roll back files written for this request
            for path in stored_paths:
                self.storage_service.delete_file(path)
            for document in documents:
                self.doc_repo.delete(document.id)
            raise

        return documents

    def process_document(self, document_id: str) -> Optional[DocumentRecord]:
        """Extract text for a stored document and record the outcome.

        Runs as a background task, so failures are recorded on the document
        (status ``failed`` with ``error_message``) instead of being raised.
        """
        LOGGER.info(f"Starting extraction for document {document_id}")

        document = self.doc_repo.get_by_id(document_id)
        if document is None:
            LOGGER.warning(f"Document {document_id} not found in record store")
            return None

        try:
            extracted = self.pdf_service.extract(document.file_path)
        except Exception as e:
            LOGGER.error(f"Error processing document {document_id}: {e}", exc_info=True)
            return self.doc_repo.update(
                document_id, status=DocumentStatus.FAILED, error_message=str(e)
            )

        LOGGER.info(
            f"Document {document_id} processed: {len(extracted.text)} characters, "
            f"{extracted.page_count} pages"
        )
        return self.doc_repo.update(
            document_id,
            extracted_text=extracted.text,
            page_count=extracted.page_count,
            metadata=extracted.metadata,
            status=DocumentStatus.PROCESSED,
            error_message=None,
        )

    def list_documents(
        self,
        user_id: str,
        status: Optional[DocumentStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[DocumentRecord], int]:
        offset = (page - 1) * limit
        return self.doc_repo.list_by_user(user_id, status=status, limit=limit, offset=offset)

    def get_document(self, document_id: str, user_id: str) -> DocumentRecord:
        """Get a document owned by ``user_id``.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else
        """
        document = self.doc_repo.get_for_user(document_id, user_id)
        if document is None:
            raise NotFoundError("Document not found")
        return document

    def get_document_file(self, document_id: str, user_id: str) -> DocumentRecord:
        document = self.get_document(document_id, user_id)
        if not self.storage_service.exists(document.file_path):
            raise NotFoundError("File not found on server")
        return document

    def get_document_text(self, document_id: str, user_id: str) -> Tuple[str, str]:
        """Return ``(download filename, extracted text)`` for a document."""
        document = self.get_document(document_id, user_id)
        if not document.extracted_text:
            raise InvalidInputError("Document has no extracted text")

        filename = f"{Path(document.original_name).stem}_text.txt"
        return filename, document.extracted_text

    def delete_document(self, document_id: str, user_id: str) -> None:
        document = self.get_document(document_id, user_id)
        self._remove(document)

    def delete_documents(self, document_ids: Sequence[str], user_id: str) -> int:
        """Delete every listed document owned by ``user_id``; unknown IDs are skipped."""
        deleted = 0
        for document_id in document_ids:
            document = self.doc_repo.get_for_user(document_id, user_id)
            if document is not None:
                self._remove(document)
                deleted += 1
        return deleted

    def mark_for_reprocessing(self, document_id: str, user_id: str) -> DocumentRecord:
        """Reset a document to ``pending`` so extraction can run again."""
        self.get_document(document_id, user_id)
        return self.doc_repo.update(document_id, status=DocumentStatus.PENDING, error_message=None)

    def _remove(self, document: DocumentRecord) -> None:
        try:
            self.storage_service.delete_file(document.file_path)
        except AppError as e:
            LOGGER.error(f"Failed to delete file for document {document.id}: {e}")
        self.doc_repo.delete(document.id)
        LOGGER.info(f"Document deleted: {document.id}")
