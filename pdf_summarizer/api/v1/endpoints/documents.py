"""Document upload, listing, download and deletion endpoints."""

from typing import Annotated, Any, Dict, List, Optional

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Query,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import FileResponse, PlainTextResponse

from pdf_summarizer.core.auth import CurrentUser
from pdf_summarizer.core.exceptions import AppError
from pdf_summarizer.dependencies import get_document_service
from pdf_summarizer.models.records import DocumentRecord, DocumentStatus
from pdf_summarizer.schemas.documents import DeleteDocumentsRequest, DocumentResponse
from pdf_summarizer.services.document_service import DocumentService
from pdf_summarizer.utils.logging import get_logger
from pdf_summarizer.utils.responses import (
    build_pagination,
    create_api_response,
    http_exception_from_error,
)

LOGGER = get_logger(__name__)

router = APIRouter()


def to_document_response(document: DocumentRecord, include_text: bool = False) -> Dict[str, Any]:
    response = DocumentResponse.model_validate(document.model_dump())
    exclude = None if include_text else {"extracted_text"}
    return response.model_dump(mode="json", exclude=exclude)


async def _upload(
    request: Request,
    files: List[UploadFile],
    user_id: str,
    document_service: DocumentService,
    background_tasks: BackgroundTasks,
) -> List[DocumentRecord]:
    try:
        documents = await document_service.upload_documents(files, user_id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    for document in documents:
        background_tasks.add_task(document_service.process_document, document.id)
    return documents


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    summary="Upload a PDF document",
    operation_id="upload_document",
)
async def upload_document(
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    pdf: UploadFile = File(..., description="PDF file to upload"),
) -> Dict[str, Any]:
    """Upload one PDF. Text extraction runs in the background."""
    documents = await _upload(request, [pdf], current_user.id, document_service, background_tasks)

    return create_api_response(
        data={"document": to_document_response(documents[0])},
        message="File uploaded successfully. Processing in background.",
        request=request,
    )


@router.post(
    "/upload-multiple",
    status_code=status.HTTP_201_CREATED,
    summary="Upload several PDF documents",
    operation_id="upload_documents",
)
async def upload_documents(
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    pdfs: List[UploadFile] = File(..., description="PDF files to upload"),
) -> Dict[str, Any]:
    documents = await _upload(request, pdfs, current_user.id, document_service, background_tasks)

    return create_api_response(
        data={"documents": [to_document_response(d) for d in documents]},
        message=f"{len(documents)} files uploaded successfully. Processing in background.",
        request=request,
    )


@router.get(
    "/",
    summary="List documents",
    operation_id="list_documents",
)
def list_documents(
    request: Request,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    status_filter: Optional[DocumentStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> Dict[str, Any]:
    """List the current user's documents, newest first."""
    documents, total = document_service.list_documents(
        current_user.id, status=status_filter, page=page, limit=limit
    )

    return create_api_response(
        data={
            "documents": [to_document_response(d) for d in documents],
            "pagination": build_pagination(total, page, limit),
        },
        message="Documents retrieved successfully",
        request=request,
    )


@router.delete(
    "/",
    summary="Delete several documents",
    operation_id="delete_documents",
)
def delete_documents(
    request: Request,
    payload: DeleteDocumentsRequest,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> Dict[str, Any]:
    deleted = document_service.delete_documents(payload.ids, current_user.id)

    return create_api_response(
        data={"deleted_count": deleted},
        message=f"{deleted} documents deleted successfully",
        request=request,
    )


@router.get(
    "/{document_id}",
    summary="Get document details",
    operation_id="get_document",
)
def get_document(
    request: Request,
    document_id: str,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    include_text: bool = Query(False, description="Include the extracted text"),
) -> Dict[str, Any]:
    try:
        document = document_service.get_document(document_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(
        data={"document": to_document_response(document, include_text=include_text)},
        message="Document details retrieved successfully",
        request=request,
    )


@router.get(
    "/{document_id}/download",
    summary="Download the original PDF",
    operation_id="download_document",
    response_class=FileResponse,
)
def download_document(
    request: Request,
    document_id: str,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> FileResponse:
    try:
        document = document_service.get_document_file(document_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return FileResponse(
        document.file_path,
        media_type=document.mime_type,
        filename=document.original_name,
    )


@router.get(
    "/{document_id}/download-text",
    summary="Download the extracted text",
    operation_id="download_document_text",
    response_class=PlainTextResponse,
)
def download_document_text(
    request: Request,
    document_id: str,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> PlainTextResponse:
    try:
        filename, text = document_service.get_document_text(document_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete(
    "/{document_id}",
    summary="Delete document",
    operation_id="delete_document",
)
def delete_document(
    request: Request,
    document_id: str,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> Dict[str, Any]:
    """Delete the document record and its stored file."""
    try:
        document_service.delete_document(document_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(data=None, message="Document deleted successfully", request=request)


@router.post(
    "/{document_id}/reprocess",
    summary="Run text extraction again",
    operation_id="reprocess_document",
)
def reprocess_document(
    request: Request,
    document_id: str,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> Dict[str, Any]:
    try:
        document = document_service.mark_for_reprocessing(document_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    background_tasks.add_task(document_service.process_document, document.id)
    return create_api_response(
        data={"document": to_document_response(document)},
        message="Document reprocessing started",
        request=request,
    )
