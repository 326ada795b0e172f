"""Summary generation and management endpoints."""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from pdf_summarizer.core.auth import CurrentUser
from pdf_summarizer.core.exceptions import AppError
from pdf_summarizer.dependencies import get_summary_service
from pdf_summarizer.models.records import SummaryType
from pdf_summarizer.schemas.summaries import MultipleSummaryRequest, SingleSummaryRequest
from pdf_summarizer.services.summary_service import SummaryService
from pdf_summarizer.utils.logging import get_logger
from pdf_summarizer.utils.responses import (
    build_pagination,
    create_api_response,
    http_exception_from_error,
)

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/status",
    summary="Model backend status",
    operation_id="get_summary_api_status",
)
async def get_api_status(
    request: Request,
    current_user: CurrentUser,
    summary_service: Annotated[SummaryService, Depends(get_summary_service)],
) -> Dict[str, Any]:
    """Report whether the model backend is configured and reachable."""
    api_status = await summary_service.get_api_status()

    return create_api_response(
        data={"status": api_status.model_dump(mode="json")},
        message="API status retrieved",
        request=request,
    )


@router.post(
    "/single",
    status_code=status.HTTP_201_CREATED,
    summary="Summarize one document",
    operation_id="create_single_summary",
)
async def create_single_summary(
    request: Request,
    payload: SingleSummaryRequest,
    current_user: CurrentUser,
    summary_service: Annotated[SummaryService, Depends(get_summary_service)],
) -> Dict[str, Any]:
    try:
        summary = await summary_service.create_single(
            current_user.id, payload.document_id, title=payload.title, model=payload.model
        )
    except AppError as e:
        LOGGER.warning(f"Single summary failed: {e}", extra={"document_id": payload.document_id})
        raise http_exception_from_error(e, request) from e

    return create_api_response(
        data={"summary": summary.model_dump(mode="json", exclude_none=True)},
        message="Summary created successfully",
        request=request,
    )


@router.post(
    "/multiple",
    status_code=status.HTTP_201_CREATED,
    summary="Summarize several documents together",
    operation_id="create_multiple_summary",
)
async def create_multiple_summary(
    request: Request,
    payload: MultipleSummaryRequest,
    current_user: CurrentUser,
    summary_service: Annotated[SummaryService, Depends(get_summary_service)],
) -> Dict[str, Any]:
    try:
        summary = await summary_service.create_multiple(
            current_user.id, payload.document_ids, title=payload.title, model=payload.model
        )
    except AppError as e:
        LOGGER.warning(f"Multiple summary failed: {e}")
        raise http_exception_from_error(e, request) from e

    return create_api_response(
        data={"summary": summary.model_dump(mode="json", exclude_none=True)},
        message="Integrated summary created successfully",
        request=request,
    )


@router.get(
    "/",
    summary="List summaries",
    operation_id="list_summaries",
)
def list_summaries(
    request: Request,
    current_user: CurrentUser,
    summary_service: Annotated[SummaryService, Depends(get_summary_service)],
    summary_type: Optional[SummaryType] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> Dict[str, Any]:
    summaries, total = summary_service.list_summaries(
        current_user.id, summary_type=summary_type, page=page, limit=limit
    )

    return create_api_response(
        data={
            "summaries": [s.model_dump(mode="json", exclude_none=True) for s in summaries],
            "pagination": build_pagination(total, page, limit),
        },
        message="Summaries retrieved successfully",
        request=request,
    )


@router.get(
    "/{summary_id}",
    summary="Get summary details",
    operation_id="get_summary",
)
def get_summary(
    request: Request,
    summary_id: str,
    current_user: CurrentUser,
    summary_service: Annotated[SummaryService, Depends(get_summary_service)],
) -> Dict[str, Any]:
    try:
        summary = summary_service.get_summary(summary_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(
        data={"summary": summary.model_dump(mode="json", exclude_none=True)},
        message="Summary retrieved successfully",
        request=request,
    )


@router.delete(
    "/{summary_id}",
    summary="Delete summary",
    operation_id="delete_summary",
)
def delete_summary(
    request: Request,
    summary_id: str,
    current_user: CurrentUser,
    summary_service: Annotated[SummaryService, Depends(get_summary_service)],
) -> Dict[str, Any]:
    try:
        summary_service.delete_summary(summary_id, current_user.id)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(data=None, message="Summary deleted successfully", request=request)
