from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import HTTPException, Request, status

from pdf_summarizer.core.exceptions import (
    AppError,
    AuthenticationError,
    ConflictError,
    ExtractionError,
    InvalidInputError,
    NotFoundError,
    UpstreamError,
    UpstreamUnavailableError,
)
from pdf_summarizer.schemas.common import ApiResponse, ErrorDetail, Pagination, ResponseMeta

# Most specific first; anything else is a 500
ERROR_STATUS_MAP = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST, "Invalid Request"),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (ConflictError, status.HTTP_409_CONFLICT, "Conflict"),
    (ExtractionError, 422, "Extraction Failed"),
    (UpstreamUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable"),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY, "Upstream Error"),
)


def _request_id(request: Optional[Request]) -> str:
    if request and hasattr(request.state, "request_id"):
        return request.state.request_id
    return str(uuid4())


def create_api_response(
    data: Any,
    message: str = "Operation successful",
    status: bool = True,
    request: Optional[Request] = None,
    api_version: str = "v1",
) -> Dict[str, Any]:
    """Create a standardized API response as a dictionary.

    Returns a dict to be compatible with FastAPI's response_model=dict.
    """
    meta = ResponseMeta(
        timestamp=datetime.now(timezone.utc),
        request_id=_request_id(request),
        api_version=api_version,
    )

    data_dict: Dict[str, Any] = {}
    if isinstance(data, dict):
        data_dict = data
    elif hasattr(data, "model_dump"):
        data_dict = data.model_dump(mode="json")
    elif isinstance(data, list):
        data_dict = {"items": [item.model_dump(mode="json") if hasattr(item, "model_dump") else item for item in data]}
    elif data is None:
        data_dict = {}
    else:
        data_dict = {"value": data}

    response = ApiResponse(status=status, message=message, data=data_dict, meta=meta)
    return response.model_dump(mode="json")


def create_error_detail(
    title: str,
    status: int,
    detail: str,
    request: Optional[Request] = None,
    instance: Optional[str] = None,
) -> ErrorDetail:
    """Create a standardized error detail (RFC 7807)."""
    return ErrorDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance or (request.url.path if request else None),
        request_id=_request_id(request),
        timestamp=datetime.now(timezone.utc),
    )


def http_exception_from_error(error: AppError, request: Optional[Request] = None) -> HTTPException:
    """Translate an application error into an HTTPException carrying an ErrorDetail."""
    status_code, title = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
    for error_type, mapped_status, mapped_title in ERROR_STATUS_MAP:
        if isinstance(error, error_type):
            status_code, title = mapped_status, mapped_title
            break

    error_detail = create_error_detail(
        title=title,
        status=status_code,
        detail=error.message,
        request=request,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=error_detail.model_dump(mode="json"), headers=headers)


def build_pagination(total: int, page: int, limit: int) -> Dict[str, Any]:
    total_pages = (total + limit - 1) // limit if limit else 0
    return Pagination(total=total, page=page, limit=limit, total_pages=total_pages).model_dump()
