"""Authentication dependencies for FastAPI routes."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pdf_summarizer.core.exceptions import AuthenticationError
from pdf_summarizer.dependencies import get_user_service
from pdf_summarizer.models.records import UserRecord
from pdf_summarizer.services.user_service import UserService
from pdf_summarizer.utils.logging import get_logger
from pdf_summarizer.utils.responses import create_error_detail, http_exception_from_error

LOGGER = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserRecord:
    """Get the current authenticated user from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired or
            belongs to an unknown or deactivated user
    """
    if not credentials:
        LOGGER.warning("No authorization credentials provided")
        error_detail = create_error_detail(
            title="Unauthorized",
            status=status.HTTP_401_UNAUTHORIZED,
            detail="Access token not provided",
            request=request,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail.model_dump(mode="json"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = user_service.get_user_from_token(credentials.credentials)
    except AuthenticationError as e:
        LOGGER.warning(f"Invalid token: {e}")
        raise http_exception_from_error(e, request) from e

    LOGGER.debug(f"Authenticated user: {user.id} ({user.username})")
    return user


CurrentUser = Annotated[UserRecord, Depends(get_current_user)]
