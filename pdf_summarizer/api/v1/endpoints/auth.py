"""Registration, login and profile endpoints."""

from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, Request, status

from pdf_summarizer.core.auth import CurrentUser
from pdf_summarizer.core.exceptions import AppError
from pdf_summarizer.dependencies import get_user_service
from pdf_summarizer.schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from pdf_summarizer.services.user_service import UserService, to_user_response
from pdf_summarizer.utils.logging import get_logger
from pdf_summarizer.utils.responses import create_api_response, http_exception_from_error

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    operation_id="register_user",
)
async def register(
    request: Request,
    payload: RegisterRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Dict[str, Any]:
    """Create an account and return it with an access token."""
    try:
        result = await user_service.register(payload)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(data=result, message="User created successfully", request=request)


@router.post(
    "/login",
    summary="Log in",
    operation_id="login_user",
)
async def login(
    request: Request,
    payload: LoginRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Dict[str, Any]:
    """Authenticate with username (or email) and password."""
    try:
        result = await user_service.login(payload)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(data=result, message="Login successful", request=request)


@router.get(
    "/profile",
    summary="Get current user profile",
    operation_id="get_profile",
)
async def get_profile(request: Request, current_user: CurrentUser) -> Dict[str, Any]:
    return create_api_response(
        data={"user": to_user_response(current_user).model_dump(mode="json")},
        message="Profile retrieved successfully",
        request=request,
    )


@router.put(
    "/profile",
    summary="Update current user profile",
    operation_id="update_profile",
)
async def update_profile(
    request: Request,
    payload: ProfileUpdateRequest,
    current_user: CurrentUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Dict[str, Any]:
    try:
        user = await user_service.update_profile(current_user, payload)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(
        data={"user": user.model_dump(mode="json")},
        message="Profile updated successfully",
        request=request,
    )


@router.put(
    "/password",
    summary="Change password",
    operation_id="change_password",
)
async def change_password(
    request: Request,
    payload: PasswordChangeRequest,
    current_user: CurrentUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Dict[str, Any]:
    try:
        await user_service.change_password(current_user, payload)
    except AppError as e:
        raise http_exception_from_error(e, request) from e

    return create_api_response(data=None, message="Password changed successfully", request=request)
