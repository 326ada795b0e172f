"""User account service: registration, login and profile management."""

from typing import Any, Callable, Dict

from pdf_summarizer.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidInputError,
)
from pdf_summarizer.core.security import AuthManager
from pdf_summarizer.models.records import UserRecord
from pdf_summarizer.repositories.user_repository import UserRepository
from pdf_summarizer.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from pdf_summarizer.services.base_service import BaseService
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

REQUIRED_PROFILE_FIELDS = ("full_name", "email")


def to_user_response(user: UserRecord) -> UserResponse:
    return UserResponse(**user.model_dump(exclude={"password_hash"}))


class UserService(BaseService):
    """Service for user account operations."""

    def __init__(self, user_repo: UserRepository, auth_manager: AuthManager):
        super().__init__()
        self.user_repo = user_repo
        self.auth_manager = auth_manager

    def handlers(self) -> Dict[str, Callable[..., Any]]:
        return {
            "register": self._register_logic,
            "login": self._login_logic,
            "update_profile": self._update_profile_logic,
            "change_password": self._change_password_logic,
        }

    async def register(self, payload: RegisterRequest) -> AuthResponse:
        return await self.execute(action="register", payload=payload)

    async def login(self, payload: LoginRequest) -> AuthResponse:
        return await self.execute(action="login", payload=payload)

    async def update_profile(self, user: UserRecord, payload: ProfileUpdateRequest) -> UserResponse:
        return await self.execute(action="update_profile", user=user, payload=payload)

    async def change_password(self, user: UserRecord, payload: PasswordChangeRequest) -> None:
        return await self.execute(action="change_password", user=user, payload=payload)

    def get_user_from_token(self, token: str) -> UserRecord:
        """Resolve a bearer token to an active user.

        Raises:
            AuthenticationError: If the token is invalid or the user is unknown/inactive
        """
        claims = self.auth_manager.validate_token(token)
        user = self.user_repo.get_by_id(claims.sub)

        if user is None:
            raise AuthenticationError("Invalid token. User not found.")
        if not user.is_active:
            raise AuthenticationError("User account is deactivated.")
        return user

    def _register_logic(self, payload: RegisterRequest) -> AuthResponse:
        if self.user_repo.get_by_email(payload.email):
            raise ConflictError("Email already registered")
        if self.user_repo.get_by_username(payload.username):
            raise ConflictError("Username already taken")

        user = self.user_repo.create(
            full_name=payload.full_name,
            username=payload.username,
            email=payload.email,
            password_hash=self.auth_manager.hash_password(payload.password),
            description=payload.description,
        )
        LOGGER.info(f"User registered: {user.id}", extra={"username": user.username})

        return AuthResponse(user=to_user_response(user), token=self.auth_manager.create_token(user.id))

    def _login_logic(self, payload: LoginRequest) -> AuthResponse:
        user = self.user_repo.get_by_username_or_email(payload.username)

        if user is None:
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        if not self.auth_manager.verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        LOGGER.info(f"User logged in: {user.id}")
        return AuthResponse(user=to_user_response(user), token=self.auth_manager.create_token(user.id))

    def _update_profile_logic(self, user: UserRecord, payload: ProfileUpdateRequest) -> UserResponse:
        updates = payload.model_dump(exclude_unset=True)
        # An explicit null leaves a required account field unchanged
        for field in REQUIRED_PROFILE_FIELDS:
            if updates.get(field) is None:
                updates.pop(field, None)

        new_email = updates.get("email")
        if new_email and new_email != user.email and self.user_repo.get_by_email(new_email):
            raise ConflictError("Email already in use")

        updated = self.user_repo.update(user.id, **updates)
        return to_user_response(updated)

    def _change_password_logic(self, user: UserRecord, payload: PasswordChangeRequest) -> None:
        if not self.auth_manager.verify_password(payload.current_password, user.password_hash):
            raise InvalidInputError("Current password is incorrect")

        self.user_repo.update(user.id, password_hash=self.auth_manager.hash_password(payload.new_password))
        LOGGER.info(f"Password changed for user {user.id}")
