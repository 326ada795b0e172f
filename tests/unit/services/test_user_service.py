"""Tests for account management and token handling."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from pdf_summarizer.core.exceptions import AuthenticationError, ConflictError, InvalidInputError
from pdf_summarizer.repositories import UserRepository
from pdf_summarizer.schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from pdf_summarizer.services.user_service import UserService


@pytest.fixture
def user_service(record_store, auth_manager) -> UserService:
    return UserService(UserRepository(record_store), auth_manager)


def registration(username="alice", email="alice@example.com", password="secret123") -> RegisterRequest:
    return RegisterRequest(full_name="Alice Example", username=username, email=email, password=password)


class TestAuthManager:
    def test_password_hash_round_trip(self, auth_manager):
        password_hash = auth_manager.hash_password("secret123")

        assert password_hash != "secret123"
        assert auth_manager.verify_password("secret123", password_hash)
        assert not auth_manager.verify_password("wrong", password_hash)
        assert not auth_manager.verify_password("secret123", "not-a-hash")

    def test_token_carries_user_id(self, auth_manager):
        token = auth_manager.create_token("user-42")
        assert auth_manager.validate_token(token).sub == "user-42"

    def test_expired_token(self, auth_manager):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "user-42", "iat": past, "exp": past + timedelta(hours=1)},
            auth_manager.secret_key,
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError, match="Token expired"):
            auth_manager.validate_token(token)

    def test_tampered_token(self, auth_manager):
        token = jwt.encode(
            {"sub": "user-42", "iat": datetime.now(timezone.utc), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "a-completely-different-secret-0123456789",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError, match="Invalid token"):
            auth_manager.validate_token(token)


class TestUserService:
    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, user_service, auth_manager):
        result = await user_service.register(registration())

        assert result.user.username == "alice"
        assert result.token_type == "bearer"
        assert auth_manager.validate_token(result.token).sub == result.user.id
        assert "password_hash" not in result.user.model_dump()

    @pytest.mark.asyncio
    async def test_duplicate_email_or_username(self, user_service):
        await user_service.register(registration())

        with pytest.raises(ConflictError):
            await user_service.register(registration(username="other"))
        with pytest.raises(ConflictError):
            await user_service.register(registration(email="other@example.com"))

    @pytest.mark.asyncio
    async def test_login_with_username_or_email(self, user_service):
        await user_service.register(registration())

        by_name = await user_service.login(LoginRequest(username="alice", password="secret123"))
        by_email = await user_service.login(LoginRequest(username="alice@example.com", password="secret123"))

        assert by_name.user.id == by_email.user.id

    @pytest.mark.asyncio
    async def test_login_rejects_bad_credentials(self, user_service):
        await user_service.register(registration())

        with pytest.raises(AuthenticationError):
            await user_service.login(LoginRequest(username="alice", password="wrong"))
        with pytest.raises(AuthenticationError):
            await user_service.login(LoginRequest(username="nobody", password="secret123"))

    @pytest.mark.asyncio
    async def test_deactivated_user_cannot_log_in(self, user_service):
        result = await user_service.register(registration())
        user_service.user_repo.update(result.user.id, is_active=False)

        with pytest.raises(AuthenticationError):
            await user_service.login(LoginRequest(username="alice", password="secret123"))
        with pytest.raises(AuthenticationError):
            user_service.get_user_from_token(result.token)

    @pytest.mark.asyncio
    async def test_update_profile(self, user_service):
        result = await user_service.register(registration())
        await user_service.register(registration(username="bob", email="bob@example.com"))
        user = user_service.user_repo.get_by_id(result.user.id)

        updated = await user_service.update_profile(user, ProfileUpdateRequest(description="Analyst"))
        assert updated.description == "Analyst"
        assert updated.full_name == "Alice Example"

        with pytest.raises(ConflictError):
            await user_service.update_profile(user, ProfileUpdateRequest(email="bob@example.com"))

    @pytest.mark.asyncio
    async def test_update_profile_ignores_null_required_fields(self, user_service):
        result = await user_service.register(registration())
        user = user_service.user_repo.get_by_id(result.user.id)

        updated = await user_service.update_profile(user, ProfileUpdateRequest(full_name=None, email=None))

        assert updated.full_name == "Alice Example"
        assert updated.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_change_password(self, user_service):
        result = await user_service.register(registration())
        user = user_service.user_repo.get_by_id(result.user.id)

        with pytest.raises(InvalidInputError):
            await user_service.change_password(
                user, PasswordChangeRequest(current_password="wrong", new_password="newsecret")
            )

        await user_service.change_password(
            user, PasswordChangeRequest(current_password="secret123", new_password="newsecret")
        )
        login = await user_service.login(LoginRequest(username="alice", password="newsecret"))
        assert login.user.id == user.id
