"""Password hashing and JWT issuance.

Passwords are hashed with Argon2id; access tokens are HS256 JWTs carrying the
user ID in ``sub``.
"""

from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from pydantic import BaseModel

from pdf_summarizer.core.config import AuthSettings
from pdf_summarizer.core.exceptions import AuthenticationError
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TokenPayload(BaseModel):
    """Decoded access token claims."""

    sub: str
    exp: datetime
    iat: datetime


class AuthManager:
    """Hashes passwords and creates/validates access tokens."""

    def __init__(self, auth_settings: AuthSettings):
        self.secret_key = auth_settings.jwt_secret
        self.algorithm = auth_settings.jwt_algorithm
        self.token_expiry = timedelta(hours=auth_settings.token_expiry_hours)
        self.password_hasher = PasswordHasher()

    def hash_password(self, password: str) -> str:
        return self.password_hasher.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return self.password_hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except (VerificationError, InvalidHashError) as e:
            LOGGER.warning(f"Password verification error: {e}")
            return False

    def create_token(self, user_id: str) -> str:
        """Issue an access token for ``user_id``."""
        now = datetime.now(timezone.utc)
        payload = {"sub": user_id, "iat": now, "exp": now + self.token_expiry}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def validate_token(self, token: str) -> TokenPayload:
        """Decode and verify an access token.

        Raises:
            AuthenticationError: If the token is expired or invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Token expired.", original_error=e) from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Invalid token.", original_error=e) from e

        return TokenPayload(**payload)
