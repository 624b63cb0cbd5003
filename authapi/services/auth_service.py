"""Authentication primitives: password hashing, JWT issuance and validation."""

import hashlib
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import bcrypt
import jwt
import structlog

from authapi.config import get_settings
from authapi.exceptions import InvalidTokenError
from authapi.models.auth import BCRYPT_MAX_PASSWORD_BYTES, TokenPair
from authapi.models.user import Role

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_refresh_token(raw_token: str) -> str:
    """SHA-256 hex digest stored in place of the raw refresh token."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class AuthService:
    """Service for password hashing and signed access/refresh tokens."""

    def __init__(self):
        self.settings = get_settings()

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise
        """
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
            # Never stored: registration rejects longer passwords
            logger.warning("password_too_long", length_bytes=len(password_bytes))
            return False

        try:
            return bcrypt.checkpw(
                password_bytes,
                password_hash.encode("utf-8"),
            )
        except ValueError:
            # Malformed stored hash
            logger.warning("password_hash_malformed")
            return False

    def create_access_token(self, user_id: str, role: Role) -> str:
        """Create a signed JWT access token.

        Args:
            user_id: User UUID as string (placed in 'sub' claim)
            role: Role included for the role guard

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "type": ACCESS_TOKEN_TYPE,
            "role": Role(role).value,
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + timedelta(minutes=self.settings.at_expire_minutes),
        }
        return jwt.encode(payload, self.settings.at_jwt_secret, algorithm=JWT_ALGORITHM)

    def create_refresh_token(self, user_id: str) -> str:
        """Create a signed JWT refresh token with the refresh secret."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + timedelta(days=self.settings.rt_expire_days),
        }
        return jwt.encode(payload, self.settings.rt_jwt_secret, algorithm=JWT_ALGORITHM)

    def create_token_pair(self, user_id: str, role: Role) -> TokenPair:
        """Issue an access token and a refresh token for the same user."""
        pair = TokenPair(
            access_token=self.create_access_token(user_id, role),
            refresh_token=self.create_refresh_token(user_id),
            token_type="bearer",
            expires_in=self.settings.at_expire_minutes * 60,
        )
        logger.debug(
            "token_pair_created",
            user_id=user_id,
            access_expires_minutes=self.settings.at_expire_minutes,
            refresh_expires_days=self.settings.rt_expire_days,
        )
        return pair

    def validate_access_token(self, token: str) -> dict:
        """Decode and validate a JWT access token.

        Raises:
            InvalidTokenError: If the token is invalid, expired, or not an access token
        """
        return self._decode(token, self.settings.at_jwt_secret, ACCESS_TOKEN_TYPE)

    def validate_refresh_token(self, token: str) -> dict:
        """Decode and validate a JWT refresh token signature and expiry.

        The stored hash comparison happens in TokenService.

        Raises:
            InvalidTokenError: If the token is invalid, expired, or not a refresh token
        """
        return self._decode(token, self.settings.rt_jwt_secret, REFRESH_TOKEN_TYPE)

    def _decode(self, token: str, secret: str, expected_type: str) -> dict:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError(f"{expected_type.capitalize()} token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid {expected_type} token: {e}")

        if payload.get("type") != expected_type:
            raise InvalidTokenError(
                f"Token type mismatch: expected {expected_type}, got {payload.get('type')}"
            )
        return payload
