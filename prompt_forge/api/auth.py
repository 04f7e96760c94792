"""JWT authentication and password hashing for the HTTP API.

Example:
    from prompt_forge.api.auth import get_current_user, AuthUser

    @router.get("/protected")
    async def protected_route(user: AuthUser = Depends(get_current_user)):
        return {"user_id": user.user_id}
"""

import os
import warnings
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from prompt_forge.core.logging import get_logger

logger = get_logger(__name__)

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

DEV_JWT_SECRET_KEY = "dev-secret-key-change-in-production"
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _load_jwt_secret() -> str:
    """Read JWT_SECRET_KEY, falling back to a dev key outside production.

    Raises:
        RuntimeError: If the key is unset in production.
    """
    secret = os.getenv("JWT_SECRET_KEY")
    if secret:
        return secret
    if os.getenv("ENVIRONMENT", "development").lower() == "production":
        raise RuntimeError("JWT_SECRET_KEY must be set in production")
    warnings.warn(
        "JWT_SECRET_KEY is not set; using an insecure development key",
        UserWarning,
        stacklevel=2,
    )
    return DEV_JWT_SECRET_KEY


JWT_SECRET_KEY = _load_jwt_secret()


@dataclass
class AuthUser:
    """Authenticated user information extracted from a JWT token.

    Attributes:
        user_id: Account identifier (the token subject).
        email: E-mail address at the time the token was issued.
    """

    user_id: str
    email: str | None = None


class TokenData(BaseModel):
    """Schema for token payload."""

    sub: str  # Subject (user_id)
    exp: datetime
    iat: datetime
    email: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Seconds until the token expires")


class AuthError(Exception):
    """A bearer token could not be accepted."""

    def __init__(self, message: str, code: str = "AUTH_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> bytes:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())


def verify_password(password: str, password_hash: bytes) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash)
    except ValueError:
        # Malformed stored hash
        logger.warning("password_hash_invalid")
        return False


def create_access_token(
    user_id: str,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a JWT whose subject is the account ID.

    Args:
        user_id: Account ID, stored as the "sub" claim.
        email: Optional e-mail claim.
        expires_delta: Lifetime. Defaults to JWT_EXPIRATION_HOURS.
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta if expires_delta is not None else timedelta(hours=JWT_EXPIRATION_HOURS)

    claims: dict[str, Any] = {"sub": user_id, "iat": issued_at, "exp": issued_at + lifetime}
    if email:
        claims["email"] = email
    return jwt.encode(claims, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def issue_token(user_id: str, email: str | None = None) -> TokenResponse:
    """Create a token with the default lifetime, wrapped for the API."""
    return TokenResponse(
        access_token=create_access_token(user_id, email),
        expires_in=JWT_EXPIRATION_HOURS * 3600,
    )


def decode_access_token(token: str) -> TokenData:
    """Verify a JWT and return its claims.

    Raises:
        AuthError: TOKEN_EXPIRED or INVALID_TOKEN.
    """
    try:
        claims = jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", "TOKEN_EXPIRED") from e
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {e}", "INVALID_TOKEN") from e
    return TokenData.model_validate(claims)


def _unauthorized(error: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "code": code},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthUser:
    """FastAPI dependency resolving the bearer token to an AuthUser.

    Raises:
        HTTPException: 401 when the token is missing, expired or invalid.
    """
    if credentials is None:
        raise _unauthorized("Authentication required", "AUTH_REQUIRED")

    try:
        token_data = decode_access_token(credentials.credentials)
    except AuthError as e:
        logger.warning("authentication_failed", error=e.message, code=e.code)
        raise _unauthorized(e.message, e.code) from e

    logger.debug("user_authenticated", user_id=token_data.sub)
    return AuthUser(user_id=token_data.sub, email=token_data.email)
