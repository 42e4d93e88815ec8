"""JWT token utilities."""

from datetime import datetime, timedelta

import jwt
from pydantic import BaseModel

from comdeply.config import AuthSettings
from comdeply.util.clock import utc_now


class TokenPayload(BaseModel):
    """JWT token payload.

    Issued by the authentication system; the comment engine only reads it.
    """

    user_id: str
    name: str
    is_admin: bool = False
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    user_id: str, name: str, settings: AuthSettings, is_admin: bool = False
) -> str:
    """Create a JWT token for the user.

    Args:
        user_id: User ID
        name: Display name shown on comments
        settings: Authentication settings
        is_admin: Whether the user may use the administration routes

    Returns:
        Encoded JWT token
    """
    expiry = utc_now() + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "user_id": user_id,
        "name": name,
        "is_admin": is_admin,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
