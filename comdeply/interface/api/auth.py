"""Authentication checks shared by the routers.

The token itself is issued by the administration backend and sent as the
``auth_token`` cookie.
"""

from fastapi import HTTPException, status

from comdeply.domain.service import JWTService
from comdeply.util.jwt import TokenPayload


def require_user(
    jwt_service: JWTService, auth_token: str | None, action: str
) -> TokenPayload:
    """Return the caller's token payload or fail with 401.

    Args:
        jwt_service: JWT service for token verification
        auth_token: JWT token from cookie
        action: What the caller tried to do, for the error message
    """
    payload = jwt_service.get_payload_from_token(auth_token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )
    return payload


def require_admin(
    jwt_service: JWTService, auth_token: str | None, action: str
) -> TokenPayload:
    """Return the caller's token payload if they are an administrator.

    Raises:
        HTTPException: 401 without a valid token, 403 without the admin claim
    """
    payload = require_user(jwt_service, auth_token, action)
    if not payload.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Administrator rights required to {action}",
        )
    return payload
