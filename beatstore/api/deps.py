"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header

from beatstore.api.middleware.auth import ADMIN_ROLE, AuthError, AuthErrorCode, decode_admin_token
from beatstore.api.middleware.error_handler import (
    AuthenticationError,
    AuthorizationError,
    UpstreamUnavailableError,
)
from beatstore.core.keep_alive import KeepAliveScheduler, get_keep_alive_scheduler
from beatstore.schemas.admin import AdminContext


async def require_admin(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> AdminContext:
    """Require a valid admin bearer token.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        AdminContext: The verified admin identity.

    Raises:
        AuthenticationError: 401 if the token is missing or invalid.
        AuthorizationError: 403 if the token lacks the admin role.
        UpstreamUnavailableError: 503 if admin auth is not configured.
    """
    if not authorization:
        raise AuthenticationError("Authorization header required")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid authorization header format. Expected: Bearer <token>")

    try:
        admin = decode_admin_token(parts[1])
    except AuthError as e:
        if e.code == AuthErrorCode.NOT_CONFIGURED:
            raise UpstreamUnavailableError(e.message) from e
        raise AuthenticationError(e.message) from e

    if admin.role != ADMIN_ROLE:
        raise AuthorizationError("Admin role required")

    return admin


def get_scheduler() -> KeepAliveScheduler:
    """Provide the process-wide keep-alive scheduler."""
    return get_keep_alive_scheduler()


# Type aliases for cleaner dependency injection
AdminUser = Annotated[AdminContext, Depends(require_admin)]
Scheduler = Annotated[KeepAliveScheduler, Depends(get_scheduler)]
